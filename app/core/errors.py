from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar, Union

from fastapi.responses import JSONResponse

T = TypeVar("T")


class ErrorKind(str, Enum):
    VALIDATION = "validation"        # caller's fault
    CONFIGURATION = "configuration"  # deployment misconfiguration
    UPSTREAM = "upstream"            # completion API / mail transport failed


STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.CONFIGURATION: 500,
    ErrorKind.UPSTREAM: 500,
}


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    message: str
    details: Optional[str] = None


Result = Union[Ok[T], Err]


def to_error_response(err: Err, request_id: Optional[str] = None) -> JSONResponse:
    """Map a service failure to its HTTP status and `{error, details?}` body."""
    body = {"error": err.message}
    if err.details is not None:
        body["details"] = err.details

    headers = {"X-Request-Id": request_id} if request_id else None
    return JSONResponse(body, status_code=STATUS_BY_KIND[err.kind], headers=headers)
