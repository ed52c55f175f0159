from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

DEFAULT_SUBJECT = "Meeting Summary"


class ShareRequest(BaseModel):
    summary: Optional[str] = None
    recipients: Optional[List[str]] = None
    subject: Optional[str] = None

    # accepted for compatibility with existing clients; not used in the email
    message: Optional[str] = None


class ShareResponse(BaseModel):
    success: bool
    message: str
    recipients: List[str] = Field(default_factory=list)
