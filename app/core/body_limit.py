import logging
from typing import Callable

from starlette.datastructures import Headers
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)

TOO_LARGE = "Request body too large"


class BodySizeLimitMiddleware:
    """
    Rejects request bodies above `max_bytes()` with a 413.

    A declared Content-Length is checked up front. Bodies sent without one
    (chunked) are read and counted before the app sees them, then replayed.
    """

    def __init__(self, app: ASGIApp, max_bytes: Callable[[], int]):
        self.app = app
        self.max_bytes = max_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        limit = self.max_bytes()
        content_length = Headers(scope=scope).get("content-length")

        if content_length is not None:
            if content_length.isdigit() and int(content_length) > limit:
                logger.warning(f"body_too_large declared={content_length} limit={limit}")
                await JSONResponse({"error": TOO_LARGE}, status_code=413)(scope, receive, send)
                return
            await self.app(scope, receive, send)
            return

        buffered: list[Message] = []
        received = 0
        while True:
            message = await receive()
            buffered.append(message)
            if message["type"] != "http.request":
                break
            received += len(message.get("body", b""))
            if received > limit:
                logger.warning(f"body_too_large streamed>{limit}")
                await JSONResponse({"error": TOO_LARGE}, status_code=413)(scope, receive, send)
                return
            if not message.get("more_body", False):
                break

        async def replay() -> Message:
            if buffered:
                return buffered.pop(0)
            return await receive()

        await self.app(scope, replay, send)
