import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import List

from fastapi import Depends, FastAPI, Form, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.templating import Jinja2Templates
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.body_limit import BodySizeLimitMiddleware
from app.core.config import get_settings
from app.core.errors import Err, to_error_response
from app.core.logging import configure_logging, new_request_id
from app.core.rate_limit import THROTTLE_MESSAGE, FixedWindowCounterStore
from app.schemas.errors import ErrorResponse
from app.schemas.health import HealthResponse
from app.schemas.share import ShareRequest, ShareResponse
from app.schemas.summarize import DEFAULT_PROMPT_LABEL, SummarizeRequest, SummarizeResponse
from app.services.share import share_summary
from app.services.summarizer import summarize_text
from app.ui import state as ui

logger = logging.getLogger("app")

settings = get_settings()
configure_logging(settings.log_level)

app = FastAPI(title="Notes Summarizer", version="0.1.0")
templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))

app.state.rate_limiter = FixedWindowCounterStore(
    max_requests=settings.rate_limit_max,
    window_seconds=settings.rate_limit_window_seconds,
)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
}
ERROR_RESPONSES = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}


@app.on_event("startup")
def _startup():
    s = get_settings()
    logger.info(f"server_start port={s.port} environment={s.environment}")
    logger.info(f"health_check http://localhost:{s.port}/api/health")


# -------------------------
# Request gating
# -------------------------
# inner to gate_requests, so oversized bodies are still rate limited and tagged
app.add_middleware(BodySizeLimitMiddleware, max_bytes=lambda: get_settings().max_body_bytes)


@app.middleware("http")
async def gate_requests(request: Request, call_next):
    request_id = new_request_id()
    request.state.request_id = request_id
    s = get_settings()

    def reject(status_code: int, error: str, headers: dict | None = None) -> JSONResponse:
        resp = JSONResponse({"error": error}, status_code=status_code, headers=headers)
        resp.headers["X-Request-Id"] = request_id
        resp.headers.update(SECURITY_HEADERS)
        return resp

    # no Origin header (curl, server-to-server) is allowed; so is our own origin,
    # which browsers send on the UI form posts
    origin = request.headers.get("origin")
    own_origin = f"{request.url.scheme}://{request.url.netloc}"
    if origin and origin.rstrip("/") not in s.allowed_origins + [own_origin]:
        logger.warning(f"[{request_id}] cors_rejected origin={origin}")
        return reject(403, "Not allowed by CORS")

    client = request.client.host if request.client else "unknown"
    decision = request.app.state.rate_limiter.hit(client)
    if not decision.allowed:
        return reject(429, THROTTLE_MESSAGE, {"Retry-After": str(decision.reset_in_seconds)})

    response = await call_next(request)
    response.headers["X-Request-Id"] = request_id
    response.headers["RateLimit-Limit"] = str(decision.limit)
    response.headers["RateLimit-Remaining"] = str(max(0, decision.limit - decision.count))
    response.headers.update(SECURITY_HEADERS)
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException):
    if exc.status_code in (404, 405):
        return JSONResponse({"error": "Endpoint not found"}, status_code=404)
    return JSONResponse({"error": str(exc.detail)}, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def invalid_body(request: Request, exc: RequestValidationError):
    request_id = getattr(request.state, "request_id", "-")
    logger.info(f"[{request_id}] invalid_body errors={len(exc.errors())}")
    return JSONResponse({"error": "Invalid request body"}, status_code=400)


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception):
    request_id = getattr(request.state, "request_id", "-")
    logger.exception(f"[{request_id}] unhandled_error: {type(exc).__name__}: {exc}")
    return JSONResponse({"error": "Internal server error"}, status_code=500)


# -------------------------
# API Layer (JSON endpoints)
# -------------------------
@app.get("/api/health", response_model=HealthResponse)
def health():
    return HealthResponse(
        status="OK",
        message="Notes Summarizer API is running",
        timestamp=datetime.now(timezone.utc).isoformat(),
        environment=get_settings().environment,
    )


@app.post("/api/summarize", response_model=SummarizeResponse, responses=ERROR_RESPONSES)
def summarize(req: SummarizeRequest, request: Request):
    request_id = request.state.request_id
    logger.info(
        f"[{request_id}] /api/summarize START chars={len(req.text or '')} "
        f"custom_prompt={req.custom_prompt or 'None provided'!r}"
    )

    result = summarize_text(req.text, req.custom_prompt, request_id)
    if isinstance(result, Err):
        logger.info(f"[{request_id}] /api/summarize FAILED kind={result.kind.value}")
        return to_error_response(result, request_id)

    logger.info(f"[{request_id}] /api/summarize END")
    return SummarizeResponse(
        summary=result.value,
        original_text=req.text,
        custom_prompt=req.custom_prompt or DEFAULT_PROMPT_LABEL,
    )


@app.post("/api/share", response_model=ShareResponse, responses=ERROR_RESPONSES)
async def share(req: ShareRequest, request: Request):
    request_id = request.state.request_id
    logger.info(
        f"[{request_id}] /api/share START recipients={len(req.recipients or [])} "
        f"subject={req.subject!r} note={bool(req.message)}"
    )

    result = await share_summary(req.summary, req.recipients, req.subject, request_id)
    if isinstance(result, Err):
        logger.info(f"[{request_id}] /api/share FAILED kind={result.kind.value}")
        return to_error_response(result, request_id)

    logger.info(f"[{request_id}] /api/share END")
    return ShareResponse(success=True, message=result.value, recipients=req.recipients)


# -------------------------
# UI Layer (HTML frontend)
# -------------------------
def ui_form(
    text: str = Form(""),
    custom_prompt: str = Form(""),
    summary: str = Form(""),
    show_share: bool = Form(False),
    recipients: List[str] = Form(default=[]),
    recipient_input: str = Form(""),
    email_subject: str = Form(ui.DEFAULT_SUBJECT),
) -> ui.ClientState:
    """Rebuild the page state the browser sent back in its hidden fields."""
    deduped: List[str] = []
    for r in recipients:
        if r and r not in deduped:
            deduped.append(r)

    return ui.ClientState(
        text=text,
        custom_prompt=custom_prompt,
        summary=summary,
        show_share=show_share,
        recipients=tuple(deduped),
        recipient_input=recipient_input,
        email_subject=email_subject,
    )


def render(request: Request, state: ui.ClientState):
    return templates.TemplateResponse(request, "index.html", {"state": state})


@app.get("/")
def ui_home(request: Request):
    return render(request, ui.start_over())


@app.post("/ui/summarize")
def ui_summarize(request: Request, state: ui.ClientState = Depends(ui_form)):
    state = ui.begin_summarize(state)
    if state.summarize_phase is ui.Phase.SUBMITTING:
        payload = ui.summarize_payload(state)
        result = summarize_text(payload["text"], payload.get("customPrompt"), request.state.request_id)
        if isinstance(result, Err):
            state = ui.summarize_failed(state, result.message)
        else:
            state = ui.summarize_succeeded(state, result.value)
    return render(request, state)


@app.post("/ui/recipients")
def ui_recipients(
    request: Request,
    state: ui.ClientState = Depends(ui_form),
    remove: str = Form(""),
):
    if remove:
        state = ui.remove_recipient(state, remove)
    else:
        typed = state.recipient_input
        state = ui.type_recipient_text(ui.edit_recipient_input(state, ""), typed + "\n")
    return render(request, state)


@app.post("/ui/share")
async def ui_share(request: Request, state: ui.ClientState = Depends(ui_form)):
    state = ui.begin_share(state)
    if state.share_phase is ui.Phase.SUBMITTING:
        payload = ui.share_payload(state)
        result = await share_summary(
            payload["summary"], payload["recipients"], payload["subject"], request.state.request_id
        )
        if isinstance(result, Err):
            state = ui.share_failed(state, result.message)
        else:
            state = ui.share_succeeded(state, result.value)
    return render(request, state)


@app.post("/ui/reset")
def ui_reset(request: Request):
    return render(request, ui.start_over())


def run():
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=get_settings().port)


if __name__ == "__main__":
    run()
