"""
Client-side state for the summarizer page.

Everything the page shows lives in one immutable `ClientState`. Each user
action is a pure function from one state to the next, so the flow can be
exercised without rendering anything. The UI routes rebuild the state from
the submitted form, apply a transition and render the result.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Literal, Optional, Tuple

from app.schemas.share import DEFAULT_SUBJECT
from app.services.validators import is_valid_email

AlertType = Literal["success", "error", "info"]
COMMIT_KEYS = ("Enter", ",")


class Phase(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"


@dataclass(frozen=True)
class Alert:
    type: AlertType
    message: str


@dataclass(frozen=True)
class ClientState:
    text: str = ""
    custom_prompt: str = ""
    summary: str = ""
    summarize_phase: Phase = Phase.IDLE
    share_phase: Phase = Phase.IDLE
    alert: Optional[Alert] = None
    show_share: bool = False
    recipients: Tuple[str, ...] = ()
    recipient_input: str = ""
    email_subject: str = DEFAULT_SUBJECT

    @property
    def can_summarize(self) -> bool:
        return self.summarize_phase is Phase.IDLE and bool(self.text.strip())

    @property
    def can_share(self) -> bool:
        return self.share_phase is Phase.IDLE and bool(self.recipients)

    @property
    def share_visible(self) -> bool:
        return self.show_share and bool(self.summary)


# -------------------------
# Summarize
# -------------------------
def begin_summarize(state: ClientState) -> ClientState:
    if not state.text.strip():
        return replace(state, alert=Alert("error", "Please enter some text to summarize."))
    return replace(state, summarize_phase=Phase.SUBMITTING, alert=None)


def summarize_payload(state: ClientState) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"text": state.text.strip()}
    if state.custom_prompt.strip():
        payload["customPrompt"] = state.custom_prompt.strip()
    return payload


def summarize_succeeded(state: ClientState, summary: str) -> ClientState:
    return replace(
        state,
        summary=summary,
        summarize_phase=Phase.IDLE,
        show_share=True,
        alert=Alert("success", "Summary generated successfully!"),
    )


def summarize_failed(state: ClientState, message: Optional[str]) -> ClientState:
    return replace(
        state,
        summarize_phase=Phase.IDLE,
        alert=Alert("error", message or "Failed to generate summary. Please try again."),
    )


# -------------------------
# Recipients
# -------------------------
def edit_recipient_input(state: ClientState, value: str) -> ClientState:
    return replace(state, recipient_input=value)


def press_recipient_key(state: ClientState, key: str) -> ClientState:
    """Enter or comma commits the typed address; other keys do nothing here."""
    if key not in COMMIT_KEYS:
        return state

    email = state.recipient_input.strip()
    if email and is_valid_email(email) and email not in state.recipients:
        return replace(state, recipients=state.recipients + (email,), recipient_input="")
    return state


def type_recipient_text(state: ClientState, typed: str) -> ClientState:
    """Feed keystrokes into the recipient box, e.g. "a@x.com,"."""
    for ch in typed:
        if ch == "\n":
            state = press_recipient_key(state, "Enter")
        elif ch in COMMIT_KEYS:
            state = press_recipient_key(state, ch)
        else:
            state = edit_recipient_input(state, state.recipient_input + ch)
    return state


def remove_recipient(state: ClientState, email: str) -> ClientState:
    return replace(state, recipients=tuple(r for r in state.recipients if r != email))


# -------------------------
# Share
# -------------------------
def begin_share(state: ClientState) -> ClientState:
    if not state.summary.strip():
        return replace(state, alert=Alert("error", "No summary to share."))
    if not state.recipients:
        return replace(state, alert=Alert("error", "Please add at least one recipient."))
    return replace(state, share_phase=Phase.SUBMITTING, alert=None)


def share_payload(state: ClientState) -> Dict[str, Any]:
    return {
        "summary": state.summary.strip(),
        "recipients": list(state.recipients),
        "subject": state.email_subject.strip() or DEFAULT_SUBJECT,
    }


def share_succeeded(state: ClientState, message: str) -> ClientState:
    return replace(
        state,
        share_phase=Phase.IDLE,
        alert=Alert("success", message),
        recipients=(),
        recipient_input="",
        email_subject=DEFAULT_SUBJECT,
    )


def share_failed(state: ClientState, message: Optional[str]) -> ClientState:
    return replace(
        state,
        share_phase=Phase.IDLE,
        alert=Alert("error", message or "Failed to share summary. Please try again."),
    )


def start_over() -> ClientState:
    return ClientState()
