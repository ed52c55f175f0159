from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from app.core.config import Settings

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=select_autoescape(["html"]),
)


@dataclass
class OutgoingEmail:
    sender: str
    to: str
    subject: str
    html: str
    text: str


def render_summary_html(summary: str, subject: str) -> str:
    return _env.get_template("email/summary.html").render(summary=summary, subject=subject)


def build_message(email: OutgoingEmail) -> EmailMessage:
    msg = EmailMessage()
    msg["From"] = email.sender
    msg["To"] = email.to
    msg["Subject"] = email.subject
    msg.set_content(email.text)
    msg.add_alternative(email.html, subtype="html")
    return msg


class SmtpSender:
    """Delivers one message per SMTP session over implicit TLS."""

    def __init__(self, settings: Settings):
        if not settings.email_configured:
            raise RuntimeError("Missing EMAIL_USER or EMAIL_PASS in .env")
        self.host = settings.smtp_host
        self.port = settings.smtp_port
        self.user = settings.email_user
        self.password = settings.email_pass

    def send(self, email: OutgoingEmail) -> None:
        with smtplib.SMTP_SSL(self.host, self.port) as smtp:
            smtp.login(self.user, self.password)
            smtp.send_message(build_message(email))
        logger.info(f"email_sent to={email.to}")

    def verify(self) -> None:
        """Open a session and authenticate without sending anything."""
        with smtplib.SMTP_SSL(self.host, self.port) as smtp:
            smtp.login(self.user, self.password)
