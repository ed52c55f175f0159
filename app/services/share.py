import asyncio
import logging
from typing import List, Optional

from app.core.config import get_settings
from app.core.errors import Err, ErrorKind, Ok, Result
from app.schemas.share import DEFAULT_SUBJECT
from app.services.mailer import OutgoingEmail, SmtpSender, render_summary_html

logger = logging.getLogger(__name__)


def get_sender() -> SmtpSender:
    return SmtpSender(get_settings())


async def share_summary(
    summary: Optional[str],
    recipients: Optional[List[str]],
    subject: Optional[str],
    request_id: str,
) -> Result[str]:
    if not summary or not recipients:
        return Err(ErrorKind.VALIDATION, "Summary and recipients are required")

    settings = get_settings()
    if not settings.email_configured:
        logger.error(f"[{request_id}] share_config_error missing=EMAIL_USER/EMAIL_PASS")
        return Err(ErrorKind.CONFIGURATION, "Email configuration not set up properly")

    subject = subject or DEFAULT_SUBJECT
    html = render_summary_html(summary, subject)

    sender = get_sender()
    logger.info(f"[{request_id}] sending_emails count={len(recipients)}")

    # one send per recipient, all in flight together; wait for every one to settle
    results = await asyncio.gather(
        *(
            asyncio.to_thread(
                sender.send,
                OutgoingEmail(
                    sender=settings.email_user,
                    to=recipient,
                    subject=subject,
                    html=html,
                    text=summary,
                ),
            )
            for recipient in recipients
        ),
        return_exceptions=True,
    )

    failures = [r for r in results if isinstance(r, BaseException)]
    if failures:
        first = failures[0]
        logger.error(
            f"[{request_id}] share_error failed={len(failures)}/{len(recipients)} "
            f"{type(first).__name__}: {first}"
        )
        return Err(ErrorKind.UPSTREAM, "Failed to share summary via email", details=str(first))

    logger.info(f"[{request_id}] all_emails_sent count={len(recipients)}")
    return Ok(f"Summary shared successfully with {len(recipients)} recipient(s)")
