"""
Transactional email helpers shared by routes and workers.

Messages go through SendGrid when SENDGRID_API_KEY is set. EMAIL_MODE=dev forces
log-only delivery; EMAIL_MODE=prod without a key is a configuration error.
"""
from __future__ import annotations

import logging
import os

from python_http_client.exceptions import HTTPError

DEFAULT_FROM = "Scout <notifications@scout.yourdomain.com>"

log = logging.getLogger(__name__)


class EmailSendError(RuntimeError):
    """The email provider refused or failed to accept a message."""


def _effective_from(email_from: str | None) -> str:
    return email_from or os.getenv("EMAIL_FROM") or DEFAULT_FROM


def email_mode() -> str:
    mode = (os.getenv("EMAIL_MODE") or "").strip().lower()
    if mode in ("dev", "prod"):
        return mode
    return "prod" if os.getenv("SENDGRID_API_KEY") else "dev"


def send_html_email(to_email: str, subject: str, html: str, from_email: str | None = None) -> bool:
    """
    Send one HTML email. Returns True when the provider accepted it and False
    when it was only logged (dev mode).
    """
    sender = _effective_from(from_email)

    if email_mode() == "dev":
        log.info("[DEV MODE] Email to %s: %s", to_email, subject)
        log.debug("[DEV MODE] Content:\n%s", html)
        return False

    api_key = os.getenv("SENDGRID_API_KEY")
    if not api_key:
        raise RuntimeError("Email provider not configured. Set SENDGRID_API_KEY.")

    from sendgrid import SendGridAPIClient
    from sendgrid.helpers.mail import Mail

    mail = Mail(
        from_email=sender,
        to_emails=to_email,
        subject=subject,
        html_content=html,
    )
    try:
        response = SendGridAPIClient(api_key).send(mail)
    except HTTPError as exc:
        status = getattr(exc, "status_code", "unknown")
        raise EmailSendError(f"Email provider returned {status}") from exc

    if not 200 <= response.status_code < 300:
        raise EmailSendError(f"Email provider returned {response.status_code}")
    log.info("Email sent", extra={"to": to_email, "from": sender})
    return True
