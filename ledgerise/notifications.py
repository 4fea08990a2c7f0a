"""Transactional email via the Resend HTTP API."""

import html
import logging
from dataclasses import dataclass

import requests

from ledgerise.domain.errors import NotificationError

logger = logging.getLogger(__name__)

API_URL = "https://api.resend.com/emails"
REQUEST_TIMEOUT = 10

RESET_SUBJECT = "Reset your Ledgerise password"


@dataclass(frozen=True)
class NotificationSettings:
    """Credentials for the email API."""

    api_key: str | None = None
    from_email: str | None = None
    api_url: str = API_URL


def render_password_reset(url: str) -> tuple[str, str]:
    """Build the plain-text and HTML bodies of a reset email.

    Returns:
        Tuple of (text, html).
    """
    text = "\n".join(
        [
            "We received a request to reset your Ledgerise password.",
            "",
            f"Reset your password: {url}",
            "",
            "If you did not request this, you can ignore this email.",
        ]
    )
    body = "".join(
        [
            "<p>We received a request to reset your Ledgerise password.</p>",
            f'<p><a href="{html.escape(url, quote=True)}">Reset your password</a></p>',
            "<p>If you did not request this, you can ignore this email.</p>",
        ]
    )
    return text, body


def send_password_reset_email(to: str, url: str, settings: NotificationSettings) -> str | None:
    """Send a password-reset link.

    Args:
        to: Recipient address.
        url: Reset link to embed.
        settings: API credentials and sender.

    Returns:
        Message id reported by the API, if any.

    Raises:
        NotificationError: If the API key or sender is not configured.
        requests.RequestException: If API request fails.
    """
    if not settings.api_key or not settings.from_email:
        raise NotificationError("Missing RESEND_API_KEY or RESEND_FROM_EMAIL")

    text, body = render_password_reset(url)
    headers = {
        "Authorization": f"Bearer {settings.api_key}",
        "Content-Type": "application/json",
    }
    payload = {
        "from": settings.from_email,
        "to": [to],
        "subject": RESET_SUBJECT,
        "text": text,
        "html": body,
    }

    response = requests.post(settings.api_url, headers=headers, json=payload, timeout=REQUEST_TIMEOUT)
    response.raise_for_status()

    message_id = response.json().get("id")
    logger.info("Sent password reset email to %s (id %s)", to, message_id)
    return message_id
