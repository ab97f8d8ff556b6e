"""
Outbound email transport.

The provider is chosen by settings.EMAIL_SERVICE:
    resend   - Resend REST API
    sendgrid - SendGrid SDK (sendgrid.SendGridAPIClient)
    function - HTTP function proxy that accepts {to, subject, html, text}
    console  - log the message (local development, default)
"""

import logging
from typing import Optional
from urllib.error import URLError

import httpx
from python_http_client.exceptions import HTTPError
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from motorent.config import settings
from motorent.utils.exceptions import EmailDeliveryException

logger = logging.getLogger(__name__)

RESEND_URL = "https://api.resend.com/emails"


# ─── Shared HTTP client ───────────────────────────────────────────────────────
_http_client: Optional[httpx.Client] = None


def get_http_client() -> httpx.Client:
    global _http_client
    if _http_client is None:
        _http_client = httpx.Client(
            timeout=httpx.Timeout(settings.EMAIL_TIMEOUT),
            limits=httpx.Limits(max_connections=20, max_keepalive_connections=5),
        )
    return _http_client


def close_http_client() -> None:
    global _http_client
    if _http_client is not None:
        _http_client.close()
        _http_client = None


def _post(provider: str, url: str, payload: dict, headers: dict | None = None) -> dict:
    try:
        response = get_http_client().post(url, json=payload, headers=headers)
    except httpx.HTTPError as e:
        logger.error(f"[{provider}] request failed: {e}")
        raise EmailDeliveryException(f"Email provider unreachable ({provider})")

    if response.status_code >= 400:
        logger.error(f"[{provider}] API error {response.status_code}: {response.text}")
        raise EmailDeliveryException(f"Email provider rejected the message ({provider})")

    if not response.content:
        return {"success": True, "provider": provider}
    try:
        return response.json()
    except ValueError:
        return {"success": True, "provider": provider}


# ─── Providers ────────────────────────────────────────────────────────────────
def _send_via_resend(to: str, subject: str, html: str, text: str) -> dict:
    return _post(
        "resend", RESEND_URL,
        {"from": settings.EMAIL_FROM, "to": [to], "subject": subject, "html": html, "text": text},
        headers={"Authorization": f"Bearer {settings.EMAIL_API_KEY}"},
    )


def _send_via_sendgrid(to: str, subject: str, html: str, text: str) -> dict:
    message = Mail(
        from_email=settings.EMAIL_FROM,
        to_emails=to,
        subject=subject,
        plain_text_content=text,
        html_content=html,
    )
    try:
        response = SendGridAPIClient(settings.EMAIL_API_KEY).send(message)
    except HTTPError as e:
        logger.error(f"[sendgrid] API error {e.status_code}: {e.body}")
        raise EmailDeliveryException("Email provider rejected the message (sendgrid)")
    except URLError as e:
        logger.error(f"[sendgrid] request failed: {e}")
        raise EmailDeliveryException("Email provider unreachable (sendgrid)")

    return {"success": True, "provider": "sendgrid", "statusCode": response.status_code}


def _send_via_function(to: str, subject: str, html: str, text: str) -> dict:
    if not settings.EMAIL_FUNCTION_URL:
        raise EmailDeliveryException("EMAIL_FUNCTION_URL is not configured")
    headers = {"Authorization": f"Bearer {settings.EMAIL_API_KEY}"} if settings.EMAIL_API_KEY else None
    return _post(
        "function", settings.EMAIL_FUNCTION_URL,
        {"to": to, "subject": subject, "html": html, "text": text},
        headers=headers,
    )


def _send_via_console(to: str, subject: str, html: str, text: str) -> dict:
    logger.info("=" * 60)
    logger.info(f"[EMAIL]  To      : {to}")
    logger.info(f"[EMAIL]  Subject : {subject}")
    logger.info("-" * 60)
    for line in text.strip().splitlines():
        logger.info(f"[EMAIL]  {line.strip()}")
    logger.info("=" * 60)
    return {"success": True, "mode": "console"}


_PROVIDERS = {
    "resend":   _send_via_resend,
    "sendgrid": _send_via_sendgrid,
    "function": _send_via_function,
    "console":  _send_via_console,
}


def send_email(to: str, subject: str, html: str, text: str) -> dict:
    """
    Deliver one message through the configured provider.
    Unknown provider names fall back to the console logger.
    Raises EmailDeliveryException when the provider call fails.
    """
    provider = _PROVIDERS.get(settings.EMAIL_SERVICE.lower(), _send_via_console)
    return provider(to, subject, html, text)
