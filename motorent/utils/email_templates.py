"""
HTML + plain-text bodies for every transactional email.

Bodies live in motorent/templates/email as <name>.html / <name>.txt pairs and are
rendered by one jinja2 Environment. HTML templates are autoescaped, text ones are not.
Each builder returns {"subject", "html", "text"}.
"""

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from motorent.config import settings
from motorent.utils.mappers import format_currency


BRAND = "MotoRent Dumaguete"

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates" / "email"

env = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    autoescape=select_autoescape(["html"]),
)

ACCENT_DEFAULT = "#667eea"
ACCENT_SUCCESS = "#10b981"
ACCENT_DANGER  = "#ef4444"
ACCENT_WARNING = "#f59e0b"


def _document_label(document_type: str) -> str:
    return "Driver's License" if document_type == "driver-license" else "Valid ID"


def _render(name: str, subject: str, accent: str = ACCENT_DEFAULT, /, **context) -> dict:
    context.update(
        brand=BRAND,
        accent=accent,
        app_url=settings.APP_URL,
        contact_email=settings.CONTACT_INBOX_EMAIL,
    )
    return {
        "subject": subject,
        "html":    env.get_template(f"{name}.html").render(**context),
        "text":    env.get_template(f"{name}.txt").render(**context),
    }


# ═══════════════════════════════════════════════════════════════════════════════
# BOOKINGS
# ═══════════════════════════════════════════════════════════════════════════════
def booking_confirmation(
    user_name: str, motorcycle_name: str, start_date: str, end_date: str,
    total_price: float, reservation_id: str,
) -> dict:
    return _render(
        "booking_confirmation", f"Booking Confirmation - {BRAND}",
        user_name=user_name, motorcycle_name=motorcycle_name,
        start_date=start_date, end_date=end_date,
        total=format_currency(total_price), short_id=reservation_id[:8],
    )


def booking_approved(
    user_name: str, motorcycle_name: str, start_date: str, end_date: str, pickup_location: str,
) -> dict:
    return _render(
        "booking_approved", "Booking Approved - Ready to Ride!", ACCENT_SUCCESS,
        user_name=user_name, motorcycle_name=motorcycle_name,
        start_date=start_date, end_date=end_date, pickup_location=pickup_location,
    )


def booking_rejected(user_name: str, motorcycle_name: str, reason: str) -> dict:
    return _render(
        "booking_rejected", "Booking Update - Action Required", ACCENT_DANGER,
        user_name=user_name, motorcycle_name=motorcycle_name, reason=reason,
    )


def payment_reminder(
    user_name: str, motorcycle_name: str, amount: float, due_date: str, reservation_id: str,
) -> dict:
    return _render(
        "payment_reminder", "Payment Reminder - MotoRent Booking", ACCENT_WARNING,
        user_name=user_name, motorcycle_name=motorcycle_name,
        total=format_currency(amount), due_date=due_date, short_id=reservation_id[:8],
    )


# ═══════════════════════════════════════════════════════════════════════════════
# DOCUMENTS
# ═══════════════════════════════════════════════════════════════════════════════
def document_approved(user_name: str, document_type: str) -> dict:
    return _render(
        "document_approved", "Document Verified - You're All Set!", ACCENT_SUCCESS,
        user_name=user_name, label=_document_label(document_type),
    )


def document_rejected(user_name: str, document_type: str, reason: str) -> dict:
    return _render(
        "document_rejected", "Document Verification - Resubmission Required", ACCENT_DANGER,
        user_name=user_name, label=_document_label(document_type), reason=reason,
    )


# ═══════════════════════════════════════════════════════════════════════════════
# ACCOUNT
# ═══════════════════════════════════════════════════════════════════════════════
def verification_code(user_name: str, code: str) -> dict:
    return _render(
        "verification_code", f"Your {BRAND} verification code: {code}",
        user_name=user_name, code=code, expire_minutes=settings.OTP_EXPIRE_MINUTES,
    )


def password_reset(user_name: str, reset_link: str) -> dict:
    return _render(
        "password_reset", "Reset Your Password - MotoRent",
        user_name=user_name, reset_link=reset_link,
    )


# ═══════════════════════════════════════════════════════════════════════════════
# CONTACT
# ═══════════════════════════════════════════════════════════════════════════════
def contact_acknowledgment(name: str, message: str) -> dict:
    return _render(
        "contact_acknowledgment", f"We received your message - {BRAND}",
        name=name, message=message,
    )


def contact_forward(name: str, email: str, message: str) -> dict:
    return _render(
        "contact_forward", f"New contact message from {name}",
        name=name, email=email, message=message,
    )


def admin_reply(name: str, original_message: str, reply: str) -> dict:
    return _render(
        "admin_reply", f"Re: Your message to {BRAND}",
        name=name, original_message=original_message, reply=reply,
    )


def test_email() -> dict:
    return _render("test_email", "Email Test - MotoRent")
