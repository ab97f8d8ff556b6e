import logging

from motorent.config import settings
from motorent.utils import email_templates as templates
from motorent.utils.email import send_email

logger = logging.getLogger(__name__)


class EmailService:
    """One method per message type. Provider failures raise EmailDeliveryException."""

    def _deliver(self, to: str, template: dict) -> dict:
        result = send_email(to, template["subject"], template["html"], template["text"])
        logger.info(f"Email '{template['subject']}' sent to {to}")
        return result

    # ─── Bookings ─────────────────────────────────────────────────────────────
    def send_booking_confirmation(
        self, user_email: str, user_name: str, motorcycle_name: str,
        start_date: str, end_date: str, total_price: float, reservation_id: str,
    ) -> dict:
        return self._deliver(user_email, templates.booking_confirmation(
            user_name, motorcycle_name, start_date, end_date, total_price, reservation_id,
        ))

    def send_booking_approved(
        self, user_email: str, user_name: str, motorcycle_name: str,
        start_date: str, end_date: str, pickup_location: str | None = None,
    ) -> dict:
        return self._deliver(user_email, templates.booking_approved(
            user_name, motorcycle_name, start_date, end_date,
            pickup_location or settings.PICKUP_LOCATION,
        ))

    def send_booking_rejected(self, user_email: str, user_name: str, motorcycle_name: str, reason: str) -> dict:
        return self._deliver(user_email, templates.booking_rejected(user_name, motorcycle_name, reason))

    def send_payment_reminder(
        self, user_email: str, user_name: str, motorcycle_name: str,
        amount: float, due_date: str, reservation_id: str,
    ) -> dict:
        return self._deliver(user_email, templates.payment_reminder(
            user_name, motorcycle_name, amount, due_date, reservation_id,
        ))

    # ─── Documents ────────────────────────────────────────────────────────────
    def send_document_approved(self, user_email: str, user_name: str, document_type: str) -> dict:
        return self._deliver(user_email, templates.document_approved(user_name, document_type))

    def send_document_rejected(self, user_email: str, user_name: str, document_type: str, reason: str) -> dict:
        return self._deliver(user_email, templates.document_rejected(user_name, document_type, reason))

    # ─── Account ──────────────────────────────────────────────────────────────
    def send_verification_code(self, user_email: str, user_name: str, code: str) -> dict:
        return self._deliver(user_email, templates.verification_code(user_name, code))

    def send_password_reset(self, user_email: str, user_name: str, reset_link: str) -> dict:
        return self._deliver(user_email, templates.password_reset(user_name, reset_link))

    # ─── Contact ──────────────────────────────────────────────────────────────
    def send_contact_acknowledgment(self, user_email: str, name: str, message: str) -> dict:
        return self._deliver(user_email, templates.contact_acknowledgment(name, message))

    def send_contact_forward(self, name: str, email: str, message: str) -> dict:
        return self._deliver(settings.CONTACT_INBOX_EMAIL, templates.contact_forward(name, email, message))

    def send_admin_reply(self, user_email: str, name: str, original_message: str, reply: str) -> dict:
        return self._deliver(user_email, templates.admin_reply(name, original_message, reply))

    def test_email(self, to: str) -> dict:
        return self._deliver(to, templates.test_email())


email_service = EmailService()
