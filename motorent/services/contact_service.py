import logging

from sqlalchemy.orm import Session

from motorent.models.contact_message import ContactMessage, ContactStatus
from motorent.schemas.contact import ContactCreateRequest
from motorent.services.email_service import email_service
from motorent.utils.exceptions import AppException, NotFoundException

logger = logging.getLogger(__name__)


def _serialize(m: ContactMessage) -> dict:
    return {
        "id":        m.id,
        "name":      m.name,
        "email":     m.email,
        "message":   m.message,
        "status":    m.status.value,
        "createdAt": m.created_at.isoformat() if m.created_at else None,
    }


class ContactService:

    def create_message(self, db: Session, data: ContactCreateRequest) -> dict:
        m = ContactMessage(name=data.name, email=data.email, message=data.message, status=ContactStatus.NEW)
        db.add(m)
        db.commit()
        db.refresh(m)

        acknowledged = self._try_send(
            m, "acknowledgment", email_service.send_contact_acknowledgment, m.email, m.name, m.message,
        )
        forwarded = self._try_send(
            m, "forward", email_service.send_contact_forward, m.name, m.email, m.message,
        )
        return {**_serialize(m), "emailsSent": acknowledged and forwarded}

    def _try_send(self, m: ContactMessage, kind: str, send, *args) -> bool:
        try:
            send(*args)
            return True
        except AppException as e:
            logger.error(f"Contact message {m.id} saved but {kind} email failed: {e}")
            return False

    def list_messages(
        self, db: Session, page: int, limit: int, status: str | None = None,
    ) -> tuple[list[dict], int]:
        q = db.query(ContactMessage)
        if status:
            q = q.filter(ContactMessage.status == status)
        total = q.count()
        rows = q.order_by(ContactMessage.created_at.desc()).offset((page - 1) * limit).limit(limit).all()
        return [_serialize(m) for m in rows], total

    def _get(self, db: Session, message_id: str) -> ContactMessage:
        m = db.get(ContactMessage, message_id)
        if not m:
            raise NotFoundException("Contact message")
        return m

    def get_message(self, db: Session, message_id: str) -> dict:
        return _serialize(self._get(db, message_id))

    def _set_status(self, db: Session, message_id: str, status: ContactStatus) -> dict:
        m = self._get(db, message_id)
        m.status = status
        db.commit()
        db.refresh(m)
        return _serialize(m)

    def mark_as_read(self, db: Session, message_id: str) -> dict:
        return self._set_status(db, message_id, ContactStatus.READ)

    def mark_as_responded(self, db: Session, message_id: str) -> dict:
        return self._set_status(db, message_id, ContactStatus.RESPONDED)

    def reply(self, db: Session, message_id: str, reply: str) -> dict:
        """Email the reply, then mark the message responded. Delivery errors propagate."""
        m = self._get(db, message_id)
        email_service.send_admin_reply(m.email, m.name, m.message, reply)
        return self._set_status(db, message_id, ContactStatus.RESPONDED)

    def delete_message(self, db: Session, message_id: str) -> None:
        db.delete(self._get(db, message_id))
        db.commit()


contact_service = ContactService()
