import enum
import uuid
from sqlalchemy import Column, String, Text, TIMESTAMP, Enum
from sqlalchemy.sql import func
from motorent.database import Base


class ContactStatus(str, enum.Enum):
    NEW       = "new"
    READ      = "read"
    RESPONDED = "responded"


class ContactMessage(Base):
    __tablename__ = "contact_messages"

    id         = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name       = Column(String(255), nullable=False)
    email      = Column(String(255), nullable=False)
    message    = Column(Text, nullable=False)
    status     = Column(Enum(ContactStatus, values_callable=lambda e: [m.value for m in e], name="contact_status"),
                        default=ContactStatus.NEW, nullable=False, index=True)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<ContactMessage id={self.id} email={self.email} status={self.status}>"
