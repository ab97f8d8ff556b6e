import enum
import uuid
from sqlalchemy import Column, String, Text, ForeignKey, TIMESTAMP, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from motorent.database import Base


class DocumentType(str, enum.Enum):
    DRIVER_LICENSE = "driver-license"
    VALID_ID       = "valid-id"


class DocumentStatus(str, enum.Enum):
    PENDING  = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class DocumentVerification(Base):
    __tablename__ = "document_verifications"

    id               = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id          = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    document_type    = Column(Enum(DocumentType, values_callable=lambda e: [m.value for m in e], name="document_type"),
                              nullable=False)
    document_url     = Column(Text, nullable=False)                # path inside the documents bucket
    status           = Column(Enum(DocumentStatus, values_callable=lambda e: [m.value for m in e],
                                   name="document_status"),
                              default=DocumentStatus.PENDING, nullable=False, index=True)
    rejection_reason = Column(Text, nullable=True)
    submitted_at     = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
    reviewed_at      = Column(TIMESTAMP(timezone=True), nullable=True)
    reviewed_by      = Column(String(36), nullable=True)           # admin_users.id

    # ─── Relationships ─────────────────────────────────────────────────────────
    user = relationship("User", back_populates="documents")

    def __repr__(self):
        return f"<DocumentVerification id={self.id} type={self.document_type} status={self.status}>"
