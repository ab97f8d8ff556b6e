import uuid
from sqlalchemy import Column, String, Text, Boolean, ForeignKey, TIMESTAMP
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from motorent.database import Base


class Notification(Base):
    __tablename__ = "notifications"

    id              = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id         = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type            = Column(String(50), nullable=False)
    title           = Column(String(255), nullable=False)
    message         = Column(Text, nullable=False)
    reservation_id  = Column(String(36), ForeignKey("reservations.id", ondelete="SET NULL"), nullable=True)
    motorcycle_name = Column(String(255), nullable=True)
    read            = Column(Boolean, default=False, nullable=False)
    timestamp       = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)

    # ─── Relationships ─────────────────────────────────────────────────────────
    user = relationship("User", back_populates="notifications")

    def __repr__(self):
        return f"<Notification id={self.id} type={self.type} read={self.read}>"
