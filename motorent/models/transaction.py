import enum
import uuid
from sqlalchemy import Column, String, Float, Text, ForeignKey, TIMESTAMP, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from motorent.database import Base


class TransactionType(str, enum.Enum):
    PAYMENT = "payment"
    DEPOSIT = "deposit"
    REFUND  = "refund"


class TransactionStatus(str, enum.Enum):
    PENDING   = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Transaction(Base):
    __tablename__ = "transactions"

    id             = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id        = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    reservation_id = Column(String(36), ForeignKey("reservations.id"), nullable=True, index=True)
    type           = Column(Enum(TransactionType, values_callable=lambda e: [m.value for m in e],
                                 name="transaction_type"), nullable=False)
    amount         = Column(Float, nullable=False)
    date           = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
    status         = Column(Enum(TransactionStatus, values_callable=lambda e: [m.value for m in e],
                                 name="transaction_status"),
                            default=TransactionStatus.PENDING, nullable=False)
    description    = Column(Text, nullable=True)
    created_at     = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)

    # ─── Relationships ─────────────────────────────────────────────────────────
    user        = relationship("User", back_populates="transactions")
    reservation = relationship("Reservation", back_populates="transactions")

    def __repr__(self):
        return f"<Transaction id={self.id} type={self.type} status={self.status} amount={self.amount}>"
