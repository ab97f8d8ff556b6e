import enum
import uuid
from sqlalchemy import Column, String, Float, Text, Date, ForeignKey, TIMESTAMP, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from motorent.database import Base


class ReservationStatus(str, enum.Enum):
    PENDING   = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class Reservation(Base):
    __tablename__ = "reservations"

    id                     = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id                = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    motorcycle_id          = Column(String(36), ForeignKey("motorcycles.id"), nullable=False, index=True)
    start_date             = Column(Date, nullable=False)
    end_date               = Column(Date, nullable=False)
    pickup_time            = Column(String(10), nullable=True)
    return_time            = Column(String(10), nullable=True)
    total_price            = Column(Float, nullable=False)
    status                 = Column(Enum(ReservationStatus, values_callable=lambda e: [m.value for m in e],
                                         name="reservation_status"),
                                    default=ReservationStatus.PENDING, nullable=False, index=True)
    customer_name          = Column(String(255), nullable=True)
    customer_email         = Column(String(255), nullable=True)
    customer_phone         = Column(String(30), nullable=True)
    payment_method         = Column(String(30), nullable=True)     # cash | gcash
    gcash_reference_number = Column(String(100), nullable=True)
    gcash_proof_url        = Column(Text, nullable=True)
    admin_notes            = Column(Text, nullable=True)
    license_image_url      = Column(Text, nullable=True)
    created_at             = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
    updated_at             = Column(TIMESTAMP(timezone=True), server_default=func.now(),
                                    onupdate=func.now(), nullable=False)

    # ─── Relationships ─────────────────────────────────────────────────────────
    user         = relationship("User", back_populates="reservations")
    motorcycle   = relationship("Motorcycle", back_populates="reservations")
    transactions = relationship("Transaction", back_populates="reservation")

    def __repr__(self):
        return f"<Reservation id={self.id} status={self.status} motorcycle_id={self.motorcycle_id}>"
