import enum
import uuid
from sqlalchemy import Column, String, Integer, Float, Text, JSON, TIMESTAMP, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from motorent.database import Base


class Availability(str, enum.Enum):
    AVAILABLE      = "Available"
    RESERVED       = "Reserved"
    IN_MAINTENANCE = "In Maintenance"


class Motorcycle(Base):
    __tablename__ = "motorcycles"

    id              = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name            = Column(String(255), nullable=False)
    brand           = Column(String(100), nullable=True)
    model           = Column(String(100), nullable=True)
    type            = Column(String(50), nullable=True, index=True)
    engine_capacity = Column(Integer, nullable=True)          # cc
    transmission    = Column(String(50), nullable=True)
    year            = Column(Integer, nullable=True)
    color           = Column(String(50), nullable=True)
    plate_number    = Column(String(50), unique=True, nullable=True)
    fuel_capacity   = Column(Float, nullable=True)            # liters
    price_per_day   = Column(Float, nullable=False)
    description     = Column(Text, nullable=True)
    image           = Column(Text, nullable=True)
    features        = Column(JSON, nullable=False, default=list)
    availability    = Column(Enum(Availability, values_callable=lambda e: [m.value for m in e], name="availability"),
                             default=Availability.AVAILABLE, nullable=False, index=True)
    rating          = Column(Float, default=0, nullable=False)
    review_count    = Column(Integer, default=0, nullable=False)
    fuel_type       = Column(String(50), nullable=True)
    mileage         = Column(String(50), nullable=True)
    created_at      = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
    updated_at      = Column(TIMESTAMP(timezone=True), server_default=func.now(),
                             onupdate=func.now(), nullable=False)

    # ─── Relationships ─────────────────────────────────────────────────────────
    reservations = relationship("Reservation", back_populates="motorcycle")

    def __repr__(self):
        return f"<Motorcycle id={self.id} name={self.name} availability={self.availability}>"
