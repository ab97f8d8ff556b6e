import uuid
from sqlalchemy import Column, String, Text, TIMESTAMP
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from motorent.database import Base


class User(Base):
    """
    Customer profile. Profiles created by the mobile app may exist without
    an `auth_accounts` row; once web login is enabled the ids match.
    """
    __tablename__ = "users"

    id                 = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name               = Column(String(255), nullable=False)
    username           = Column(String(100), unique=True, nullable=True, index=True)
    email              = Column(String(255), unique=True, nullable=False, index=True)
    phone              = Column(String(30), nullable=True)
    driver_license_url = Column(Text, nullable=True)
    license_number     = Column(String(100), nullable=True)
    created_at         = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
    updated_at         = Column(TIMESTAMP(timezone=True), server_default=func.now(),
                                onupdate=func.now(), nullable=False)

    # ─── Relationships ─────────────────────────────────────────────────────────
    reservations  = relationship("Reservation", back_populates="user")
    documents     = relationship("DocumentVerification", back_populates="user", cascade="all, delete-orphan")
    notifications = relationship("Notification", back_populates="user", cascade="all, delete-orphan")
    transactions  = relationship("Transaction", back_populates="user")

    def __repr__(self):
        return f"<User id={self.id} email={self.email}>"
