import uuid
from sqlalchemy import Column, String, Text, JSON, TIMESTAMP
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from motorent.database import Base


class AuthAccount(Base):
    """Web login credential. Its id is shared with the matching `users` profile."""
    __tablename__ = "auth_accounts"

    id                 = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email              = Column(String(255), unique=True, nullable=False, index=True)
    password_hash      = Column(Text, nullable=False)
    email_confirmed_at = Column(TIMESTAMP(timezone=True), nullable=True)
    user_metadata      = Column(JSON, nullable=False, default=dict)
    created_at         = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
    updated_at         = Column(TIMESTAMP(timezone=True), server_default=func.now(),
                                onupdate=func.now(), nullable=False)

    # ─── Relationships ─────────────────────────────────────────────────────────
    refresh_tokens = relationship("RefreshToken", back_populates="account", cascade="all, delete-orphan")

    @property
    def is_email_confirmed(self) -> bool:
        return self.email_confirmed_at is not None

    def __repr__(self):
        return f"<AuthAccount id={self.id} email={self.email}>"
