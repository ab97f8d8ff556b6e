import uuid
from sqlalchemy import Column, String, TIMESTAMP
from sqlalchemy.sql import func
from motorent.database import Base


class OTPCode(Base):
    __tablename__ = "otp_codes"

    id         = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email      = Column(String(255), nullable=False, index=True)
    code       = Column(String(10), nullable=False)
    expires_at = Column(TIMESTAMP(timezone=True), nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<OTPCode email={self.email} expires_at={self.expires_at}>"
