import uuid
from sqlalchemy import Column, String, Text, Boolean, ForeignKey, TIMESTAMP
from sqlalchemy.orm import relationship
from motorent.database import Base


class RefreshToken(Base):
    __tablename__ = "refresh_tokens"

    id         = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    account_id = Column(String(36), ForeignKey("auth_accounts.id", ondelete="CASCADE"), nullable=False, index=True)
    token      = Column(Text, nullable=False, unique=True)
    expires_at = Column(TIMESTAMP(timezone=True), nullable=False)
    revoked    = Column(Boolean, default=False, nullable=False)

    # ─── Relationships ─────────────────────────────────────────────────────────
    account = relationship("AuthAccount", back_populates="refresh_tokens")

    def __repr__(self):
        return f"<RefreshToken id={self.id} account_id={self.account_id} revoked={self.revoked}>"
