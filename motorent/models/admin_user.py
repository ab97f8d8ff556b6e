import enum
import uuid
from sqlalchemy import Column, String, TIMESTAMP, Enum
from sqlalchemy.sql import func
from motorent.database import Base


class AdminRole(str, enum.Enum):
    ADMIN       = "admin"
    SUPER_ADMIN = "super-admin"


class AdminUser(Base):
    """Staff account, matched to an auth account by email."""
    __tablename__ = "admin_users"

    id         = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email      = Column(String(255), unique=True, nullable=False, index=True)
    name       = Column(String(255), nullable=False)
    role       = Column(Enum(AdminRole, values_callable=lambda e: [m.value for m in e], name="admin_role"),
                        default=AdminRole.ADMIN, nullable=False)
    last_login = Column(TIMESTAMP(timezone=True), nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<AdminUser id={self.id} email={self.email} role={self.role}>"
