from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from motorent.database import get_db
from motorent.models.admin_user import AdminUser, AdminRole
from motorent.models.user import User
from motorent.utils.security import verify_access_token
from motorent.utils.exceptions import UnauthorizedException, ForbiddenException

USER_ROLE   = "user"
ADMIN_ROLES = {r.value for r in AdminRole}

# Bearer token extractor
bearer_scheme = HTTPBearer(auto_error=False)


# ─── Token ────────────────────────────────────────────────────────────────────
def get_token_payload(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> dict:
    """
    Validate the Bearer token and return its payload.
    Raises 401 if the token is missing, invalid, or expired.
    """
    if not credentials:
        raise UnauthorizedException("No authentication token provided")

    payload = verify_access_token(credentials.credentials)
    if not payload.get("sub") or not payload.get("role"):
        raise UnauthorizedException("Invalid token payload")
    return payload


# ─── Identities ───────────────────────────────────────────────────────────────
def get_current_identity(
    payload: dict = Depends(get_token_payload),
    db: Session = Depends(get_db),
) -> User | AdminUser:
    """Customer profile or admin account, depending on the token's role claim."""
    model = User if payload["role"] == USER_ROLE else AdminUser
    identity = db.get(model, payload["sub"])
    if not identity:
        raise UnauthorizedException("Account no longer exists")
    return identity


def get_current_user(identity: User | AdminUser = Depends(get_current_identity)) -> User:
    if not isinstance(identity, User):
        raise ForbiddenException("This action is only available to customers")
    return identity


def require_roles(*roles: AdminRole):
    """
    Factory that returns a dependency requiring an admin with one of the given roles.

    Usage:
        @router.get("/admins")
        def route(admin = Depends(require_roles(AdminRole.SUPER_ADMIN))):
            ...
    """
    def dependency(identity: User | AdminUser = Depends(get_current_identity)) -> AdminUser:
        if not isinstance(identity, AdminUser) or identity.role not in roles:
            raise ForbiddenException("Access denied. Admin credentials required.")
        return identity
    return dependency


def get_current_admin(
    admin: AdminUser = Depends(require_roles(AdminRole.ADMIN, AdminRole.SUPER_ADMIN)),
) -> AdminUser:
    return admin


def get_super_admin(admin: AdminUser = Depends(require_roles(AdminRole.SUPER_ADMIN))) -> AdminUser:
    return admin
