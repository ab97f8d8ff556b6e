import hashlib
import hmac
import secrets
from datetime import datetime, timedelta, timezone

from jose import JWTError, ExpiredSignatureError, jwt
from passlib.context import CryptContext

from motorent.config import settings
from motorent.utils.exceptions import TokenExpiredException, UnauthorizedException

# ─── Password Hashing ─────────────────────────────────────────────────────────
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password using bcrypt."""
    return pwd_context.hash(plain_password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain-text password against a bcrypt hash."""
    return pwd_context.verify(plain_password, hashed_password)


# ─── JWT ──────────────────────────────────────────────────────────────────────
def create_access_token(subject_id: str, role: str) -> str:
    """
    Create a short-lived JWT access token.
    Payload: sub (user or admin id), role (user | admin | super-admin), type, exp
    """
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {
        "sub": str(subject_id),
        "role": role,
        "type": "access",
        "exp": expire,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_refresh_token(subject_id: str, role: str) -> tuple[str, datetime]:
    """
    Create a long-lived JWT refresh token.
    Returns (token_string, expiry_datetime).
    """
    expire = datetime.now(timezone.utc) + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    payload = {
        "sub": str(subject_id),
        "role": role,
        "type": "refresh",
        "jti": secrets.token_hex(8),
        "exp": expire,
    }
    token = jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return token, expire


def verify_access_token(token: str) -> dict:
    """
    Decode and validate a JWT access token.
    Raises 401 if invalid, 401 (TOKEN_EXPIRED) if expired.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        if payload.get("type") != "access":
            raise UnauthorizedException("Invalid token type")
        return payload
    except ExpiredSignatureError:
        raise TokenExpiredException()
    except JWTError:
        raise UnauthorizedException("Invalid or malformed token")


def verify_refresh_token(token: str, verify_exp: bool = True) -> dict:
    try:
        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM],
            options={"verify_exp": verify_exp},
        )
        if payload.get("type") != "refresh":
            raise UnauthorizedException("Invalid token type")
        return payload
    except ExpiredSignatureError:
        raise UnauthorizedException("Refresh token has expired, please login again")
    except JWTError:
        raise UnauthorizedException("Invalid refresh token")


# ─── Password Reset Token ─────────────────────────────────────────────────────
def password_fingerprint(password_hash: str) -> str:
    """Short digest of the stored hash; it changes whenever the password does."""
    return hashlib.sha256(password_hash.encode()).hexdigest()[:16]


def create_reset_token(account_id: str, password_hash: str) -> str:
    """
    Reset tokens carry a fingerprint of the current password hash, so a link
    stops working once the password has been changed by any route.
    """
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.RESET_TOKEN_EXPIRE_MINUTES)
    return jwt.encode(
        {"sub": str(account_id), "pwd": password_fingerprint(password_hash), "type": "reset", "exp": expire},
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
    )


def verify_reset_token(token: str) -> dict:
    """Return the payload of a reset token: sub (account id) and pwd (fingerprint)."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except ExpiredSignatureError:
        raise UnauthorizedException("Reset link has expired. Please request a new one.")
    except JWTError:
        raise UnauthorizedException("Invalid reset token")
    if payload.get("type") != "reset" or not payload.get("sub") or not payload.get("pwd"):
        raise UnauthorizedException("Invalid reset token")
    return payload


def reset_token_matches(payload: dict, password_hash: str) -> bool:
    return hmac.compare_digest(payload["pwd"], password_fingerprint(password_hash))


# ─── Signed Storage URLs ──────────────────────────────────────────────────────
def create_storage_token(bucket: str, path: str, expires_in: int) -> str:
    expire = datetime.now(timezone.utc) + timedelta(seconds=expires_in)
    return jwt.encode(
        {"url": f"{bucket}/{path}", "type": "storage", "exp": expire},
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
    )


def verify_storage_token(token: str, bucket: str, path: str) -> None:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except ExpiredSignatureError:
        raise UnauthorizedException("Signed URL has expired")
    except JWTError:
        raise UnauthorizedException("Invalid signed URL")
    if payload.get("type") != "storage" or payload.get("url") != f"{bucket}/{path}":
        raise UnauthorizedException("Invalid signed URL")


# ─── OTP ──────────────────────────────────────────────────────────────────────
def generate_otp(length: int = 6) -> str:
    """Generate a uniformly random numeric OTP string of given length."""
    return "".join(secrets.choice("0123456789") for _ in range(length))


def otp_expiry() -> datetime:
    """Return OTP expiry timestamp (UTC)."""
    return datetime.now(timezone.utc) + timedelta(minutes=settings.OTP_EXPIRE_MINUTES)


def is_expired(expires_at: datetime) -> bool:
    """Compare a stored timestamp with now; naive values are taken as UTC."""
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    return expires_at < datetime.now(timezone.utc)
