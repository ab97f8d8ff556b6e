import logging
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from motorent.config import settings
from motorent.models.admin_user import AdminUser
from motorent.models.auth_account import AuthAccount
from motorent.models.refresh_token import RefreshToken
from motorent.models.user import User
from motorent.schemas.auth import SignUpRequest
from motorent.services.admin_service import admin_service, serialize_admin
from motorent.services.email_service import email_service
from motorent.services.otp_service import otp_service
from motorent.services.user_service import user_service, serialize_profile
from motorent.utils.exceptions import (
    DuplicateEntryException, EmailDeliveryException, EmailNotVerifiedException,
    ForbiddenException, InvalidCredentialsException, LegacyAccountException,
    NotFoundException, OTPInvalidException, RefreshTokenInvalidException, UnauthorizedException,
)
from motorent.utils.security import (
    create_access_token, create_refresh_token, create_reset_token,
    hash_password, is_expired, reset_token_matches, verify_password, verify_refresh_token,
    verify_reset_token,
)

logger = logging.getLogger(__name__)

USER_ROLE = "user"


class AuthService:

    # ─── Helpers ──────────────────────────────────────────────────────────────
    def _account_by_email(self, db: Session, email: str) -> AuthAccount | None:
        return db.query(AuthAccount).filter(AuthAccount.email == email.lower()).first()

    def _send_otp(self, db: Session, email: str, name: str | None) -> bool:
        try:
            otp_service.request_otp(db, email, name)
            return True
        except EmailDeliveryException as e:
            logger.warning(f"Verification email to {email} failed: {e}")
            return False

    def _issue_tokens(self, db: Session, account: AuthAccount, subject_id: str, role: str) -> dict:
        access_token = create_access_token(subject_id, role)
        refresh_token_str, refresh_expires = create_refresh_token(subject_id, role)
        db.add(RefreshToken(
            account_id=account.id,
            token=refresh_token_str,
            expires_at=refresh_expires,
            revoked=False,
        ))
        db.commit()
        return {
            "accessToken":  access_token,
            "refreshToken": refresh_token_str,
            "tokenType":    "Bearer",
            "expiresIn":    settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        }

    def _ensure_profile(self, db: Session, account: AuthAccount) -> User:
        """Profile for an auth account, created from the sign-up metadata when missing."""
        profile = db.get(User, account.id)
        if profile:
            return profile

        by_email = user_service.find_by_email(db, account.email)
        if by_email:
            logger.warning(f"Profile {by_email.id} for {account.email} does not share the account id")
            return by_email

        meta = account.user_metadata or {}
        username = meta.get("username")
        if username and user_service.username_exists(db, username):
            username = None
        profile = User(
            id=account.id,
            email=account.email,
            name=meta.get("name") or account.email.split("@")[0] or "User",
            phone=meta.get("phone") or "N/A",
            username=username,
        )
        db.add(profile)
        db.commit()
        db.refresh(profile)
        logger.info(f"Created missing profile for {account.email}")
        return profile

    # ─── Sign Up ──────────────────────────────────────────────────────────────
    def sign_up(self, db: Session, data: SignUpRequest) -> dict:
        email = data.email.lower()
        if self._account_by_email(db, email):
            raise DuplicateEntryException(
                "This email is already registered. Please login instead.", field="email",
            )

        legacy = user_service.find_by_email(db, email)
        account = AuthAccount(
            email=email,
            password_hash=hash_password(data.password),
            user_metadata={"name": data.name, "username": data.username, "phone": data.phone},
        )
        if legacy:
            account.id = legacy.id
        db.add(account)
        db.commit()
        db.refresh(account)

        try:
            if legacy:
                legacy.name = data.name
                if data.phone:    legacy.phone    = data.phone
                if data.username: legacy.username = data.username
                profile = legacy
            else:
                profile = User(id=account.id, email=email, name=data.name,
                               phone=data.phone, username=data.username)
                db.add(profile)
            db.commit()
        except IntegrityError as e:
            db.rollback()
            logger.error(f"Profile write failed for {email}; auth account {account.id} kept: {e.orig}")
            if "username" in str(e.orig):
                raise DuplicateEntryException(
                    "This username is already taken. Please choose a different one.", field="username",
                )
            raise

        verification_sent = self._send_otp(db, email, data.name)
        return {
            "id":                   profile.id,
            "email":                email,
            "name":                 profile.name,
            "phone":                profile.phone,
            "requiresVerification": True,
            "verificationSent":     verification_sent,
        }

    # ─── Email verification ───────────────────────────────────────────────────
    def verify_email(self, db: Session, email: str, code: str) -> dict:
        if not otp_service.verify_otp(db, email, code):
            raise OTPInvalidException()

        account = self._account_by_email(db, email)
        if not account:
            raise NotFoundException("Account")
        account.email_confirmed_at = datetime.now(timezone.utc)
        db.commit()
        return serialize_profile(self._ensure_profile(db, account))

    def resend_verification(self, db: Session, email: str) -> bool:
        """Returns False when the email is already verified (nothing sent)."""
        account = self._account_by_email(db, email)
        if not account:
            raise NotFoundException("Account")
        if account.is_email_confirmed:
            return False
        name = (account.user_metadata or {}).get("name")
        otp_service.request_otp(db, account.email, name)
        return True

    # ─── Sign In ──────────────────────────────────────────────────────────────
    def _authenticate(self, db: Session, identifier: str, password: str) -> AuthAccount:
        email = identifier.strip()
        if "@" not in email:
            profile = user_service.find_by_username(db, email)
            if not profile:
                raise InvalidCredentialsException(
                    "The email or username is not registered. Sign up first to register.",
                )
            email = profile.email
        email = email.lower()

        account = self._account_by_email(db, email)
        if not account or not verify_password(password, account.password_hash):
            if not account and user_service.find_by_email(db, email):
                raise LegacyAccountException()
            raise InvalidCredentialsException("Invalid email/username or password. Please check and try again.")

        if not account.is_email_confirmed:
            raise EmailNotVerifiedException()
        return account

    def sign_in(self, db: Session, identifier: str, password: str) -> dict:
        account = self._authenticate(db, identifier, password)

        admin = admin_service.find_by_email(db, account.email)
        if admin:
            admin_service.update_last_login(db, admin)
            tokens = self._issue_tokens(db, account, admin.id, admin.role.value)
            return {**tokens, "user": {**serialize_admin(admin), "isAdmin": True}}

        profile = self._ensure_profile(db, account)
        tokens = self._issue_tokens(db, account, profile.id, USER_ROLE)
        logger.info(f"User {profile.id} signed in")
        return {**tokens, "user": {**serialize_profile(profile), "role": USER_ROLE, "isAdmin": False}}

    def admin_sign_in(self, db: Session, identifier: str, password: str) -> dict:
        account = self._authenticate(db, identifier, password)
        admin = admin_service.find_by_email(db, account.email)
        if not admin:
            raise ForbiddenException("Access denied. Admin credentials required.")
        admin_service.update_last_login(db, admin)
        tokens = self._issue_tokens(db, account, admin.id, admin.role.value)
        logger.info(f"Admin {admin.id} signed in")
        return {**tokens, "user": {**serialize_admin(admin), "isAdmin": True}}

    # ─── Refresh Token ────────────────────────────────────────────────────────
    def refresh_token(self, db: Session, refresh_token_str: str) -> dict:
        """Rotate: the presented refresh token is revoked and a new pair issued."""
        payload = verify_refresh_token(refresh_token_str)
        subject_id, role = payload.get("sub"), payload.get("role")

        stored = db.query(RefreshToken).filter(
            RefreshToken.token == refresh_token_str,
            RefreshToken.revoked.is_(False),
        ).first()
        if not stored:
            raise RefreshTokenInvalidException()

        stored.revoked = True
        if is_expired(stored.expires_at):
            db.commit()
            raise RefreshTokenInvalidException()

        identity = db.get(User, subject_id) if role == USER_ROLE else db.get(AdminUser, subject_id)
        if not identity:
            db.commit()
            raise RefreshTokenInvalidException()

        return self._issue_tokens(db, stored.account, subject_id, role)

    # ─── Sign Out ─────────────────────────────────────────────────────────────
    def sign_out(self, db: Session, refresh_token_str: str, subject_id: str) -> None:
        """Revoke the presented refresh token; an expired one is revoked too."""
        stored = db.query(RefreshToken).filter(RefreshToken.token == refresh_token_str).first()
        if stored:
            payload = verify_refresh_token(refresh_token_str, verify_exp=False)
            if payload.get("sub") == subject_id:
                stored.revoked = True
                db.commit()

    # ─── Password reset ───────────────────────────────────────────────────────
    def request_password_reset(self, db: Session, email: str) -> None:
        """
        Always succeeds for unknown emails so the endpoint does not reveal
        which addresses are registered.
        """
        account = self._account_by_email(db, email)
        if not account:
            return

        profile = db.get(User, account.id)
        admin = admin_service.find_by_email(db, account.email)
        name = (profile.name if profile else None) or (admin.name if admin else None) \
            or (account.user_metadata or {}).get("name") or account.email.split("@")[0]

        link = f"{settings.APP_URL.rstrip('/')}/reset-password?token={create_reset_token(account.id, account.password_hash)}"
        email_service.send_password_reset(account.email, name, link)

    def reset_password(self, db: Session, reset_token: str, new_password: str) -> None:
        """A reset link works once: changing the password invalidates every earlier link."""
        payload = verify_reset_token(reset_token)
        account = db.get(AuthAccount, payload["sub"])
        if not account:
            raise NotFoundException("Account")
        if not reset_token_matches(payload, account.password_hash):
            raise UnauthorizedException("Reset link has already been used. Please request a new one.")

        account.password_hash = hash_password(new_password)
        db.query(RefreshToken).filter(
            RefreshToken.account_id == account.id, RefreshToken.revoked.is_(False),
        ).update({RefreshToken.revoked: True}, synchronize_session=False)
        db.commit()
        logger.info(f"Password reset for account {account.id}")

    # ─── Account changes ──────────────────────────────────────────────────────
    def change_password(self, db: Session, email: str, current_password: str, new_password: str) -> None:
        account = self._account_by_email(db, email)
        if not account or not verify_password(current_password, account.password_hash):
            raise InvalidCredentialsException("Current password is incorrect")
        account.password_hash = hash_password(new_password)
        db.commit()

    def update_email(self, db: Session, user: User, new_email: str) -> dict:
        """Move the login and profile to a new address, which must then be verified."""
        new_email = new_email.lower()
        if self._account_by_email(db, new_email) or user_service.find_by_email(db, new_email):
            raise DuplicateEntryException("This email is already registered.", field="newEmail")

        account = self._account_by_email(db, user.email)
        if not account:
            raise NotFoundException("Account")

        account.email = new_email
        account.email_confirmed_at = None
        user.email = new_email
        db.commit()

        verification_sent = self._send_otp(db, new_email, user.name)
        return {**serialize_profile(user), "requiresVerification": True, "verificationSent": verification_sent}

    def activate_mobile_user_for_web(self, db: Session, email: str, password: str) -> dict:
        """Create web login for a profile that was registered in the mobile app."""
        email = email.lower()
        profile = user_service.find_by_email(db, email)
        if not profile:
            raise NotFoundException(message="No account found with this email. Please sign up first.")
        if self._account_by_email(db, email):
            raise DuplicateEntryException(
                "This email already has web login enabled. Please use the regular login page.",
                field="email",
            )

        account = AuthAccount(
            id=profile.id,
            email=email,
            password_hash=hash_password(password),
            user_metadata={"name": profile.name, "username": profile.username, "phone": profile.phone},
        )
        db.add(account)
        db.commit()

        verification_sent = self._send_otp(db, email, profile.name)
        return {**serialize_profile(profile), "requiresVerification": True, "verificationSent": verification_sent}


auth_service = AuthService()
