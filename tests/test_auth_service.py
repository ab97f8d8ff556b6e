import re
from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from conftest import PASSWORD, create_admin, create_customer
from motorent.config import settings
from motorent.models import AuthAccount, OTPCode, RefreshToken, User
from motorent.schemas.auth import SignUpRequest
from motorent.services.auth_service import auth_service
from motorent.utils.exceptions import (
    DuplicateEntryException, EmailDeliveryException, EmailNotVerifiedException,
    ForbiddenException, InvalidCredentialsException, LegacyAccountException,
    OTPInvalidException, RefreshTokenInvalidException, UnauthorizedException,
)
from motorent.utils.security import create_reset_token, hash_password, verify_access_token


def _sign_up(db, email="maria@example.com", username="maria", **kwargs):
    data = SignUpRequest(name="Maria Santos", email=email, password=PASSWORD,
                         phone="09181234567", username=username, **kwargs)
    return auth_service.sign_up(db, data)


class TestSignUp:

    def test_creates_unverified_account_and_profile(self, db, sent_emails):
        result = _sign_up(db)

        account = db.query(AuthAccount).filter(AuthAccount.email == "maria@example.com").one()
        assert account.email_confirmed_at is None
        assert db.get(User, account.id).username == "maria"
        assert result["requiresVerification"] is True
        assert result["verificationSent"] is True
        assert "accessToken" not in result
        assert db.query(OTPCode).filter(OTPCode.email == "maria@example.com").count() == 1

    def test_duplicate_email_rejected(self, db):
        _sign_up(db)
        with pytest.raises(DuplicateEntryException):
            _sign_up(db, username="maria2")

    def test_taken_username_keeps_auth_account(self, db):
        create_customer(db, email="juan@example.com", username="maria")

        with pytest.raises(DuplicateEntryException) as exc:
            _sign_up(db)
        assert "username is already taken" in exc.value.message
        assert db.query(AuthAccount).filter(AuthAccount.email == "maria@example.com").count() == 1

    def test_reuses_mobile_profile_id(self, db):
        legacy = create_customer(db, email="maria@example.com", username=None, with_account=False)

        result = _sign_up(db)

        assert result["id"] == legacy.id
        assert db.query(AuthAccount).filter(AuthAccount.email == "maria@example.com").one().id == legacy.id
        assert db.query(User).count() == 1

    def test_email_failure_reported_not_raised(self, db, sent_emails):
        sent_emails.side_effect = EmailDeliveryException()
        assert _sign_up(db)["verificationSent"] is False


class TestVerifyEmail:

    def test_code_confirms_email(self, db):
        _sign_up(db)
        code = db.query(OTPCode).filter(OTPCode.email == "maria@example.com").one().code

        profile = auth_service.verify_email(db, "maria@example.com", code)

        assert profile["email"] == "maria@example.com"
        assert db.query(AuthAccount).filter(AuthAccount.email == "maria@example.com").one().is_email_confirmed

    def test_wrong_code(self, db):
        _sign_up(db)
        with pytest.raises(OTPInvalidException):
            auth_service.verify_email(db, "maria@example.com", "not-it")


class TestSignIn:

    def test_email_and_username_resolve_to_same_identity(self, db):
        user = create_customer(db, email="juan@example.com", username="juan")

        by_email = auth_service.sign_in(db, "juan@example.com", PASSWORD)
        by_username = auth_service.sign_in(db, "juan", PASSWORD)

        assert by_email["user"]["id"] == by_username["user"]["id"] == user.id
        assert verify_access_token(by_username["accessToken"])["sub"] == user.id
        assert verify_access_token(by_username["accessToken"])["role"] == "user"

    def test_unknown_username(self, db):
        with pytest.raises(InvalidCredentialsException) as exc:
            auth_service.sign_in(db, "ghost", PASSWORD)
        assert "not registered" in exc.value.message

    def test_wrong_password(self, db):
        create_customer(db)
        with pytest.raises(InvalidCredentialsException):
            auth_service.sign_in(db, "juan@example.com", "Wrong1234")

    def test_mobile_only_profile(self, db):
        create_customer(db, with_account=False)
        with pytest.raises(LegacyAccountException):
            auth_service.sign_in(db, "juan@example.com", PASSWORD)

    def test_unverified_email(self, db):
        create_customer(db, verified=False)
        with pytest.raises(EmailNotVerifiedException):
            auth_service.sign_in(db, "juan@example.com", PASSWORD)

    def test_admin_identity_takes_precedence(self, db):
        admin = create_admin(db)

        result = auth_service.sign_in(db, "admin@example.com", PASSWORD)

        assert result["user"]["isAdmin"] is True
        assert verify_access_token(result["accessToken"])["role"] == "admin"
        assert verify_access_token(result["accessToken"])["sub"] == admin.id
        db.refresh(admin)
        assert admin.last_login is not None

    def test_missing_profile_created_from_metadata(self, db):
        account = AuthAccount(
            email="new@example.com",
            password_hash=hash_password(PASSWORD),
            email_confirmed_at=datetime.now(timezone.utc),
            user_metadata={"name": "New Rider"},
        )
        db.add(account)
        db.commit()

        result = auth_service.sign_in(db, "new@example.com", PASSWORD)

        profile = db.get(User, account.id)
        assert profile.name == "New Rider"
        assert profile.phone == "N/A"
        assert result["user"]["id"] == account.id

    def test_admin_console_refuses_customers(self, db):
        create_customer(db)
        with pytest.raises(ForbiddenException):
            auth_service.admin_sign_in(db, "juan@example.com", PASSWORD)


class TestTokens:

    def test_refresh_rotates_token(self, db):
        create_customer(db)
        first = auth_service.sign_in(db, "juan@example.com", PASSWORD)

        second = auth_service.refresh_token(db, first["refreshToken"])

        assert second["refreshToken"] != first["refreshToken"]
        with pytest.raises(RefreshTokenInvalidException):
            auth_service.refresh_token(db, first["refreshToken"])

    def test_sign_out_revokes(self, db):
        user = create_customer(db)
        tokens = auth_service.sign_in(db, "juan@example.com", PASSWORD)

        auth_service.sign_out(db, tokens["refreshToken"], user.id)

        assert db.query(RefreshToken).filter(RefreshToken.token == tokens["refreshToken"]).one().revoked
        with pytest.raises(RefreshTokenInvalidException):
            auth_service.refresh_token(db, tokens["refreshToken"])

    def test_sign_out_accepts_expired_refresh_token(self, db):
        user = create_customer(db)
        past = datetime.now(timezone.utc) - timedelta(days=1)
        expired = jwt.encode(
            {"sub": user.id, "role": "user", "type": "refresh", "jti": "old", "exp": past},
            settings.SECRET_KEY, algorithm=settings.ALGORITHM,
        )
        db.add(RefreshToken(account_id=user.id, token=expired, expires_at=past))
        db.commit()

        auth_service.sign_out(db, expired, user.id)

        assert db.query(RefreshToken).filter(RefreshToken.token == expired).one().revoked


def _reset_token_from_email(sent_emails) -> str:
    return re.search(r"reset-password\?token=(\S+)", sent_emails.call_args.args[3]).group(1)


class TestPasswords:

    def test_reset_flow(self, db, sent_emails):
        user = create_customer(db)
        auth_service.request_password_reset(db, "juan@example.com")

        auth_service.reset_password(db, _reset_token_from_email(sent_emails), "Changed123")

        assert auth_service.sign_in(db, "juan@example.com", "Changed123")["user"]["id"] == user.id

    def test_reset_link_works_once(self, db, sent_emails):
        create_customer(db)
        auth_service.request_password_reset(db, "juan@example.com")
        token = _reset_token_from_email(sent_emails)
        auth_service.reset_password(db, token, "Changed123")
        auth_service.change_password(db, "juan@example.com", "Changed123", "Second456")

        with pytest.raises(UnauthorizedException):
            auth_service.reset_password(db, token, "Attacker789")
        auth_service.sign_in(db, "juan@example.com", "Second456")

    def test_password_change_voids_pending_link(self, db):
        user = create_customer(db)
        account = db.get(AuthAccount, user.id)
        token = create_reset_token(account.id, account.password_hash)

        auth_service.change_password(db, "juan@example.com", PASSWORD, "Changed123")

        with pytest.raises(UnauthorizedException):
            auth_service.reset_password(db, token, "Attacker789")

    def test_reset_is_silent_for_unknown_email(self, db, sent_emails):
        auth_service.request_password_reset(db, "nobody@example.com")
        sent_emails.assert_not_called()

    def test_bad_reset_token(self, db):
        with pytest.raises(UnauthorizedException):
            auth_service.reset_password(db, "garbage", "Changed123")

    def test_change_password_checks_current(self, db):
        create_customer(db)
        with pytest.raises(InvalidCredentialsException):
            auth_service.change_password(db, "juan@example.com", "Wrong1234", "Changed123")
        auth_service.change_password(db, "juan@example.com", PASSWORD, "Changed123")
        auth_service.sign_in(db, "juan@example.com", "Changed123")


class TestAccountChanges:

    def test_activate_mobile_user(self, db):
        legacy = create_customer(db, with_account=False)

        result = auth_service.activate_mobile_user_for_web(db, "juan@example.com", PASSWORD)

        assert result["id"] == legacy.id
        assert db.get(AuthAccount, legacy.id) is not None
        with pytest.raises(DuplicateEntryException):
            auth_service.activate_mobile_user_for_web(db, "juan@example.com", PASSWORD)

    def test_update_email_requires_new_verification(self, db):
        user = create_customer(db)

        result = auth_service.update_email(db, user, "juan.new@example.com")

        account = db.get(AuthAccount, user.id)
        assert account.email == "juan.new@example.com"
        assert account.email_confirmed_at is None
        assert result["email"] == "juan.new@example.com"
        with pytest.raises(EmailNotVerifiedException):
            auth_service.sign_in(db, "juan.new@example.com", PASSWORD)
