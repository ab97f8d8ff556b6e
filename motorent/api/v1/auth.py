from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from motorent.database import get_db
from motorent.dependencies import get_current_identity, get_current_user, get_token_payload
from motorent.models.admin_user import AdminUser
from motorent.models.user import User
from motorent.schemas.auth import (
    SignUpRequest, SignInRequest, VerifyEmailRequest, EmailOnlyRequest,
    RefreshTokenRequest, ResetPasswordRequest, ChangePasswordRequest,
    UpdateEmailRequest, ActivateWebRequest,
)
from motorent.schemas.common import success_response
from motorent.services.admin_service import serialize_admin
from motorent.services.auth_service import auth_service
from motorent.services.user_service import serialize_profile

router = APIRouter(prefix="/auth")


# ─── POST /auth/sign-up ───────────────────────────────────────────────────────
@router.post("/sign-up", status_code=status.HTTP_201_CREATED, summary="Register a customer account")
def sign_up(data: SignUpRequest, db: Session = Depends(get_db)):
    """
    Register a customer.
    - No tokens are issued; the email must be verified with the emailed code first.
    - A profile created on the mobile app keeps its id.
    """
    result = auth_service.sign_up(db, data)
    message = "Registration successful. Check your email for the verification code." \
        if result["verificationSent"] else \
        "Registration successful, but the verification email could not be sent. Please request a new code."
    return success_response(message, result)


# ─── POST /auth/verify-email ──────────────────────────────────────────────────
@router.post("/verify-email", summary="Confirm an email address with the 6-digit code")
def verify_email(data: VerifyEmailRequest, db: Session = Depends(get_db)):
    return success_response("Email verified. You can now sign in.", auth_service.verify_email(db, data.email, data.code))


# ─── POST /auth/resend-verification ───────────────────────────────────────────
@router.post("/resend-verification", summary="Send a new verification code")
def resend_verification(data: EmailOnlyRequest, db: Session = Depends(get_db)):
    sent = auth_service.resend_verification(db, data.email)
    return success_response("Verification code sent" if sent else "Email is already verified", {"sent": sent})


# ─── POST /auth/sign-in ───────────────────────────────────────────────────────
@router.post("/sign-in", summary="Sign in with email or username")
def sign_in(data: SignInRequest, db: Session = Depends(get_db)):
    """Returns accessToken and refreshToken. Admin accounts sign in here too."""
    return success_response("Login successful", auth_service.sign_in(db, data.identifier, data.password))


# ─── POST /auth/admin/sign-in ─────────────────────────────────────────────────
@router.post("/admin/sign-in", summary="Sign in to the admin console")
def admin_sign_in(data: SignInRequest, db: Session = Depends(get_db)):
    return success_response("Login successful", auth_service.admin_sign_in(db, data.identifier, data.password))


# ─── POST /auth/refresh ───────────────────────────────────────────────────────
@router.post("/refresh", summary="Exchange a refresh token for a new token pair")
def refresh(data: RefreshTokenRequest, db: Session = Depends(get_db)):
    return success_response("Token refreshed", auth_service.refresh_token(db, data.refreshToken))


# ─── POST /auth/sign-out ──────────────────────────────────────────────────────
@router.post("/sign-out", summary="Revoke a refresh token")
def sign_out(
    data:    RefreshTokenRequest,
    db:      Session = Depends(get_db),
    payload: dict    = Depends(get_token_payload),
):
    auth_service.sign_out(db, data.refreshToken, payload["sub"])
    return success_response("Logged out successfully")


# ─── Password reset ───────────────────────────────────────────────────────────
@router.post("/forgot-password", summary="Email a password reset link")
def forgot_password(data: EmailOnlyRequest, db: Session = Depends(get_db)):
    auth_service.request_password_reset(db, data.email)
    return success_response("If this email is registered, a password reset link has been sent.")


@router.post("/reset-password", summary="Set a new password with a reset token")
def reset_password(data: ResetPasswordRequest, db: Session = Depends(get_db)):
    auth_service.reset_password(db, data.resetToken, data.newPassword)
    return success_response("Password has been reset. Please sign in with your new password.")


# ─── Account ──────────────────────────────────────────────────────────────────
@router.patch("/change-password", summary="Change the signed-in account's password")
def change_password(
    data:     ChangePasswordRequest,
    db:       Session           = Depends(get_db),
    identity: User | AdminUser  = Depends(get_current_identity),
):
    auth_service.change_password(db, identity.email, data.currentPassword, data.newPassword)
    return success_response("Password changed successfully")


@router.patch("/email", summary="Change the signed-in customer's email")
def update_email(
    data: UpdateEmailRequest,
    db:   Session = Depends(get_db),
    user: User    = Depends(get_current_user),
):
    return success_response("Email updated. Please verify the new address.",
                            auth_service.update_email(db, user, data.newEmail))


@router.post("/activate-web", status_code=status.HTTP_201_CREATED,
             summary="Enable web login for an account created on the mobile app")
def activate_web(data: ActivateWebRequest, db: Session = Depends(get_db)):
    result = auth_service.activate_mobile_user_for_web(db, data.email, data.password)
    return success_response("Web login enabled. Check your email for the verification code.", result)


@router.get("/me", summary="Current identity")
def me(identity: User | AdminUser = Depends(get_current_identity)):
    if isinstance(identity, AdminUser):
        return success_response("Profile retrieved", {**serialize_admin(identity), "isAdmin": True})
    return success_response("Profile retrieved", {**serialize_profile(identity), "role": "user", "isAdmin": False})
