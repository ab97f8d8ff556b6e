import logging

from sqlalchemy.orm import Session

from motorent.config import settings
from motorent.models.otp_code import OTPCode
from motorent.services.email_service import email_service
from motorent.utils.security import generate_otp, is_expired, otp_expiry

logger = logging.getLogger(__name__)


class OTPService:
    """
    Six-digit email verification codes.

    At most one live code exists per email: requesting a new one deletes the
    previous row. A code verifies once; expired rows are removed on lookup.
    """

    def request_otp(self, db: Session, email: str, name: str | None = None) -> None:
        email = email.lower()
        code = generate_otp(settings.OTP_LENGTH)

        db.query(OTPCode).filter(OTPCode.email == email).delete(synchronize_session=False)
        db.add(OTPCode(email=email, code=code, expires_at=otp_expiry()))
        db.commit()

        # The row stays even if delivery fails; a resend replaces it.
        email_service.send_verification_code(email, name or email.split("@")[0], code)
        logger.info(f"Verification code issued for {email}")

    def verify_otp(self, db: Session, email: str, code: str) -> bool:
        email = email.lower()
        otp = db.query(OTPCode).filter(OTPCode.email == email) \
                .order_by(OTPCode.created_at.desc()).first()
        if not otp:
            return False

        if is_expired(otp.expires_at):
            db.delete(otp)
            db.commit()
            return False

        if otp.code != code.strip():
            return False

        db.delete(otp)
        db.commit()
        return True


otp_service = OTPService()
