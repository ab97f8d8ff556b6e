from fastapi import HTTPException, status


# ═══════════════════════════════════════════════════════════════════════════════
# ERROR CODES: machine-readable constants for frontend switch/case
# ═══════════════════════════════════════════════════════════════════════════════
class ErrorCode:
    VALIDATION_ERROR          = "VALIDATION_ERROR"
    FILE_VALIDATION_ERROR     = "FILE_VALIDATION_ERROR"
    UNAUTHORIZED              = "UNAUTHORIZED"
    INVALID_CREDENTIALS       = "INVALID_CREDENTIALS"
    TOKEN_EXPIRED             = "TOKEN_EXPIRED"
    REFRESH_TOKEN_INVALID     = "REFRESH_TOKEN_INVALID"
    EMAIL_NOT_VERIFIED        = "EMAIL_NOT_VERIFIED"
    LEGACY_ACCOUNT            = "LEGACY_ACCOUNT"
    FORBIDDEN                 = "FORBIDDEN"
    NOT_FOUND                 = "NOT_FOUND"
    DUPLICATE_ENTRY           = "DUPLICATE_ENTRY"
    RESOURCE_IN_USE           = "RESOURCE_IN_USE"
    BOOKING_CONFLICT          = "BOOKING_CONFLICT"
    MOTORCYCLE_UNAVAILABLE    = "MOTORCYCLE_UNAVAILABLE"
    INVALID_DATE_RANGE        = "INVALID_DATE_RANGE"
    INVALID_STATUS_TRANSITION = "INVALID_STATUS_TRANSITION"
    RESERVATION_STATE_CONFLICT = "RESERVATION_STATE_CONFLICT"
    OTP_INVALID               = "OTP_INVALID"
    EMAIL_DELIVERY_FAILED     = "EMAIL_DELIVERY_FAILED"
    STORAGE_ERROR             = "STORAGE_ERROR"
    INTERNAL_SERVER_ERROR     = "INTERNAL_SERVER_ERROR"


# ═══════════════════════════════════════════════════════════════════════════════
# BASE EXCEPTION
# ═══════════════════════════════════════════════════════════════════════════════
class AppException(HTTPException):
    """
    Base exception for all application-level errors.
    Carries a machine-readable error_code for frontend handling.
    """
    def __init__(
        self,
        status_code: int,
        message: str,
        error_code: str,
        details: list | None = None,
        field: str | None = None,
    ):
        self.message    = message
        self.error_code = error_code
        super().__init__(status_code=status_code, detail={
            "message": message,
            "error": {
                "code": error_code,
                "details": details,
                "field": field,
            }
        })

    def __str__(self) -> str:
        return self.message


# ═══════════════════════════════════════════════════════════════════════════════
# AUTH
# ═══════════════════════════════════════════════════════════════════════════════

class UnauthorizedException(AppException):
    def __init__(self, message: str = "Authentication required"):
        super().__init__(status.HTTP_401_UNAUTHORIZED, message, ErrorCode.UNAUTHORIZED)


class InvalidCredentialsException(AppException):
    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(status.HTTP_401_UNAUTHORIZED, message, ErrorCode.INVALID_CREDENTIALS)


class TokenExpiredException(AppException):
    def __init__(self):
        super().__init__(status.HTTP_401_UNAUTHORIZED, "Access token has expired", ErrorCode.TOKEN_EXPIRED)


class RefreshTokenInvalidException(AppException):
    def __init__(self):
        super().__init__(status.HTTP_401_UNAUTHORIZED, "Refresh token is invalid or revoked", ErrorCode.REFRESH_TOKEN_INVALID)


class EmailNotVerifiedException(AppException):
    def __init__(self):
        super().__init__(
            status.HTTP_403_FORBIDDEN,
            "Please verify your email address before signing in. Check your inbox for the verification code.",
            ErrorCode.EMAIL_NOT_VERIFIED,
            field="email",
        )


class LegacyAccountException(AppException):
    """Profile exists but was created on the mobile app and has no web credential."""
    def __init__(self):
        super().__init__(
            status.HTTP_409_CONFLICT,
            "This account was created on the mobile app. "
            "Please activate it for web access using the same email and password you use on mobile.",
            ErrorCode.LEGACY_ACCOUNT,
            field="email",
        )


class ForbiddenException(AppException):
    def __init__(self, message: str = "You do not have permission to perform this action"):
        super().__init__(status.HTTP_403_FORBIDDEN, message, ErrorCode.FORBIDDEN)


class OTPInvalidException(AppException):
    def __init__(self):
        super().__init__(
            status.HTTP_400_BAD_REQUEST,
            "Invalid or expired verification code",
            ErrorCode.OTP_INVALID,
            field="code",
        )


# ═══════════════════════════════════════════════════════════════════════════════
# RESOURCES
# ═══════════════════════════════════════════════════════════════════════════════

class NotFoundException(AppException):
    def __init__(self, resource: str = "Resource", message: str | None = None):
        super().__init__(status.HTTP_404_NOT_FOUND, message or f"{resource} not found", ErrorCode.NOT_FOUND)


class DuplicateEntryException(AppException):
    def __init__(self, message: str = "Record already exists", field: str | None = None):
        super().__init__(status.HTTP_409_CONFLICT, message, ErrorCode.DUPLICATE_ENTRY, field=field)


class ResourceInUseException(AppException):
    def __init__(self, message: str = "Cannot delete: this record is referenced elsewhere."):
        super().__init__(status.HTTP_409_CONFLICT, message, ErrorCode.RESOURCE_IN_USE)


class FileValidationException(AppException):
    def __init__(self, message: str):
        super().__init__(status.HTTP_400_BAD_REQUEST, message, ErrorCode.FILE_VALIDATION_ERROR, field="file")


class StorageException(AppException):
    def __init__(self, message: str = "Storage operation failed"):
        super().__init__(status.HTTP_500_INTERNAL_SERVER_ERROR, message, ErrorCode.STORAGE_ERROR)


# ═══════════════════════════════════════════════════════════════════════════════
# RESERVATIONS
# ═══════════════════════════════════════════════════════════════════════════════

class BookingConflictException(AppException):
    def __init__(self):
        super().__init__(
            status.HTTP_409_CONFLICT,
            "Motorcycle is already booked for the selected dates",
            ErrorCode.BOOKING_CONFLICT,
        )


class MotorcycleUnavailableException(AppException):
    def __init__(self):
        super().__init__(
            status.HTTP_400_BAD_REQUEST,
            "Motorcycle is currently under maintenance",
            ErrorCode.MOTORCYCLE_UNAVAILABLE,
        )


class InvalidDateRangeException(AppException):
    def __init__(self, message: str = "End date must be on or after start date"):
        super().__init__(status.HTTP_400_BAD_REQUEST, message, ErrorCode.INVALID_DATE_RANGE)


class InvalidStatusTransitionException(AppException):
    def __init__(self, current: str, target: str):
        super().__init__(
            status.HTTP_400_BAD_REQUEST,
            f"Cannot change reservation status from '{current}' to '{target}'",
            ErrorCode.INVALID_STATUS_TRANSITION,
            field="status",
        )


class ReservationStateConflictException(AppException):
    def __init__(self):
        super().__init__(
            status.HTTP_409_CONFLICT,
            "Reservation was updated by someone else. Refresh and try again.",
            ErrorCode.RESERVATION_STATE_CONFLICT,
        )


# ═══════════════════════════════════════════════════════════════════════════════
# TRANSPORT
# ═══════════════════════════════════════════════════════════════════════════════

class EmailDeliveryException(AppException):
    def __init__(self, message: str = "Failed to send email"):
        super().__init__(status.HTTP_502_BAD_GATEWAY, message, ErrorCode.EMAIL_DELIVERY_FAILED)
