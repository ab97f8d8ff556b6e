"""
Import all models here so that:
1. Alembic can auto-detect them when generating migrations
2. Relationships between models resolve correctly

Order matters: import parent tables before child tables.
"""

from motorent.models.auth_account import AuthAccount
from motorent.models.refresh_token import RefreshToken
from motorent.models.otp_code import OTPCode
from motorent.models.user import User
from motorent.models.admin_user import AdminUser, AdminRole
from motorent.models.motorcycle import Motorcycle, Availability
from motorent.models.reservation import Reservation, ReservationStatus
from motorent.models.document_verification import DocumentVerification, DocumentType, DocumentStatus
from motorent.models.notification import Notification
from motorent.models.transaction import Transaction, TransactionType, TransactionStatus
from motorent.models.contact_message import ContactMessage, ContactStatus

__all__ = [
    "AuthAccount",
    "RefreshToken",
    "OTPCode",
    "User",
    "AdminUser",
    "AdminRole",
    "Motorcycle",
    "Availability",
    "Reservation",
    "ReservationStatus",
    "DocumentVerification",
    "DocumentType",
    "DocumentStatus",
    "Notification",
    "Transaction",
    "TransactionType",
    "TransactionStatus",
    "ContactMessage",
    "ContactStatus",
]
