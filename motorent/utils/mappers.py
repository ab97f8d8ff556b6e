"""
Field mapping between the database row shape (snake_case) and the API
shape (camelCase), plus small formatting and validation helpers.

Every transform accepts either an ORM instance or a plain row dict.
"""

import enum
import logging
import math
import random
import re
import string
import time
from datetime import date, datetime, timezone
from typing import Any, Iterable

from sqlalchemy import inspect
from sqlalchemy.exc import NoResultFound

logger = logging.getLogger(__name__)


# ─── Row access ───────────────────────────────────────────────────────────────
def _plain(value: Any) -> Any:
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def as_row(obj: Any) -> dict:
    """Column values of an ORM instance (or a copy of a dict) with enums and dates flattened."""
    if obj is None:
        return {}
    if isinstance(obj, dict):
        return {k: _plain(v) for k, v in obj.items()}
    mapper = inspect(obj).mapper
    return {attr.key: _plain(getattr(obj, attr.key)) for attr in mapper.column_attrs}


def _related(obj: Any, name: str) -> Any:
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


# ═══════════════════════════════════════════════════════════════════════════════
# MOTORCYCLES
# ═══════════════════════════════════════════════════════════════════════════════
def transform_motorcycle(db_motorcycle: Any) -> dict:
    row = as_row(db_motorcycle)
    return {
        "id":             row.get("id"),
        "name":           row.get("name"),
        "brand":          row.get("brand"),
        "model":          row.get("model"),
        "type":           row.get("type"),
        "engineCapacity": row.get("engine_capacity"),
        "transmission":   row.get("transmission"),
        "year":           row.get("year"),
        "color":          row.get("color"),
        "plateNumber":    row.get("plate_number"),
        "fuelCapacity":   row.get("fuel_capacity"),
        "pricePerDay":    row.get("price_per_day"),
        "description":    row.get("description"),
        "image":          row.get("image"),
        "features":       row.get("features"),
        "availability":   row.get("availability"),
        "rating":         row.get("rating"),
        "reviewCount":    row.get("review_count"),
        "fuelType":       row.get("fuel_type"),
        "mileage":        row.get("mileage"),
    }


def to_db_motorcycle(motorcycle: dict) -> dict:
    return {
        "id":              motorcycle.get("id"),
        "name":            motorcycle.get("name"),
        "brand":           motorcycle.get("brand"),
        "model":           motorcycle.get("model"),
        "type":            motorcycle.get("type"),
        "engine_capacity": motorcycle.get("engineCapacity"),
        "transmission":    motorcycle.get("transmission"),
        "year":            motorcycle.get("year"),
        "color":           motorcycle.get("color"),
        "plate_number":    motorcycle.get("plateNumber"),
        "fuel_capacity":   motorcycle.get("fuelCapacity"),
        "price_per_day":   motorcycle.get("pricePerDay"),
        "description":     motorcycle.get("description"),
        "image":           motorcycle.get("image"),
        "features":        motorcycle.get("features"),
        "availability":    motorcycle.get("availability"),
        "rating":          motorcycle.get("rating"),
        "review_count":    motorcycle.get("reviewCount"),
        "fuel_type":       motorcycle.get("fuelType"),
        "mileage":         motorcycle.get("mileage"),
    }


# ═══════════════════════════════════════════════════════════════════════════════
# RESERVATIONS
# ═══════════════════════════════════════════════════════════════════════════════
def transform_reservation(db_reservation: Any) -> dict:
    row = as_row(db_reservation)
    motorcycle = _related(db_reservation, "motorcycle")
    return {
        "id":                   row.get("id"),
        "userId":               row.get("user_id"),
        "motorcycleId":         row.get("motorcycle_id"),
        "motorcycle":           transform_motorcycle(motorcycle) if motorcycle is not None else None,
        "startDate":            row.get("start_date"),
        "endDate":              row.get("end_date"),
        "pickupTime":           row.get("pickup_time"),
        "returnTime":           row.get("return_time"),
        "totalPrice":           row.get("total_price"),
        "status":               row.get("status"),
        "createdAt":            row.get("created_at"),
        "customerName":         row.get("customer_name"),
        "customerEmail":        row.get("customer_email"),
        "customerPhone":        row.get("customer_phone"),
        "paymentMethod":        row.get("payment_method"),
        "gcashReferenceNumber": row.get("gcash_reference_number"),
        "gcashProofUrl":        row.get("gcash_proof_url"),
        "adminNotes":           row.get("admin_notes"),
        "licenseImageUrl":      row.get("license_image_url"),
    }


def to_db_reservation(reservation: dict) -> dict:
    """Writable reservation columns. id, created_at and license_image_url are never written from here."""
    return {
        "user_id":                reservation.get("userId"),
        "motorcycle_id":          reservation.get("motorcycleId"),
        "start_date":             reservation.get("startDate"),
        "end_date":               reservation.get("endDate"),
        "pickup_time":            reservation.get("pickupTime"),
        "return_time":            reservation.get("returnTime"),
        "total_price":            reservation.get("totalPrice"),
        "status":                 reservation.get("status"),
        "customer_name":          reservation.get("customerName"),
        "customer_email":         reservation.get("customerEmail"),
        "customer_phone":         reservation.get("customerPhone"),
        "payment_method":         reservation.get("paymentMethod"),
        "gcash_reference_number": reservation.get("gcashReferenceNumber"),
        "gcash_proof_url":        reservation.get("gcashProofUrl"),
        "admin_notes":            reservation.get("adminNotes"),
    }


# ═══════════════════════════════════════════════════════════════════════════════
# READ-ONLY ENTITIES
# ═══════════════════════════════════════════════════════════════════════════════
def transform_transaction(db_transaction: Any) -> dict:
    row = as_row(db_transaction)
    return {
        "id":          row.get("id"),
        "type":        row.get("type"),
        "amount":      row.get("amount"),
        "date":        row.get("date"),
        "status":      row.get("status"),
        "description": row.get("description"),
    }


def transform_notification(db_notification: Any) -> dict:
    row = as_row(db_notification)
    return {
        "id":             row.get("id"),
        "type":           row.get("type"),
        "title":          row.get("title"),
        "reservationId":  row.get("reservation_id"),
        "motorcycleName": row.get("motorcycle_name"),
        "message":        row.get("message"),
        "timestamp":      row.get("timestamp"),
        "read":           row.get("read"),
    }


def transform_user(db_user: Any) -> dict:
    row = as_row(db_user)
    return {
        "id":    row.get("id"),
        "name":  row.get("name"),
        "email": row.get("email"),
        "phone": row.get("phone"),
    }


# ─── Batch variants ───────────────────────────────────────────────────────────
def transform_motorcycles(rows: Iterable[Any]) -> list[dict]:
    return [transform_motorcycle(r) for r in rows]


def transform_reservations(rows: Iterable[Any]) -> list[dict]:
    return [transform_reservation(r) for r in rows]


def transform_transactions(rows: Iterable[Any]) -> list[dict]:
    return [transform_transaction(r) for r in rows]


def transform_notifications(rows: Iterable[Any]) -> list[dict]:
    return [transform_notification(r) for r in rows]


def transform_users(rows: Iterable[Any]) -> list[dict]:
    return [transform_user(r) for r in rows]


# ═══════════════════════════════════════════════════════════════════════════════
# ERROR CLASSIFICATION
# ═══════════════════════════════════════════════════════════════════════════════
_SQLITE_CODES = {
    "UNIQUE constraint failed":      "23505",
    "FOREIGN KEY constraint failed": "23503",
}


def classify_db_error(error: Any) -> tuple[str | None, str]:
    if isinstance(error, dict):
        return error.get("code"), error.get("message") or ""
    if isinstance(error, NoResultFound):
        return "PGRST116", str(error)

    orig = getattr(error, "orig", None)
    message = str(orig) if orig is not None else str(error)
    code = getattr(orig, "pgcode", None)
    if code is None and orig is None:
        # SQLAlchemy errors carry their own doc-link `code`; only trust SQLSTATE-like values
        raw = getattr(error, "code", None)
        if isinstance(raw, str) and (raw.isdigit() or raw == "PGRST116"):
            code = raw
    if code is None:
        for marker, sqlstate in _SQLITE_CODES.items():
            if marker in message:
                code = sqlstate
                break
    return code, message


def handle_db_error(error: Any) -> str:
    """Map a raw database/client error onto a user-facing message."""
    logger.error(f"Database error: {error}")
    code, message = classify_db_error(error)

    if "JWT" in message or "jwt" in message:
        return "Session expired. Please log in again."
    if code == "23505":
        return "This record already exists."
    if code == "23503":
        return "Cannot delete: this record is referenced elsewhere."
    if code == "PGRST116":
        return "Record not found."
    if "permission denied" in message or "RLS" in message:
        return "You do not have permission to perform this action."
    if "Failed to fetch" in message or "NetworkError" in message:
        return "Network error. Please check your connection."
    return message or "An unexpected error occurred."


# ═══════════════════════════════════════════════════════════════════════════════
# DATES
# ═══════════════════════════════════════════════════════════════════════════════
def _to_datetime(value: str | date | datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def format_date_for_db(value: str | date | datetime) -> str:
    """YYYY-MM-DD. Strings pass through untouched."""
    if isinstance(value, str):
        return value
    if isinstance(value, datetime):
        value = value.astimezone(timezone.utc) if value.tzinfo else value
        return value.date().isoformat()
    return value.isoformat()


def format_datetime_for_db(value: str | datetime) -> str:
    if isinstance(value, str):
        return value
    return value.isoformat()


def days_between(start_date: str | date | datetime, end_date: str | date | datetime) -> int:
    start = _to_datetime(start_date)
    end = _to_datetime(end_date)
    if (start.tzinfo is None) != (end.tzinfo is None):
        start = start.replace(tzinfo=None)
        end = end.replace(tzinfo=None)
    return math.ceil((end - start).total_seconds() / 86400)


def is_valid_date_range(start_date: str | date | datetime, end_date: str | date | datetime) -> bool:
    return _to_datetime(end_date).replace(tzinfo=None) >= _to_datetime(start_date).replace(tzinfo=None)


def is_date_in_past(value: str | date | datetime) -> bool:
    """True when the date falls before today (time of day ignored for today)."""
    return _to_datetime(value).date() < date.today()


def format_date(value: str | date | datetime) -> str:
    d = _to_datetime(value)
    return f"{d.strftime('%B')} {d.day}, {d.year}"


def format_datetime(value: str | date | datetime) -> str:
    d = _to_datetime(value)
    return f"{d.strftime('%B')} {d.day}, {d.year} at {d.strftime('%I:%M %p')}"


# ═══════════════════════════════════════════════════════════════════════════════
# MISC
# ═══════════════════════════════════════════════════════════════════════════════
_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_PH_PHONE_RE = re.compile(r"^(\+63|0)?9\d{9}$")


def is_valid_email(email: str) -> bool:
    return bool(_EMAIL_RE.match(email))


def is_valid_phone_number(phone: str) -> bool:
    """Philippine mobile numbers: 09123456789, +639123456789 or 9123456789."""
    return bool(_PH_PHONE_RE.match(re.sub(r"\s+", "", phone)))


def format_currency(amount: float) -> str:
    text = f"{amount:,.2f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return f"₱{text}"


def generate_id() -> str:
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"{int(time.time() * 1000)}-{suffix}"


def truncate(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length - 3] + "..."
