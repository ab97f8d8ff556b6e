from datetime import date, datetime

import pytest
from sqlalchemy.exc import IntegrityError, NoResultFound

from motorent.utils.mappers import (
    days_between, format_currency, format_date, format_datetime, format_date_for_db,
    generate_id, handle_db_error, is_date_in_past, is_valid_date_range, is_valid_email,
    is_valid_phone_number, to_db_motorcycle, to_db_reservation, transform_motorcycle,
    transform_reservation, transform_notification, transform_transaction, transform_user, truncate,
)

MOTORCYCLE_ROW = {
    "id": "m1", "name": "Yamaha NMAX", "brand": "Yamaha", "model": "NMAX 155", "type": "Scooter",
    "engine_capacity": 155, "transmission": "Automatic", "year": 2023, "color": "Black",
    "plate_number": "ABC 1234", "fuel_capacity": 7.1, "price_per_day": 600.0,
    "description": "Comfortable city scooter", "image": "http://img/nmax.jpg",
    "features": ["ABS", "Smart key"], "availability": "Available", "rating": 4.8,
    "review_count": 12, "fuel_type": "Gasoline", "mileage": "40 km/l",
}

RESERVATION_ROW = {
    "user_id": "u1", "motorcycle_id": "m1", "start_date": "2026-03-01", "end_date": "2026-03-03",
    "pickup_time": "09:00", "return_time": "17:00", "total_price": 1440.0, "status": "pending",
    "customer_name": "Juan", "customer_email": "juan@example.com", "customer_phone": "09171234567",
    "payment_method": "gcash", "gcash_reference_number": "REF123", "gcash_proof_url": None,
    "admin_notes": None,
}


class TestFieldMapping:

    def test_motorcycle_round_trip(self):
        assert to_db_motorcycle(transform_motorcycle(MOTORCYCLE_ROW)) == MOTORCYCLE_ROW

    def test_reservation_round_trip(self):
        assert to_db_reservation(transform_reservation(RESERVATION_ROW)) == RESERVATION_ROW

    def test_reservation_write_excludes_license_image(self):
        api = transform_reservation({**RESERVATION_ROW, "license_image_url": "x.jpg"})
        assert api["licenseImageUrl"] == "x.jpg"
        assert "license_image_url" not in to_db_reservation(api)

    def test_reservation_embeds_motorcycle(self):
        api = transform_reservation({**RESERVATION_ROW, "motorcycle": MOTORCYCLE_ROW})
        assert api["motorcycle"]["pricePerDay"] == 600.0
        assert transform_reservation(RESERVATION_ROW)["motorcycle"] is None

    def test_read_only_transforms(self):
        assert transform_user({"id": "u1", "name": "Ana", "email": "ana@example.com", "phone": None}) == {
            "id": "u1", "name": "Ana", "email": "ana@example.com", "phone": None,
        }
        tx = transform_transaction({"id": "t1", "type": "payment", "amount": 10, "status": "completed",
                                    "date": datetime(2026, 1, 2, 3, 4, 5), "description": None})
        assert tx["date"] == "2026-01-02T03:04:05"
        n = transform_notification({"id": "n1", "reservation_id": "r1", "motorcycle_name": "NMAX",
                                    "read": False, "type": "reservation-approve", "title": "t", "message": "m"})
        assert n["reservationId"] == "r1" and n["motorcycleName"] == "NMAX"


class TestHandleDbError:

    def test_unique_violation(self):
        assert handle_db_error({"code": "23505", "message": "duplicate key"}) == "This record already exists."

    def test_foreign_key_violation(self):
        assert handle_db_error({"code": "23503", "message": "fk"}) == \
            "Cannot delete: this record is referenced elsewhere."

    def test_no_rows(self):
        assert handle_db_error(NoResultFound("No row was found")) == "Record not found."

    def test_sqlite_integrity_error(self):
        err = IntegrityError("INSERT ...", {}, Exception("UNIQUE constraint failed: users.email"))
        assert handle_db_error(err) == "This record already exists."

    def test_message_classification(self):
        assert handle_db_error({"message": "JWT expired"}) == "Session expired. Please log in again."
        assert "permission" in handle_db_error({"message": "new row violates RLS policy"})
        assert "Network" in handle_db_error({"message": "TypeError: Failed to fetch"})

    def test_falls_through_to_raw_message(self):
        assert handle_db_error({"message": "something odd"}) == "something odd"
        assert handle_db_error({}) == "An unexpected error occurred."


class TestHelpers:

    def test_days_between_rounds_up(self):
        assert days_between("2026-03-01", "2026-03-03") == 2
        assert days_between(datetime(2026, 3, 1, 8), datetime(2026, 3, 2, 9)) == 2

    def test_date_range_and_past(self):
        assert is_valid_date_range("2026-03-01", "2026-03-01")
        assert not is_valid_date_range("2026-03-02", "2026-03-01")
        assert is_date_in_past("2000-01-01")
        assert not is_date_in_past(date.today())

    def test_formatting(self):
        assert format_date("2026-01-05") == "January 5, 2026"
        assert format_datetime(datetime(2026, 1, 5, 14, 30)) == "January 5, 2026 at 02:30 PM"
        assert format_date_for_db(date(2026, 1, 5)) == "2026-01-05"
        assert format_currency(1500) == "₱1,500"
        assert format_currency(99.5) == "₱99.5"

    @pytest.mark.parametrize("phone,ok", [
        ("09171234567", True), ("+639171234567", True), ("9171234567", True),
        ("0917 123 4567", True), ("08171234567", False), ("12345", False),
    ])
    def test_philippine_phone_numbers(self, phone, ok):
        assert is_valid_phone_number(phone) is ok

    def test_misc(self):
        assert is_valid_email("ana@example.com")
        assert not is_valid_email("ana@example")
        assert truncate("hello world", 8) == "hello..."
        assert truncate("short", 8) == "short"
        first, second = generate_id(), generate_id()
        assert first != second and "-" in first
