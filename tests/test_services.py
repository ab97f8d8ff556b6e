from datetime import date, datetime, timedelta, timezone

import pytest

from conftest import create_customer, create_motorcycle, create_reservation
from motorent.models import Availability, ReservationStatus, Transaction, TransactionStatus, TransactionType
from motorent.schemas.motorcycle import MotorcycleCreateRequest, MotorcycleUpdateRequest
from motorent.schemas.user import UserCreateRequest, UserUpdateRequest
from motorent.services.motorcycle_service import motorcycle_service
from motorent.services.notification_service import notification_service
from motorent.services.reservation_service import quote_price
from motorent.services.transaction_service import transaction_service
from motorent.services.user_service import user_service
from motorent.utils.exceptions import DuplicateEntryException, NotFoundException, ResourceInUseException


# ─── Pricing ──────────────────────────────────────────────────────────────────
@pytest.mark.parametrize("days,expected", [(0, 600), (1, 600), (3, 1800), (7, 4200)])
def test_quote_price(days, expected):
    start = date(2026, 3, 1)
    assert quote_price(500.0, start, start + timedelta(days=days))["total"] == expected


def test_quote_price_rounds_deposit():
    quote = quote_price(333.0, date(2026, 3, 1), date(2026, 3, 2))
    assert quote["deposit"] == 67
    assert quote["total"] == 400.0


# ─── Motorcycles ──────────────────────────────────────────────────────────────
class TestMotorcycles:

    def test_create_normalizes_plate_and_blocks_duplicates(self, db):
        data = MotorcycleCreateRequest(name="Yamaha NMAX", pricePerDay=700, plateNumber=" abc 123 ")

        created = motorcycle_service.create_motorcycle(db, data)

        assert created["plateNumber"] == "ABC 123"
        assert created["availability"] == "Available"
        with pytest.raises(DuplicateEntryException):
            motorcycle_service.create_motorcycle(db, data)

    def test_search_and_filters(self, db):
        create_motorcycle(db, name="Honda Click 125i")
        create_motorcycle(db, name="Honda XR150L", availability=Availability.IN_MAINTENANCE)

        assert len(motorcycle_service.list_motorcycles(db, search="click")) == 1
        assert len(motorcycle_service.list_motorcycles(db, availability="In Maintenance")) == 1
        assert [m["name"] for m in motorcycle_service.get_available_motorcycles(db)] == ["Honda Click 125i"]

    def test_partial_update(self, db, motorcycle):
        result = motorcycle_service.update_motorcycle(db, motorcycle.id, MotorcycleUpdateRequest(pricePerDay=650))

        assert result["pricePerDay"] == 650
        assert result["name"] == "Honda Click 125i"

    def test_maintenance_is_never_available(self, db):
        bike = create_motorcycle(db, availability=Availability.IN_MAINTENANCE)
        today = date.today()
        assert motorcycle_service.check_availability(db, bike.id, today, today) is False

    def test_delete_refused_with_reservations(self, db, customer, motorcycle):
        create_reservation(db, customer, motorcycle, status=ReservationStatus.COMPLETED)

        with pytest.raises(ResourceInUseException):
            motorcycle_service.delete_motorcycle(db, motorcycle.id)

    def test_upcoming_reservations_skip_finished(self, db, customer, motorcycle):
        create_reservation(db, customer, motorcycle, status=ReservationStatus.COMPLETED)
        kept = create_reservation(db, customer, motorcycle, days_ahead=10)

        rows = motorcycle_service.get_upcoming_reservations(db, motorcycle.id)

        assert [r["id"] for r in rows] == [kept.id]


# ─── Users ────────────────────────────────────────────────────────────────────
class TestUsers:

    def test_create_rejects_taken_username(self, db, customer):
        with pytest.raises(DuplicateEntryException):
            user_service.create_user(db, UserCreateRequest(name="Other", email="other@example.com", username="juan"))

    def test_update_profile(self, db, customer):
        result = user_service.update_user(
            db, customer.id, UserUpdateRequest(name="Juan D.", phone="09181234567", licenseNumber="N01-23-456789"),
        )

        assert result["name"] == "Juan D."
        assert result["licenseNumber"] == "N01-23-456789"

    def test_invalid_phone_rejected(self):
        with pytest.raises(ValueError):
            UserUpdateRequest(phone="12345")

    def test_delete_blocked_by_history(self, db, customer, motorcycle):
        create_reservation(db, customer, motorcycle)
        with pytest.raises(ResourceInUseException):
            user_service.delete_user(db, customer.id)

    def test_delete_without_history(self, db):
        user = create_customer(db, email="ana@example.com", username="ana", with_account=False)
        user_service.delete_user(db, user.id)
        with pytest.raises(NotFoundException):
            user_service.get_user(db, user.id)

    def test_search(self, db, customer):
        create_customer(db, email="ana@example.com", name="Ana Reyes", username="ana")

        users, total = user_service.list_users(db, 1, 20, "reyes")

        assert total == 1
        assert users[0]["email"] == "ana@example.com"


# ─── Notifications ────────────────────────────────────────────────────────────
class TestNotifications:

    def test_read_flow(self, db, customer):
        first = notification_service.create_notification(db, customer.id, "reservation-approve", "A", "a")
        notification_service.create_notification(db, customer.id, "reservation-complete", "B", "b")
        assert notification_service.get_unread_count(db, customer.id) == 2

        notification_service.mark_as_read(db, first["id"], customer.id)
        assert len(notification_service.get_user_notifications(db, customer.id, unread_only=True)) == 1

        assert notification_service.mark_all_as_read(db, customer.id) == 1
        assert notification_service.get_unread_count(db, customer.id) == 0

    def test_cannot_touch_other_users_notification(self, db, customer):
        other = create_customer(db, email="ana@example.com", username="ana")
        n = notification_service.create_notification(db, customer.id, "reservation-cancel", "A", "a")

        with pytest.raises(NotFoundException):
            notification_service.delete_notification(db, n["id"], other.id)


# ─── Transactions ─────────────────────────────────────────────────────────────
class TestTransactions:

    def test_totals_count_completed_payments_only(self, db, customer, motorcycle):
        r = create_reservation(db, customer, motorcycle)
        transaction_service.sync_reservation_payments(db, r.id, TransactionStatus.COMPLETED)
        db.add(Transaction(user_id=customer.id, type=TransactionType.REFUND, amount=200,
                           status=TransactionStatus.COMPLETED))
        db.commit()

        assert transaction_service.get_completed_total(db) == 1200
        assert transaction_service.get_user_total_spending(db, customer.id) == 1200

    def test_monthly_revenue(self, db, customer, motorcycle):
        r = create_reservation(db, customer, motorcycle)
        transaction_service.sync_reservation_payments(db, r.id, TransactionStatus.COMPLETED)

        months = transaction_service.get_monthly_revenue(db, 6)

        assert months == [{"month": datetime.now(timezone.utc).strftime("%Y-%m"), "revenue": 1200}]
