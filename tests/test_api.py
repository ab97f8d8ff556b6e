from datetime import date, timedelta

from conftest import (
    PASSWORD, bearer, create_admin, create_customer, create_document, create_motorcycle, create_reservation,
)
from motorent.models import AdminRole, Availability, ContactMessage, ContactStatus, ReservationStatus, Transaction
from motorent.utils.exceptions import EmailDeliveryException


def _booking(bike_id: str, start_in: int = 5, length: int = 3, **extra) -> dict:
    start = date.today() + timedelta(days=start_in)
    return {
        "motorcycleId": bike_id,
        "startDate":    start.isoformat(),
        "endDate":      (start + timedelta(days=length)).isoformat(),
        "pickupTime":   "09:00",
        "returnTime":   "17:00",
        **extra,
    }


# ─── Basics ───────────────────────────────────────────────────────────────────
def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_missing_token_uses_error_envelope(client):
    response = client.get("/api/v1/reservations/me")

    body = response.json()
    assert response.status_code == 401
    assert body["success"] is False
    assert body["error"]["code"] == "UNAUTHORIZED"


def test_validation_error_lists_fields(client, customer_headers, motorcycle):
    response = client.post(
        "/api/v1/reservations", headers=customer_headers,
        json=_booking(motorcycle.id, pickupTime="9am"),
    )

    body = response.json()
    assert response.status_code == 422
    assert body["error"]["code"] == "VALIDATION_ERROR"
    assert body["error"]["details"][0]["field"] == "pickupTime"


# ─── Sign in over HTTP ────────────────────────────────────────────────────────
def test_sign_in_then_me(client, customer):
    tokens = client.post("/api/v1/auth/sign-in", json={"identifier": "juan", "password": PASSWORD}).json()["data"]

    response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {tokens['accessToken']}"})

    assert response.status_code == 200
    assert response.json()["data"]["id"] == customer.id
    assert response.json()["data"]["isAdmin"] is False


# ─── Booking ──────────────────────────────────────────────────────────────────
class TestBooking:

    def test_price_includes_deposit(self, client, db, customer_headers, motorcycle, sent_emails):
        response = client.post("/api/v1/reservations", headers=customer_headers, json=_booking(motorcycle.id))

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["status"] == "pending"
        # 3 days x 500 + 20% deposit
        assert data["totalPrice"] == 1800
        payment = db.query(Transaction).filter(Transaction.reservation_id == data["id"]).one()
        assert payment.amount == 1800
        assert "Booking Confirmation" in sent_emails.call_args.args[1]
        db.refresh(motorcycle)
        assert motorcycle.availability == Availability.AVAILABLE

    def test_same_day_rental_charged_one_day(self, client, customer_headers, motorcycle):
        response = client.post(
            "/api/v1/reservations", headers=customer_headers, json=_booking(motorcycle.id, length=0),
        )
        assert response.json()["data"]["totalPrice"] == 600

    def test_overlapping_dates_conflict(self, client, db, customer, customer_headers, motorcycle):
        create_reservation(db, customer, motorcycle, status=ReservationStatus.CONFIRMED, days_ahead=7, length=2)

        response = client.post("/api/v1/reservations", headers=customer_headers, json=_booking(motorcycle.id))

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "BOOKING_CONFLICT"

    def test_cancelled_booking_does_not_block(self, client, db, customer, customer_headers, motorcycle):
        create_reservation(db, customer, motorcycle, status=ReservationStatus.CANCELLED, days_ahead=5)

        response = client.post("/api/v1/reservations", headers=customer_headers, json=_booking(motorcycle.id))

        assert response.status_code == 201

    def test_maintenance_motorcycle_refused(self, client, db, customer_headers):
        bike = create_motorcycle(db, availability=Availability.IN_MAINTENANCE)

        response = client.post("/api/v1/reservations", headers=customer_headers, json=_booking(bike.id))

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "MOTORCYCLE_UNAVAILABLE"

    def test_end_before_start(self, client, customer_headers, motorcycle):
        body = _booking(motorcycle.id)
        body["endDate"], body["startDate"] = body["startDate"], body["endDate"]

        response = client.post("/api/v1/reservations", headers=customer_headers, json=body)

        assert response.json()["error"]["code"] == "INVALID_DATE_RANGE"

    def test_gcash_needs_reference(self, client, customer_headers, motorcycle):
        response = client.post(
            "/api/v1/reservations", headers=customer_headers,
            json=_booking(motorcycle.id, paymentMethod="gcash"),
        )
        assert response.status_code == 422

    def test_availability_endpoint(self, client, db, customer, motorcycle):
        r = create_reservation(db, customer, motorcycle, days_ahead=5, length=2)

        busy = client.get(f"/api/v1/motorcycles/{motorcycle.id}/availability",
                          params={"startDate": r.end_date.isoformat(), "endDate": r.end_date.isoformat()})
        free = client.get(f"/api/v1/motorcycles/{motorcycle.id}/availability",
                          params={"startDate": (r.end_date + timedelta(days=1)).isoformat(),
                                  "endDate": (r.end_date + timedelta(days=2)).isoformat()})

        assert busy.json()["data"]["available"] is False
        assert free.json()["data"]["available"] is True


# ─── Roles ────────────────────────────────────────────────────────────────────
class TestRoles:

    def test_customer_cannot_approve(self, client, db, customer, customer_headers, motorcycle):
        r = create_reservation(db, customer, motorcycle)

        response = client.post(f"/api/v1/reservations/{r.id}/approve", headers=customer_headers)

        assert response.status_code == 403

    def test_customer_cannot_see_others_reservation(self, client, db, motorcycle, customer_headers):
        other = create_customer(db, email="pedro@example.com", username="pedro")
        r = create_reservation(db, other, motorcycle)

        assert client.get(f"/api/v1/reservations/{r.id}", headers=customer_headers).status_code == 403
        assert client.get(f"/api/v1/reservations/{r.id}", headers=bearer(other.id)).status_code == 200

    def test_admin_cannot_book(self, client, admin_headers, motorcycle):
        response = client.post("/api/v1/reservations", headers=admin_headers, json=_booking(motorcycle.id))
        assert response.status_code == 403

    def test_admin_list_needs_super_admin(self, client, db, admin_headers):
        boss = create_admin(db, email="owner@example.com", role=AdminRole.SUPER_ADMIN)

        assert client.get("/api/v1/admin/admins", headers=admin_headers).status_code == 403
        response = client.get("/api/v1/admin/admins", headers=bearer(boss.id, boss.role.value))
        assert response.status_code == 200
        assert len(response.json()["data"]) == 2

    def test_approve_over_http(self, client, db, customer, motorcycle, admin_headers):
        r = create_reservation(db, customer, motorcycle)

        response = client.post(f"/api/v1/reservations/{r.id}/approve", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["reservation"]["status"] == "confirmed"
        assert data["sideEffects"]["motorcycle"] == "Reserved"

    def test_invalid_status_change_over_http(self, client, db, customer, motorcycle, admin_headers):
        r = create_reservation(db, customer, motorcycle, status=ReservationStatus.COMPLETED)

        response = client.patch(f"/api/v1/reservations/{r.id}/status", headers=admin_headers,
                                json={"status": "pending"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_STATUS_TRANSITION"


# ─── Admin dashboard ──────────────────────────────────────────────────────────
def test_dashboard_totals(client, db, customer, admin_headers):
    bike = create_motorcycle(db)
    create_motorcycle(db, name="Yamaha NMAX", availability=Availability.IN_MAINTENANCE)
    create_reservation(db, customer, bike, status=ReservationStatus.COMPLETED)
    create_reservation(db, customer, bike, days_ahead=10)
    create_document(db, customer)

    data = client.get("/api/v1/admin/dashboard", headers=admin_headers).json()["data"]

    assert data["motorcycles"] == {"total": 2, "available": 1, "reserved": 0, "maintenance": 1}
    assert data["reservations"]["total"] == 2
    assert data["reservations"]["pending"] == 1
    assert len(data["reservations"]["recent"]) == 2
    assert data["revenue"]["total"] == 1200
    assert data["users"]["total"] == 1
    assert data["pendingVerifications"] == 1


# ─── Contact ──────────────────────────────────────────────────────────────────
class TestContact:

    def test_message_saved_and_forwarded(self, client, db, sent_emails):
        response = client.post("/api/v1/contact", json={
            "name": "Ana", "email": "ana@example.com", "message": "Do you rent helmets?",
        })

        assert response.status_code == 201
        assert response.json()["data"]["emailsSent"] is True
        recipients = [c.args[0] for c in sent_emails.call_args_list]
        assert recipients == ["ana@example.com", "support@motorent.com"]
        assert db.query(ContactMessage).count() == 1

    def test_message_kept_when_email_fails(self, client, db, sent_emails):
        sent_emails.side_effect = EmailDeliveryException()

        response = client.post("/api/v1/contact", json={
            "name": "Ana", "email": "ana@example.com", "message": "Hello",
        })

        assert response.status_code == 201
        assert response.json()["data"]["emailsSent"] is False
        assert db.query(ContactMessage).count() == 1

    def test_forward_sent_when_acknowledgment_fails(self, client, sent_emails):
        sent_emails.side_effect = [EmailDeliveryException(), {"success": True, "mode": "test"}]

        response = client.post("/api/v1/contact", json={
            "name": "Ana", "email": "ana@example.com", "message": "Do you rent helmets?",
        })

        assert response.status_code == 201
        assert response.json()["data"]["emailsSent"] is False
        recipients = [c.args[0] for c in sent_emails.call_args_list]
        assert recipients == ["ana@example.com", "support@motorent.com"]

    def test_reply_marks_responded(self, client, db, admin_headers, sent_emails):
        m = ContactMessage(name="Ana", email="ana@example.com", message="Helmets?", status=ContactStatus.NEW)
        db.add(m)
        db.commit()

        response = client.post(f"/api/v1/contact/{m.id}/reply", headers=admin_headers,
                               json={"reply": "Yes, free of charge."})

        assert response.status_code == 200
        db.refresh(m)
        assert m.status == ContactStatus.RESPONDED
        assert sent_emails.call_args.args[0] == "ana@example.com"

    def test_reply_failure_leaves_status(self, client, db, admin_headers, sent_emails):
        m = ContactMessage(name="Ana", email="ana@example.com", message="Helmets?", status=ContactStatus.READ)
        db.add(m)
        db.commit()
        sent_emails.side_effect = EmailDeliveryException()

        response = client.post(f"/api/v1/contact/{m.id}/reply", headers=admin_headers, json={"reply": "Yes"})

        assert response.status_code == 502
        db.refresh(m)
        assert m.status == ContactStatus.READ
