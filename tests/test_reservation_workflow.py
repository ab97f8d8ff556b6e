import pytest

from conftest import create_customer, create_document, create_motorcycle, create_reservation
from motorent.models import (
    Availability, DocumentStatus, DocumentType, Notification, Reservation, ReservationStatus,
    Transaction, TransactionStatus,
)
from motorent.services.reservation_service import reservation_service
from motorent.services.reservation_workflow import reservation_workflow
from motorent.utils.exceptions import (
    EmailDeliveryException, ForbiddenException, InvalidStatusTransitionException,
    ReservationStateConflictException,
)


def _payments(db, reservation):
    rows = db.query(Transaction).filter(Transaction.reservation_id == reservation.id).all()
    for row in rows:
        db.refresh(row)
    return rows


class TestApprove:

    def test_confirms_and_applies_side_effects(self, db, customer, motorcycle, admin, sent_emails):
        r = create_reservation(db, customer, motorcycle)
        license_doc = create_document(db, customer, DocumentType.DRIVER_LICENSE)
        id_doc = create_document(db, customer, DocumentType.VALID_ID)

        result = reservation_workflow.approve(db, r.id, admin.id)

        assert result["reservation"]["status"] == "confirmed"
        effects = result["sideEffects"]
        assert effects["motorcycle"] == "Reserved"
        assert effects["documentsUpdated"] == 2
        assert effects["transactionsUpdated"] == 1
        assert effects["emailSent"] is True
        assert effects["notificationCreated"] is True

        db.refresh(motorcycle)
        db.refresh(license_doc)
        db.refresh(id_doc)
        assert motorcycle.availability == Availability.RESERVED
        assert license_doc.status == DocumentStatus.APPROVED
        assert id_doc.reviewed_by == admin.id
        assert [t.status for t in _payments(db, r)] == [TransactionStatus.COMPLETED]

        to, subject = sent_emails.call_args.args[:2]
        assert to == customer.email
        assert "Approved" in subject

        notes = db.query(Notification).filter(Notification.user_id == customer.id).all()
        assert len(notes) == 1
        assert notes[0].type == "reservation-approve"
        assert notes[0].title == "Booking Approved"
        assert notes[0].reservation_id == r.id

    def test_already_reviewed_documents_untouched(self, db, customer, motorcycle, admin):
        r = create_reservation(db, customer, motorcycle)
        rejected = create_document(db, customer, status=DocumentStatus.REJECTED)

        result = reservation_workflow.approve(db, r.id, admin.id)

        assert result["sideEffects"]["documentsUpdated"] == 0
        db.refresh(rejected)
        assert rejected.status == DocumentStatus.REJECTED

    def test_email_failure_keeps_transition(self, db, customer, motorcycle, admin, sent_emails):
        r = create_reservation(db, customer, motorcycle)
        sent_emails.side_effect = EmailDeliveryException()

        result = reservation_workflow.approve(db, r.id, admin.id)

        assert result["sideEffects"]["emailSent"] is False
        assert result["sideEffects"]["notificationCreated"] is True
        db.refresh(r)
        assert r.status == ReservationStatus.CONFIRMED


class TestReject:

    def test_rejects_documents_with_reason(self, db, customer, motorcycle, admin, sent_emails):
        motorcycle.availability = Availability.RESERVED
        db.commit()
        r = create_reservation(db, customer, motorcycle)
        doc = create_document(db, customer)

        result = reservation_workflow.reject(db, r.id, admin.id, "blurry photo")

        assert result["reservation"]["status"] == "cancelled"
        assert result["reservation"]["adminNotes"] == "blurry photo"
        db.refresh(doc)
        db.refresh(motorcycle)
        assert doc.status == DocumentStatus.REJECTED
        assert doc.rejection_reason == "blurry photo"
        assert motorcycle.availability == Availability.AVAILABLE
        assert [t.status for t in _payments(db, r)] == [TransactionStatus.CANCELLED]
        assert "blurry photo" in sent_emails.call_args.args[3]

    def test_default_reason(self, db, customer, motorcycle, admin):
        r = create_reservation(db, customer, motorcycle)
        doc = create_document(db, customer)

        reservation_workflow.reject(db, r.id, admin.id)

        db.refresh(doc)
        assert doc.rejection_reason == "Document verification failed during reservation review."


class TestTransitions:

    def test_complete_releases_motorcycle(self, db, customer, admin, sent_emails):
        bike = create_motorcycle(db, availability=Availability.RESERVED)
        r = create_reservation(db, customer, bike, status=ReservationStatus.CONFIRMED)

        result = reservation_workflow.complete(db, r.id, admin.id)

        assert result["reservation"]["status"] == "completed"
        assert result["sideEffects"]["emailSent"] is None
        db.refresh(bike)
        assert bike.availability == Availability.AVAILABLE
        sent_emails.assert_not_called()

    @pytest.mark.parametrize("current,target", [
        (ReservationStatus.PENDING,   ReservationStatus.COMPLETED),
        (ReservationStatus.COMPLETED, ReservationStatus.CONFIRMED),
        (ReservationStatus.CANCELLED, ReservationStatus.CONFIRMED),
        (ReservationStatus.CONFIRMED, ReservationStatus.PENDING),
    ])
    def test_invalid_transition(self, db, customer, motorcycle, admin, current, target):
        r = create_reservation(db, customer, motorcycle, status=current)

        with pytest.raises(InvalidStatusTransitionException):
            reservation_workflow.update_status(db, r.id, target, admin.id)

        db.refresh(r)
        assert r.status == current

    def test_concurrent_review_conflicts(self, db, customer, motorcycle, admin):
        r = create_reservation(db, customer, motorcycle)
        # another reviewer confirms first; the loaded instance still says pending
        db.query(Reservation).filter(Reservation.id == r.id).update(
            {Reservation.status: ReservationStatus.CONFIRMED}, synchronize_session=False,
        )
        db.commit()

        with pytest.raises(ReservationStateConflictException):
            reservation_workflow.reject(db, r.id, admin.id, "late")

        assert db.query(Notification).count() == 0
        assert [t.status for t in _payments(db, r)] == [TransactionStatus.PENDING]


class TestOwnerCancel:

    def test_cancel_writes_one_notification(self, db, customer, motorcycle, sent_emails):
        r = create_reservation(db, customer, motorcycle)

        result = reservation_workflow.cancel_by_owner(db, r.id, customer.id, "change of plans")

        assert result["reservation"]["status"] == "cancelled"
        notes = db.query(Notification).filter(Notification.user_id == customer.id).all()
        assert len(notes) == 1
        assert notes[0].title == "Reservation Cancelled"
        assert "change of plans" in notes[0].message
        sent_emails.assert_not_called()

    def test_owner_note_does_not_replace_admin_notes(self, db, customer, motorcycle, admin):
        r = create_reservation(db, customer, motorcycle)
        reservation_workflow.approve(db, r.id, admin.id, "ID checked at counter")

        reservation_service.cancel_reservation(db, r.id, customer.id, "found a cheaper bike")

        db.refresh(r)
        assert r.status == ReservationStatus.CANCELLED
        assert r.admin_notes == "ID checked at counter"
        cancelled = db.query(Notification).filter(Notification.title == "Reservation Cancelled").one()
        assert "found a cheaper bike" in cancelled.message

    def test_cannot_cancel_someone_elses(self, db, customer, motorcycle):
        r = create_reservation(db, customer, motorcycle)
        other = create_customer(db, email="pedro@example.com", username="pedro")

        with pytest.raises(ForbiddenException):
            reservation_workflow.cancel_by_owner(db, r.id, other.id)

    def test_cannot_cancel_completed(self, db, customer, motorcycle):
        r = create_reservation(db, customer, motorcycle, status=ReservationStatus.COMPLETED)

        with pytest.raises(InvalidStatusTransitionException):
            reservation_workflow.cancel_by_owner(db, r.id, customer.id)
