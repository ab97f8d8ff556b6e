"""
Reservation status transitions.

    pending   -> confirmed   motorcycle Reserved, pending documents approved,
                             payments completed, approval email
    pending   -> cancelled   motorcycle Available, pending documents rejected,
                             payments cancelled, rejection email
    confirmed -> completed   motorcycle Available
    confirmed -> cancelled   motorcycle Available

Database writes of one transition are committed together. The reservation
row is moved with `UPDATE ... WHERE status = <expected>` so two reviewers
acting on the same reservation cannot both succeed. Email and the in-app
notification are sent after the commit; their failures are logged and
reported in `sideEffects`, never rolled back.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from motorent.models.motorcycle import Availability
from motorent.models.reservation import Reservation, ReservationStatus
from motorent.models.transaction import TransactionStatus
from motorent.services.document_service import document_service
from motorent.services.email_service import email_service
from motorent.services.motorcycle_service import motorcycle_service
from motorent.services.notification_service import notification_service
from motorent.services.transaction_service import transaction_service
from motorent.utils.exceptions import (
    AppException, ForbiddenException, InvalidStatusTransitionException,
    NotFoundException, ReservationStateConflictException,
)
from motorent.utils.mappers import format_date, transform_reservation

logger = logging.getLogger(__name__)

DEFAULT_REJECTION_REASON = (
    "Your booking could not be approved at this time. Please contact support for more information."
)

APPROVE  = "approve"
REJECT   = "reject"
COMPLETE = "complete"
CANCEL   = "cancel"

TRANSITIONS = {
    (ReservationStatus.PENDING,   ReservationStatus.CONFIRMED): APPROVE,
    (ReservationStatus.PENDING,   ReservationStatus.CANCELLED): REJECT,
    (ReservationStatus.CONFIRMED, ReservationStatus.COMPLETED): COMPLETE,
    (ReservationStatus.CONFIRMED, ReservationStatus.CANCELLED): CANCEL,
}


class ReservationWorkflow:

    def _load(self, db: Session, reservation_id: str) -> Reservation:
        r = db.query(Reservation).options(
            joinedload(Reservation.motorcycle), joinedload(Reservation.user),
        ).filter(Reservation.id == reservation_id).first()
        if not r:
            raise NotFoundException("Reservation")
        return r

    def _move(self, db: Session, r: Reservation, expected: ReservationStatus,
              target: ReservationStatus, note: str | None) -> None:
        values = {Reservation.status: target}
        if note:
            values[Reservation.admin_notes] = note
        updated = db.query(Reservation).filter(
            Reservation.id == r.id, Reservation.status == expected,
        ).update(values, synchronize_session=False)
        if updated == 0:
            db.rollback()
            raise ReservationStateConflictException()

    # ─── Entry points ─────────────────────────────────────────────────────────
    def update_status(
        self, db: Session, reservation_id: str, target: ReservationStatus,
        actor_id: str, note: str | None = None,
    ) -> dict:
        r = self._load(db, reservation_id)
        action = TRANSITIONS.get((r.status, target))
        if action is None:
            raise InvalidStatusTransitionException(r.status.value, target.value)
        return self._run(db, r, action, actor_id, note)

    def approve(self, db: Session, reservation_id: str, actor_id: str, note: str | None = None) -> dict:
        return self.update_status(db, reservation_id, ReservationStatus.CONFIRMED, actor_id, note)

    def reject(self, db: Session, reservation_id: str, actor_id: str, note: str | None = None) -> dict:
        return self.update_status(db, reservation_id, ReservationStatus.CANCELLED, actor_id, note)

    def complete(self, db: Session, reservation_id: str, actor_id: str) -> dict:
        return self.update_status(db, reservation_id, ReservationStatus.COMPLETED, actor_id)

    def cancel_by_owner(self, db: Session, reservation_id: str, user_id: str, note: str | None = None) -> dict:
        """Customer-initiated cancellation of a pending or confirmed booking."""
        r = self._load(db, reservation_id)
        if r.user_id != user_id:
            raise ForbiddenException("You can only cancel your own reservations")
        if r.status not in (ReservationStatus.PENDING, ReservationStatus.CONFIRMED):
            raise InvalidStatusTransitionException(r.status.value, ReservationStatus.CANCELLED.value)
        # owner note goes to the notification only, admin_notes stay with the admin
        return self._run(db, r, CANCEL, user_id, note, record_note=False)

    # ─── Transition body ──────────────────────────────────────────────────────
    def _run(
        self, db: Session, r: Reservation, action: str, actor_id: str, note: str | None,
        record_note: bool = True,
    ) -> dict:
        expected = r.status
        effects = {
            "motorcycle":          None,
            "documentsUpdated":    0,
            "transactionsUpdated": 0,
            "emailSent":           None,
            "notificationCreated": False,
        }

        if action == APPROVE:
            target, availability = ReservationStatus.CONFIRMED, Availability.RESERVED
        elif action == COMPLETE:
            target, availability = ReservationStatus.COMPLETED, Availability.AVAILABLE
        else:
            target, availability = ReservationStatus.CANCELLED, Availability.AVAILABLE

        self._move(db, r, expected, target, note if record_note else None)
        motorcycle_service.update_availability(db, r.motorcycle_id, availability, commit=False)
        effects["motorcycle"] = availability.value

        if action == APPROVE:
            effects["documentsUpdated"] = document_service.approve_all_user_documents(
                db, r.user_id, actor_id, commit=False,
            )
            effects["transactionsUpdated"] = transaction_service.sync_reservation_payments(
                db, r.id, TransactionStatus.COMPLETED, commit=False,
            )
        elif action == REJECT:
            effects["documentsUpdated"] = document_service.reject_all_user_documents(
                db, r.user_id, actor_id, note, commit=False,
            )
            effects["transactionsUpdated"] = transaction_service.sync_reservation_payments(
                db, r.id, TransactionStatus.CANCELLED, commit=False,
            )

        db.commit()
        db.refresh(r)
        logger.info(f"Reservation {r.id}: {expected.value} -> {target.value} by {actor_id}")

        if action in (APPROVE, REJECT):
            effects["emailSent"] = self._send_email(r, action, note)
        effects["notificationCreated"] = self._notify(db, r, action, note)

        return {"reservation": transform_reservation(r), "sideEffects": effects}

    # ─── Side effects ─────────────────────────────────────────────────────────
    def _send_email(self, r: Reservation, action: str, note: str | None) -> bool:
        to = r.customer_email or r.user.email
        name = r.customer_name or r.user.name
        bike = r.motorcycle.name
        try:
            if action == APPROVE:
                email_service.send_booking_approved(
                    to, name, bike, format_date(r.start_date), format_date(r.end_date),
                )
            else:
                email_service.send_booking_rejected(to, name, bike, note or DEFAULT_REJECTION_REASON)
            return True
        except AppException as e:
            logger.error(f"Reservation {r.id} {action} email failed: {e}")
            return False

    def _notify(self, db: Session, r: Reservation, action: str, note: str | None) -> bool:
        bike = r.motorcycle.name
        if action == APPROVE:
            title = "Booking Approved"
            message = (f"Your reservation for {bike} has been approved and your documents are verified. "
                       f"Pick up on {format_date(r.start_date)}.")
        elif action == REJECT:
            title = "Booking Rejected"
            message = (f"Your reservation for {bike} was not approved and your documents were not accepted. "
                       f"Reason: {note or DEFAULT_REJECTION_REASON}")
        elif action == COMPLETE:
            title = "Reservation Completed"
            message = f"Your rental of {bike} is complete. Thank you for riding with us!"
        else:
            title = "Reservation Cancelled"
            message = f"Your reservation for {bike} has been cancelled."
            if note:
                message += f" Note: {note}"

        try:
            notification_service.create_notification(
                db, r.user_id, f"reservation-{action}", title, message,
                reservation_id=r.id, motorcycle_name=bike,
            )
            return True
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Reservation {r.id} notification failed: {e}")
            return False


reservation_workflow = ReservationWorkflow()
