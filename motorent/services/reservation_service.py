import logging

from sqlalchemy.orm import Session, joinedload

from motorent.models.motorcycle import Motorcycle, Availability
from motorent.models.reservation import Reservation, ReservationStatus
from motorent.models.transaction import Transaction, TransactionType, TransactionStatus
from motorent.models.user import User
from motorent.schemas.reservation import ReservationCreateRequest, ReservationUpdateRequest
from motorent.services.email_service import email_service
from motorent.services.motorcycle_service import motorcycle_service
from motorent.services.reservation_workflow import reservation_workflow
from motorent.utils.exceptions import (
    AppException, BookingConflictException, ForbiddenException, InvalidDateRangeException,
    MotorcycleUnavailableException, NotFoundException,
)
from motorent.utils.mappers import (
    days_between, format_date, is_date_in_past, is_valid_date_range,
    to_db_reservation, transform_reservation, transform_reservations,
)

logger = logging.getLogger(__name__)

DEPOSIT_RATE = 0.2


def quote_price(price_per_day: float, start_date, end_date) -> dict:
    """Rental days (at least one), rental amount, deposit and total."""
    days = max(days_between(start_date, end_date), 1)
    rental = days * price_per_day
    deposit = round(rental * DEPOSIT_RATE)
    return {"days": days, "rental": rental, "deposit": deposit, "total": rental + deposit}


class ReservationService:

    def _query(self, db: Session):
        return db.query(Reservation).options(joinedload(Reservation.motorcycle))

    # ─── Read ─────────────────────────────────────────────────────────────────
    def list_reservations(
        self, db: Session, page: int, limit: int,
        status: str | None = None, user_id: str | None = None,
    ) -> tuple[list[dict], int]:
        q = db.query(Reservation)
        if status:
            q = q.filter(Reservation.status == status)
        if user_id:
            q = q.filter(Reservation.user_id == user_id)
        total = q.count()
        items = q.options(joinedload(Reservation.motorcycle)) \
                 .order_by(Reservation.created_at.desc()) \
                 .offset((page - 1) * limit).limit(limit).all()
        return transform_reservations(items), total

    def get_user_reservations(self, db: Session, user_id: str) -> list[dict]:
        rows = self._query(db).filter(Reservation.user_id == user_id) \
                   .order_by(Reservation.created_at.desc()).all()
        return transform_reservations(rows)

    def get_reservations_by_status(self, db: Session, status: ReservationStatus) -> list[dict]:
        rows = self._query(db).filter(Reservation.status == status) \
                   .order_by(Reservation.created_at.desc()).all()
        return transform_reservations(rows)

    def get_reservation(self, db: Session, reservation_id: str, user_id: str | None = None) -> dict:
        """`user_id` restricts the lookup to the owner's reservations."""
        r = self._query(db).filter(Reservation.id == reservation_id).first()
        if not r:
            raise NotFoundException("Reservation")
        if user_id is not None and r.user_id != user_id:
            raise ForbiddenException("You can only view your own reservations")
        return transform_reservation(r)

    def get_pending_count(self, db: Session) -> int:
        return db.query(Reservation).filter(Reservation.status == ReservationStatus.PENDING).count()

    def get_active_reservations(self, db: Session) -> list[dict]:
        rows = self._query(db).filter(Reservation.status == ReservationStatus.CONFIRMED) \
                   .order_by(Reservation.start_date).all()
        return transform_reservations(rows)

    # ─── Create ───────────────────────────────────────────────────────────────
    def create_reservation(self, db: Session, user: User, data: ReservationCreateRequest) -> dict:
        if not is_valid_date_range(data.startDate, data.endDate):
            raise InvalidDateRangeException()
        if is_date_in_past(data.startDate):
            raise InvalidDateRangeException("Start date cannot be in the past")

        bike = db.get(Motorcycle, data.motorcycleId)
        if not bike:
            raise NotFoundException("Motorcycle")
        if bike.availability == Availability.IN_MAINTENANCE:
            raise MotorcycleUnavailableException()
        if motorcycle_service.find_conflict(db, bike.id, data.startDate, data.endDate):
            raise BookingConflictException()

        quote = quote_price(bike.price_per_day, data.startDate, data.endDate)
        values = to_db_reservation({
            **data.model_dump(exclude={"licenseImageUrl"}),
            "userId":        user.id,
            "totalPrice":    quote["total"],
            "status":        ReservationStatus.PENDING,
            "customerName":  data.customerName or user.name,
            "customerEmail": data.customerEmail or user.email,
            "customerPhone": data.customerPhone or user.phone,
        })
        r = Reservation(**values, license_image_url=data.licenseImageUrl)
        db.add(r)
        db.flush()

        db.add(Transaction(
            user_id=user.id,
            reservation_id=r.id,
            type=TransactionType.PAYMENT,
            amount=quote["total"],
            status=TransactionStatus.PENDING,
            description=f"Rental payment for {bike.name} ({quote['days']} day(s), "
                        f"includes {quote['deposit']:.0f} deposit)",
        ))
        db.commit()
        db.refresh(r)
        logger.info(f"Reservation {r.id} created for {bike.name} by user {user.id}")

        try:
            email_service.send_booking_confirmation(
                r.customer_email, r.customer_name, bike.name,
                format_date(r.start_date), format_date(r.end_date), r.total_price, r.id,
            )
        except AppException as e:
            logger.error(f"Booking confirmation email failed for {r.id}: {e}")

        return transform_reservation(r)

    # ─── Update ───────────────────────────────────────────────────────────────
    def update_reservation(self, db: Session, reservation_id: str, data: ReservationUpdateRequest) -> dict:
        """Admin edit of non-status fields."""
        r = self._query(db).filter(Reservation.id == reservation_id).first()
        if not r:
            raise NotFoundException("Reservation")
        for column, value in to_db_reservation(data.model_dump(exclude_unset=True)).items():
            if value is not None:
                setattr(r, column, value)
        db.commit()
        db.refresh(r)
        return transform_reservation(r)

    def update_status(
        self, db: Session, reservation_id: str, status: ReservationStatus,
        actor_id: str, note: str | None = None,
    ) -> dict:
        return reservation_workflow.update_status(db, reservation_id, status, actor_id, note)

    def cancel_reservation(self, db: Session, reservation_id: str, user_id: str, note: str | None = None) -> dict:
        return reservation_workflow.cancel_by_owner(db, reservation_id, user_id, note)

    # ─── Reminders ────────────────────────────────────────────────────────────
    def send_payment_reminder(self, db: Session, reservation_id: str) -> dict:
        r = self._query(db).options(joinedload(Reservation.user)) \
                .filter(Reservation.id == reservation_id).first()
        if not r:
            raise NotFoundException("Reservation")
        email_service.send_payment_reminder(
            r.customer_email or r.user.email, r.customer_name or r.user.name,
            r.motorcycle.name, r.total_price, format_date(r.start_date), r.id,
        )
        return transform_reservation(r)


reservation_service = ReservationService()
