from datetime import date

from sqlalchemy import or_
from sqlalchemy.orm import Session

from motorent.models.motorcycle import Motorcycle, Availability
from motorent.models.reservation import Reservation, ReservationStatus
from motorent.schemas.motorcycle import MotorcycleCreateRequest, MotorcycleUpdateRequest
from motorent.utils.exceptions import NotFoundException, DuplicateEntryException, ResourceInUseException
from motorent.utils.mappers import transform_motorcycle, transform_motorcycles, to_db_motorcycle, transform_reservations

BLOCKING_STATUSES = (ReservationStatus.PENDING, ReservationStatus.CONFIRMED)


class MotorcycleService:

    def _get(self, db: Session, motorcycle_id: str) -> Motorcycle:
        m = db.get(Motorcycle, motorcycle_id)
        if not m:
            raise NotFoundException("Motorcycle")
        return m

    # ─── Read ─────────────────────────────────────────────────────────────────
    def list_motorcycles(
        self, db: Session, search: str | None = None, type: str | None = None,
        availability: str | None = None,
    ) -> list[dict]:
        q = db.query(Motorcycle)
        if search:
            kw = f"%{search}%"
            q = q.filter(or_(Motorcycle.name.ilike(kw), Motorcycle.type.ilike(kw)))
        if type:
            q = q.filter(Motorcycle.type == type)
        if availability:
            q = q.filter(Motorcycle.availability == availability)
        return transform_motorcycles(q.order_by(Motorcycle.created_at.desc()).all())

    def get_available_motorcycles(self, db: Session) -> list[dict]:
        rows = db.query(Motorcycle).filter(Motorcycle.availability == Availability.AVAILABLE) \
                 .order_by(Motorcycle.name).all()
        return transform_motorcycles(rows)

    def get_motorcycle(self, db: Session, motorcycle_id: str) -> dict:
        return transform_motorcycle(self._get(db, motorcycle_id))

    def get_upcoming_reservations(self, db: Session, motorcycle_id: str) -> list[dict]:
        self._get(db, motorcycle_id)
        rows = db.query(Reservation).filter(
            Reservation.motorcycle_id == motorcycle_id,
            Reservation.status.in_(BLOCKING_STATUSES),
        ).order_by(Reservation.start_date).all()
        return transform_reservations(rows)

    # ─── Availability ─────────────────────────────────────────────────────────
    def find_conflict(
        self, db: Session, motorcycle_id: str, start_date: date, end_date: date,
        exclude_reservation_id: str | None = None,
    ) -> Reservation | None:
        """First pending/confirmed reservation whose dates touch [start_date, end_date]."""
        q = db.query(Reservation).filter(
            Reservation.motorcycle_id == motorcycle_id,
            Reservation.status.in_(BLOCKING_STATUSES),
            Reservation.start_date <= end_date,
            Reservation.end_date >= start_date,
        )
        if exclude_reservation_id:
            q = q.filter(Reservation.id != exclude_reservation_id)
        return q.first()

    def check_availability(self, db: Session, motorcycle_id: str, start_date: date, end_date: date) -> bool:
        m = self._get(db, motorcycle_id)
        if m.availability == Availability.IN_MAINTENANCE:
            return False
        return self.find_conflict(db, motorcycle_id, start_date, end_date) is None

    # ─── Write ────────────────────────────────────────────────────────────────
    def create_motorcycle(self, db: Session, data: MotorcycleCreateRequest) -> dict:
        if data.plateNumber and db.query(Motorcycle).filter(Motorcycle.plate_number == data.plateNumber).first():
            raise DuplicateEntryException("Plate number already registered", field="plateNumber")

        values = {k: v for k, v in to_db_motorcycle(data.model_dump()).items() if v is not None}
        values.pop("id", None)
        m = Motorcycle(**values)
        db.add(m)
        db.commit()
        db.refresh(m)
        return transform_motorcycle(m)

    def update_motorcycle(self, db: Session, motorcycle_id: str, data: MotorcycleUpdateRequest) -> dict:
        m = self._get(db, motorcycle_id)

        if data.plateNumber and data.plateNumber != m.plate_number:
            if db.query(Motorcycle).filter(
                Motorcycle.plate_number == data.plateNumber, Motorcycle.id != motorcycle_id,
            ).first():
                raise DuplicateEntryException("Plate number already used", field="plateNumber")

        changes = to_db_motorcycle(data.model_dump(exclude_unset=True))
        for column, value in changes.items():
            if column != "id" and value is not None:
                setattr(m, column, value)

        db.commit()
        db.refresh(m)
        return transform_motorcycle(m)

    def update_availability(
        self, db: Session, motorcycle_id: str, availability: Availability, commit: bool = True,
    ) -> dict:
        m = self._get(db, motorcycle_id)
        m.availability = availability
        if commit:
            db.commit()
            db.refresh(m)
        return transform_motorcycle(m)

    def delete_motorcycle(self, db: Session, motorcycle_id: str) -> None:
        m = self._get(db, motorcycle_id)
        if db.query(Reservation).filter(Reservation.motorcycle_id == motorcycle_id).count():
            raise ResourceInUseException("Cannot delete: this motorcycle has reservations.")
        db.delete(m)
        db.commit()


motorcycle_service = MotorcycleService()
