from datetime import datetime, timezone

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from motorent.models.admin_user import AdminUser
from motorent.models.document_verification import DocumentVerification, DocumentStatus
from motorent.models.motorcycle import Motorcycle, Availability
from motorent.models.reservation import Reservation, ReservationStatus
from motorent.models.transaction import Transaction, TransactionType, TransactionStatus
from motorent.models.user import User
from motorent.services.transaction_service import transaction_service


def serialize_admin(a: AdminUser) -> dict:
    return {
        "id":        a.id,
        "email":     a.email,
        "name":      a.name,
        "role":      a.role.value,
        "lastLogin": a.last_login.isoformat() if a.last_login else None,
    }


class AdminService:

    # ─── Accounts ─────────────────────────────────────────────────────────────
    def find_by_email(self, db: Session, email: str) -> AdminUser | None:
        return db.query(AdminUser).filter(AdminUser.email == email.lower()).first()

    def find_by_id(self, db: Session, admin_id: str) -> AdminUser | None:
        return db.get(AdminUser, admin_id)

    def update_last_login(self, db: Session, admin: AdminUser) -> None:
        admin.last_login = datetime.now(timezone.utc)
        db.commit()

    def list_admins(self, db: Session) -> list[dict]:
        return [serialize_admin(a) for a in db.query(AdminUser).order_by(AdminUser.created_at).all()]

    # ─── Dashboard ────────────────────────────────────────────────────────────
    def _count_by(self, db: Session, column) -> dict:
        return {
            (key.value if hasattr(key, "value") else key): count
            for key, count in db.query(column, func.count()).group_by(column).all()
        }

    def _transaction_sum(self, db: Session, type: TransactionType) -> float:
        total = db.query(func.coalesce(func.sum(Transaction.amount), 0)).filter(
            Transaction.type == type, Transaction.status == TransactionStatus.COMPLETED,
        ).scalar()
        return float(total)

    def get_dashboard_stats(self, db: Session) -> dict:
        bikes = self._count_by(db, Motorcycle.availability)
        reservations = self._count_by(db, Reservation.status)

        recent = db.query(Reservation).options(joinedload(Reservation.motorcycle)) \
                   .order_by(Reservation.start_date.desc()).limit(5).all()

        completed = db.query(
            func.coalesce(func.sum(Reservation.total_price), 0), func.count(Reservation.id),
        ).filter(Reservation.status == ReservationStatus.COMPLETED).one()

        return {
            "motorcycles": {
                "total":       sum(bikes.values()),
                "available":   bikes.get(Availability.AVAILABLE.value, 0),
                "reserved":    bikes.get(Availability.RESERVED.value, 0),
                "maintenance": bikes.get(Availability.IN_MAINTENANCE.value, 0),
            },
            "reservations": {
                "total":     sum(reservations.values()),
                "pending":   reservations.get(ReservationStatus.PENDING.value, 0),
                "confirmed": reservations.get(ReservationStatus.CONFIRMED.value, 0),
                "completed": reservations.get(ReservationStatus.COMPLETED.value, 0),
                "cancelled": reservations.get(ReservationStatus.CANCELLED.value, 0),
                "recent": [
                    {
                        "id":             r.id,
                        "status":         r.status.value,
                        "startDate":      r.start_date.isoformat(),
                        "endDate":        r.end_date.isoformat(),
                        "motorcycleName": r.motorcycle.name if r.motorcycle else None,
                        "totalPrice":     r.total_price,
                    }
                    for r in recent
                ],
            },
            "users": {"total": db.query(User).count()},
            "revenue": {
                "total":        float(completed[0]),
                "deposits":     self._transaction_sum(db, TransactionType.DEPOSIT),
                "refunds":      self._transaction_sum(db, TransactionType.REFUND),
                "paymentCount": completed[1],
            },
            "pendingVerifications": self.get_pending_verifications_count(db),
        }

    def get_monthly_revenue(self, db: Session, months: int = 6) -> list[dict]:
        return transaction_service.get_monthly_revenue(db, months)

    def get_pending_verifications_count(self, db: Session) -> int:
        return db.query(DocumentVerification).filter(
            DocumentVerification.status == DocumentStatus.PENDING,
        ).count()


admin_service = AdminService()
