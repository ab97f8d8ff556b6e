from collections import defaultdict
from datetime import datetime, timedelta, timezone

from sqlalchemy import func
from sqlalchemy.orm import Session

from motorent.models.transaction import Transaction, TransactionType, TransactionStatus
from motorent.models.user import User
from motorent.schemas.transaction import TransactionCreateRequest
from motorent.utils.exceptions import NotFoundException
from motorent.utils.mappers import transform_transaction, transform_transactions


class TransactionService:

    def list_transactions(
        self, db: Session, page: int, limit: int, type: str | None = None, status: str | None = None,
    ) -> tuple[list[dict], int]:
        q = db.query(Transaction)
        if type:
            q = q.filter(Transaction.type == type)
        if status:
            q = q.filter(Transaction.status == status)
        total = q.count()
        items = q.order_by(Transaction.date.desc()).offset((page - 1) * limit).limit(limit).all()
        return transform_transactions(items), total

    def get_user_transactions(self, db: Session, user_id: str) -> list[dict]:
        rows = db.query(Transaction).filter(Transaction.user_id == user_id) \
                 .order_by(Transaction.date.desc()).all()
        return transform_transactions(rows)

    def get_reservation_transactions(self, db: Session, reservation_id: str) -> list[dict]:
        rows = db.query(Transaction).filter(Transaction.reservation_id == reservation_id) \
                 .order_by(Transaction.date.desc()).all()
        return transform_transactions(rows)

    def get_transactions_by_type(self, db: Session, type: TransactionType) -> list[dict]:
        rows = db.query(Transaction).filter(Transaction.type == type).order_by(Transaction.date.desc()).all()
        return transform_transactions(rows)

    def create_transaction(self, db: Session, data: TransactionCreateRequest) -> dict:
        if not db.get(User, data.userId):
            raise NotFoundException("User")
        t = Transaction(
            user_id=data.userId,
            reservation_id=data.reservationId,
            type=data.type,
            amount=data.amount,
            status=data.status,
            description=data.description,
        )
        db.add(t)
        db.commit()
        db.refresh(t)
        return transform_transaction(t)

    def sync_reservation_payments(
        self, db: Session, reservation_id: str, status: TransactionStatus, commit: bool = True,
    ) -> int:
        """Move every payment row of a reservation to `status`. Returns the row count."""
        updated = db.query(Transaction).filter(
            Transaction.reservation_id == reservation_id,
            Transaction.type == TransactionType.PAYMENT,
        ).update({Transaction.status: status}, synchronize_session=False)
        if commit:
            db.commit()
        return updated

    def get_completed_total(self, db: Session) -> float:
        total = db.query(func.coalesce(func.sum(Transaction.amount), 0)).filter(
            Transaction.type == TransactionType.PAYMENT,
            Transaction.status == TransactionStatus.COMPLETED,
        ).scalar()
        return float(total)

    def get_user_total_spending(self, db: Session, user_id: str) -> float:
        total = db.query(func.coalesce(func.sum(Transaction.amount), 0)).filter(
            Transaction.user_id == user_id,
            Transaction.type == TransactionType.PAYMENT,
            Transaction.status == TransactionStatus.COMPLETED,
        ).scalar()
        return float(total)

    def get_monthly_revenue(self, db: Session, months: int = 6) -> list[dict]:
        """Completed payments grouped by YYYY-MM, oldest month first."""
        since = datetime.now(timezone.utc) - timedelta(days=months * 31)
        rows = db.query(Transaction.date, Transaction.amount).filter(
            Transaction.type == TransactionType.PAYMENT,
            Transaction.status == TransactionStatus.COMPLETED,
            Transaction.date >= since,
        ).all()
        buckets: dict[str, float] = defaultdict(float)
        for when, amount in rows:
            buckets[when.strftime("%Y-%m")] += amount
        return [{"month": month, "revenue": buckets[month]} for month in sorted(buckets)]

    def delete_transaction(self, db: Session, transaction_id: str) -> None:
        t = db.get(Transaction, transaction_id)
        if not t:
            raise NotFoundException("Transaction")
        db.delete(t)
        db.commit()


transaction_service = TransactionService()
