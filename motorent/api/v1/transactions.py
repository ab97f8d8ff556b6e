from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from motorent.database import get_db
from motorent.dependencies import get_current_admin, get_current_user
from motorent.models.admin_user import AdminUser
from motorent.models.user import User
from motorent.schemas.common import success_response, paginated_response
from motorent.schemas.transaction import TransactionCreateRequest
from motorent.services.transaction_service import transaction_service

router = APIRouter(prefix="/transactions")


# ─── Customer ─────────────────────────────────────────────────────────────────
@router.get("/me", summary="My transactions")
def my_transactions(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return success_response("Transactions retrieved", transaction_service.get_user_transactions(db, user.id))


@router.get("/me/total", summary="My completed spending")
def my_total(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return success_response("Total retrieved", {"total": transaction_service.get_user_total_spending(db, user.id)})


# ─── Admin ────────────────────────────────────────────────────────────────────
@router.get("", summary="List transactions (Admin)")
def list_transactions(
    page:   int           = Query(1, ge=1),
    limit:  int           = Query(20, ge=1, le=100),
    type:   Optional[str] = Query(None, description="payment | deposit | refund"),
    status: Optional[str] = Query(None, description="pending | completed | cancelled"),
    db:     Session       = Depends(get_db),
    _:      AdminUser     = Depends(get_current_admin),
):
    data, total = transaction_service.list_transactions(db, page, limit, type, status)
    return paginated_response("Transactions retrieved successfully", data, total, page, limit)


@router.get("/completed-total", summary="Sum of completed payments (Admin)")
def completed_total(db: Session = Depends(get_db), _: AdminUser = Depends(get_current_admin)):
    return success_response("Total retrieved", {"total": transaction_service.get_completed_total(db)})


@router.get("/reservations/{reservation_id}", summary="Transactions of a reservation (Admin)")
def reservation_transactions(
    reservation_id: str,
    db:             Session   = Depends(get_db),
    _:              AdminUser = Depends(get_current_admin),
):
    return success_response("Transactions retrieved",
                            transaction_service.get_reservation_transactions(db, reservation_id))


@router.post("", status_code=status.HTTP_201_CREATED, summary="Record a transaction (Admin)")
def create_transaction(
    body: TransactionCreateRequest,
    db:   Session   = Depends(get_db),
    _:    AdminUser = Depends(get_current_admin),
):
    return success_response("Transaction recorded", transaction_service.create_transaction(db, body))


@router.delete("/{transaction_id}", summary="Delete a transaction (Admin)")
def delete_transaction(transaction_id: str, db: Session = Depends(get_db), _: AdminUser = Depends(get_current_admin)):
    transaction_service.delete_transaction(db, transaction_id)
    return success_response("Transaction deleted", None)
