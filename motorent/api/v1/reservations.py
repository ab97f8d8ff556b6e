from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from motorent.database import get_db
from motorent.dependencies import get_current_admin, get_current_identity, get_current_user
from motorent.models.admin_user import AdminUser
from motorent.models.user import User
from motorent.schemas.common import success_response, paginated_response
from motorent.schemas.reservation import (
    ReservationCreateRequest, ReservationUpdateRequest, StatusUpdateRequest,
    ApproveRequest, RejectRequest, CancelRequest,
)
from motorent.services.reservation_service import reservation_service
from motorent.services.reservation_workflow import reservation_workflow

router = APIRouter(prefix="/reservations")


# ─── Customer ─────────────────────────────────────────────────────────────────
@router.post("", status_code=status.HTTP_201_CREATED, summary="Book a motorcycle")
def create_reservation(
    body: ReservationCreateRequest,
    db:   Session = Depends(get_db),
    user: User    = Depends(get_current_user),
):
    """
    Create a pending reservation.
    - The motorcycle must not be in maintenance or booked for overlapping dates.
    - Total = days x daily rate + 20% security deposit.
    """
    return success_response("Reservation created successfully", reservation_service.create_reservation(db, user, body))


@router.get("/me", summary="My reservations")
def my_reservations(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return success_response("Reservations retrieved", reservation_service.get_user_reservations(db, user.id))


@router.patch("/{reservation_id}/cancel", summary="Cancel my reservation")
def cancel_reservation(
    reservation_id: str,
    body:           CancelRequest = CancelRequest(),
    db:             Session       = Depends(get_db),
    user:           User          = Depends(get_current_user),
):
    data = reservation_service.cancel_reservation(db, reservation_id, user.id, body.note)
    return success_response("Reservation cancelled", data)


# ─── Admin lists ──────────────────────────────────────────────────────────────
@router.get("", summary="List reservations (Admin)")
def list_reservations(
    page:   int           = Query(1, ge=1),
    limit:  int           = Query(20, ge=1, le=100),
    status: Optional[str] = Query(None, description="pending | confirmed | cancelled | completed"),
    userId: Optional[str] = Query(None),
    db:     Session       = Depends(get_db),
    _:      AdminUser     = Depends(get_current_admin),
):
    data, total = reservation_service.list_reservations(db, page, limit, status, userId)
    return paginated_response("Reservations retrieved successfully", data, total, page, limit)


@router.get("/pending-count", summary="Number of pending reservations (Admin)")
def pending_count(db: Session = Depends(get_db), _: AdminUser = Depends(get_current_admin)):
    return success_response("Count retrieved", {"count": reservation_service.get_pending_count(db)})


@router.get("/active", summary="Confirmed reservations by start date (Admin)")
def active_reservations(db: Session = Depends(get_db), _: AdminUser = Depends(get_current_admin)):
    return success_response("Reservations retrieved", reservation_service.get_active_reservations(db))


@router.get("/{reservation_id}", summary="Get reservation")
def get_reservation(
    reservation_id: str,
    db:             Session          = Depends(get_db),
    identity:       User | AdminUser = Depends(get_current_identity),
):
    owner = identity.id if isinstance(identity, User) else None
    return success_response("Reservation retrieved", reservation_service.get_reservation(db, reservation_id, owner))


# ─── Admin actions ────────────────────────────────────────────────────────────
@router.patch("/{reservation_id}", summary="Edit reservation details (Admin)")
def update_reservation(
    reservation_id: str,
    body:           ReservationUpdateRequest,
    db:             Session   = Depends(get_db),
    _:              AdminUser = Depends(get_current_admin),
):
    return success_response("Reservation updated", reservation_service.update_reservation(db, reservation_id, body))


@router.patch("/{reservation_id}/status", summary="Change reservation status (Admin)")
def update_status(
    reservation_id: str,
    body:           StatusUpdateRequest,
    db:             Session   = Depends(get_db),
    admin:          AdminUser = Depends(get_current_admin),
):
    data = reservation_service.update_status(db, reservation_id, body.status, admin.id, body.note)
    return success_response("Reservation status updated", data)


@router.post("/{reservation_id}/approve", summary="Approve a pending reservation (Admin)")
def approve(
    reservation_id: str,
    body:           ApproveRequest = ApproveRequest(),
    db:             Session        = Depends(get_db),
    admin:          AdminUser      = Depends(get_current_admin),
):
    """Confirms the booking, reserves the motorcycle and approves the customer's pending documents."""
    return success_response("Reservation approved", reservation_workflow.approve(db, reservation_id, admin.id, body.note))


@router.post("/{reservation_id}/reject", summary="Reject a pending reservation (Admin)")
def reject(
    reservation_id: str,
    body:           RejectRequest = RejectRequest(),
    db:             Session       = Depends(get_db),
    admin:          AdminUser     = Depends(get_current_admin),
):
    return success_response("Reservation rejected", reservation_workflow.reject(db, reservation_id, admin.id, body.note))


@router.post("/{reservation_id}/complete", summary="Mark a confirmed reservation completed (Admin)")
def complete(reservation_id: str, db: Session = Depends(get_db), admin: AdminUser = Depends(get_current_admin)):
    return success_response("Reservation completed", reservation_workflow.complete(db, reservation_id, admin.id))


@router.post("/{reservation_id}/payment-reminder", summary="Email a payment reminder (Admin)")
def payment_reminder(reservation_id: str, db: Session = Depends(get_db), _: AdminUser = Depends(get_current_admin)):
    return success_response("Payment reminder sent", reservation_service.send_payment_reminder(db, reservation_id))
