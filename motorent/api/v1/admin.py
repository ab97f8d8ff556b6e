from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from motorent.database import get_db
from motorent.dependencies import get_current_admin, get_super_admin
from motorent.models.admin_user import AdminUser
from motorent.schemas.admin import TestEmailRequest
from motorent.schemas.common import success_response
from motorent.services.admin_service import admin_service
from motorent.services.email_service import email_service

router = APIRouter(prefix="/admin")


@router.get("/dashboard", summary="Fleet, booking, user and revenue totals")
def dashboard(db: Session = Depends(get_db), _: AdminUser = Depends(get_current_admin)):
    return success_response("Dashboard stats retrieved", admin_service.get_dashboard_stats(db))


@router.get("/revenue/monthly", summary="Completed payments per month")
def monthly_revenue(
    months: int       = Query(6, ge=1, le=24),
    db:     Session   = Depends(get_db),
    _:      AdminUser = Depends(get_current_admin),
):
    return success_response("Revenue retrieved", admin_service.get_monthly_revenue(db, months))


@router.get("/admins", summary="List admin accounts (Super admin)")
def list_admins(db: Session = Depends(get_db), _: AdminUser = Depends(get_super_admin)):
    return success_response("Admins retrieved", admin_service.list_admins(db))


@router.post("/email/test", summary="Send a test email through the configured provider")
def test_email(body: TestEmailRequest, _: AdminUser = Depends(get_current_admin)):
    return success_response("Test email sent", email_service.test_email(body.to))
