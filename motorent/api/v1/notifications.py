from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from motorent.database import get_db
from motorent.dependencies import get_current_user
from motorent.models.user import User
from motorent.schemas.common import success_response
from motorent.services.notification_service import notification_service

router = APIRouter(prefix="/notifications")


@router.get("", summary="My notifications, newest first")
def list_notifications(
    unreadOnly: bool    = Query(False),
    db:         Session = Depends(get_db),
    user:       User    = Depends(get_current_user),
):
    return success_response("Notifications retrieved",
                            notification_service.get_user_notifications(db, user.id, unreadOnly))


@router.get("/unread-count", summary="Unread notification count")
def unread_count(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return success_response("Count retrieved", {"count": notification_service.get_unread_count(db, user.id)})


@router.patch("/read-all", summary="Mark all notifications read")
def mark_all_read(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return success_response("Notifications marked as read",
                            {"updated": notification_service.mark_all_as_read(db, user.id)})


@router.patch("/{notification_id}/read", summary="Mark one notification read")
def mark_read(notification_id: str, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return success_response("Notification marked as read",
                            notification_service.mark_as_read(db, notification_id, user.id))


@router.delete("/{notification_id}", summary="Delete a notification")
def delete_notification(notification_id: str, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    notification_service.delete_notification(db, notification_id, user.id)
    return success_response("Notification deleted", None)
