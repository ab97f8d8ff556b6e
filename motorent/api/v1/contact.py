from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from motorent.database import get_db
from motorent.dependencies import get_current_admin
from motorent.models.admin_user import AdminUser
from motorent.schemas.common import success_response, paginated_response
from motorent.schemas.contact import ContactCreateRequest, ContactReplyRequest
from motorent.services.contact_service import contact_service

router = APIRouter(prefix="/contact")


@router.post("", status_code=status.HTTP_201_CREATED, summary="Send a message to the shop")
def create_message(body: ContactCreateRequest, db: Session = Depends(get_db)):
    return success_response("Message sent. We'll get back to you soon.", contact_service.create_message(db, body))


@router.get("", summary="List contact messages (Admin)")
def list_messages(
    page:   int           = Query(1, ge=1),
    limit:  int           = Query(20, ge=1, le=100),
    status: Optional[str] = Query(None, description="new | read | responded"),
    db:     Session       = Depends(get_db),
    _:      AdminUser     = Depends(get_current_admin),
):
    data, total = contact_service.list_messages(db, page, limit, status)
    return paginated_response("Messages retrieved successfully", data, total, page, limit)


@router.get("/{message_id}", summary="Get contact message (Admin)")
def get_message(message_id: str, db: Session = Depends(get_db), _: AdminUser = Depends(get_current_admin)):
    return success_response("Message retrieved", contact_service.get_message(db, message_id))


@router.patch("/{message_id}/read", summary="Mark message read (Admin)")
def mark_read(message_id: str, db: Session = Depends(get_db), _: AdminUser = Depends(get_current_admin)):
    return success_response("Message marked as read", contact_service.mark_as_read(db, message_id))


@router.patch("/{message_id}/responded", summary="Mark message responded (Admin)")
def mark_responded(message_id: str, db: Session = Depends(get_db), _: AdminUser = Depends(get_current_admin)):
    return success_response("Message marked as responded", contact_service.mark_as_responded(db, message_id))


@router.post("/{message_id}/reply", summary="Email a reply to the sender (Admin)")
def reply(
    message_id: str,
    body:       ContactReplyRequest,
    db:         Session   = Depends(get_db),
    _:          AdminUser = Depends(get_current_admin),
):
    return success_response("Reply sent", contact_service.reply(db, message_id, body.reply))


@router.delete("/{message_id}", summary="Delete contact message (Admin)")
def delete_message(message_id: str, db: Session = Depends(get_db), _: AdminUser = Depends(get_current_admin)):
    contact_service.delete_message(db, message_id)
    return success_response("Message deleted", None)
