from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session

from motorent.database import get_db
from motorent.dependencies import get_current_admin, get_current_identity, get_current_user
from motorent.models.admin_user import AdminUser
from motorent.models.document_verification import DocumentType
from motorent.models.user import User
from motorent.schemas.common import success_response, paginated_response
from motorent.schemas.document import DocumentRejectRequest, BulkRejectRequest
from motorent.services.document_service import document_service

router = APIRouter(prefix="/documents")


# ─── Customer ─────────────────────────────────────────────────────────────────
@router.post("", status_code=status.HTTP_201_CREATED, summary="Upload a verification document")
def submit_document(
    documentType: DocumentType = Form(..., description="driver-license | valid-id"),
    file:         UploadFile   = File(..., description="JPG, PNG or PDF, 5MB max"),
    db:           Session      = Depends(get_db),
    user:         User         = Depends(get_current_user),
):
    data = document_service.submit_document(
        db, user, documentType, file.file.read(), file.filename, file.content_type,
    )
    return success_response("Document submitted for verification", data)


@router.get("/me", summary="My documents")
def my_documents(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return success_response("Documents retrieved", document_service.get_user_documents(db, user.id))


@router.get("/{document_id}/url", summary="Signed URL to view a document")
def document_url(
    document_id: str,
    db:          Session          = Depends(get_db),
    identity:    User | AdminUser = Depends(get_current_identity),
):
    owner = identity.id if isinstance(identity, User) else None
    return success_response("URL created", {"url": document_service.get_document_url(db, document_id, owner)})


@router.delete("/{document_id}", summary="Delete a document")
def delete_document(
    document_id: str,
    db:          Session          = Depends(get_db),
    identity:    User | AdminUser = Depends(get_current_identity),
):
    owner = identity.id if isinstance(identity, User) else None
    document_service.delete_document(db, document_id, owner)
    return success_response("Document deleted", None)


# ─── Admin ────────────────────────────────────────────────────────────────────
@router.get("", summary="List documents (Admin)")
def list_documents(
    page:   int           = Query(1, ge=1),
    limit:  int           = Query(20, ge=1, le=100),
    status: Optional[str] = Query(None, description="pending | approved | rejected"),
    db:     Session       = Depends(get_db),
    _:      AdminUser     = Depends(get_current_admin),
):
    data, total = document_service.list_documents(db, page, limit, status)
    return paginated_response("Documents retrieved successfully", data, total, page, limit)


@router.get("/pending-count", summary="Number of documents awaiting review (Admin)")
def pending_count(db: Session = Depends(get_db), _: AdminUser = Depends(get_current_admin)):
    return success_response("Count retrieved", {"count": document_service.get_pending_count(db)})


@router.get("/users/{user_id}", summary="A customer's documents (Admin)")
def user_documents(user_id: str, db: Session = Depends(get_db), _: AdminUser = Depends(get_current_admin)):
    return success_response("Documents retrieved", document_service.get_user_documents(db, user_id))


@router.get("/reservations/{reservation_id}", summary="Latest documents of a reservation's customer (Admin)")
def reservation_documents(
    reservation_id: str,
    db:             Session   = Depends(get_db),
    _:              AdminUser = Depends(get_current_admin),
):
    return success_response("Documents retrieved", document_service.get_reservation_documents(db, reservation_id))


@router.post("/{document_id}/approve", summary="Approve a document (Admin)")
def approve_document(
    document_id: str,
    db:          Session   = Depends(get_db),
    admin:       AdminUser = Depends(get_current_admin),
):
    return success_response("Document approved", document_service.approve_document(db, document_id, admin.id))


@router.post("/{document_id}/reject", summary="Reject a document (Admin)")
def reject_document(
    document_id: str,
    body:        DocumentRejectRequest,
    db:          Session   = Depends(get_db),
    admin:       AdminUser = Depends(get_current_admin),
):
    data = document_service.reject_document(db, document_id, admin.id, body.reason)
    return success_response("Document rejected", data)


@router.post("/users/{user_id}/approve-all", summary="Approve all pending documents of a customer (Admin)")
def approve_all(user_id: str, db: Session = Depends(get_db), admin: AdminUser = Depends(get_current_admin)):
    count = document_service.approve_all_user_documents(db, user_id, admin.id)
    return success_response("Documents approved", {"updated": count})


@router.post("/users/{user_id}/reject-all", summary="Reject all pending documents of a customer (Admin)")
def reject_all(
    user_id: str,
    body:    BulkRejectRequest = BulkRejectRequest(),
    db:      Session           = Depends(get_db),
    admin:   AdminUser         = Depends(get_current_admin),
):
    count = document_service.reject_all_user_documents(db, user_id, admin.id, body.reason)
    return success_response("Documents rejected", {"updated": count})
