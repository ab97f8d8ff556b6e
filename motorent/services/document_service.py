import logging
import re
import time
from datetime import datetime, timezone

from sqlalchemy.orm import Session, joinedload

from motorent.models.document_verification import DocumentVerification, DocumentType, DocumentStatus
from motorent.models.reservation import Reservation
from motorent.models.user import User
from motorent.services.email_service import email_service
from motorent.utils.exceptions import (
    AppException, FileValidationException, ForbiddenException, NotFoundException,
)
from motorent.utils.storage import DOCUMENTS_BUCKET, storage

logger = logging.getLogger(__name__)

ALLOWED_DOCUMENT_TYPES = {"image/jpeg", "image/jpg", "image/png", "application/pdf"}
MAX_DOCUMENT_SIZE      = 5 * 1024 * 1024  # 5MB
DEFAULT_REJECTION      = "Document verification failed during reservation review."


def _serialize(d: DocumentVerification, url: str | None = None) -> dict:
    data = {
        "id":              d.id,
        "userId":          d.user_id,
        "documentType":    d.document_type.value,
        "documentUrl":     d.document_url,
        "status":          d.status.value,
        "rejectionReason": d.rejection_reason,
        "submittedAt":     d.submitted_at.isoformat() if d.submitted_at else None,
        "reviewedAt":      d.reviewed_at.isoformat() if d.reviewed_at else None,
        "reviewedBy":      d.reviewed_by,
    }
    if d.user is not None:
        data["user"] = {"id": d.user.id, "name": d.user.name, "email": d.user.email}
    if url is not None:
        data["viewUrl"] = url
    return data


class DocumentService:

    # ─── Files ────────────────────────────────────────────────────────────────
    def validate_file(self, content_type: str | None, size: int) -> None:
        if content_type not in ALLOWED_DOCUMENT_TYPES:
            raise FileValidationException("Invalid file type. Please upload JPG, PNG, or PDF files only.")
        if size > MAX_DOCUMENT_SIZE:
            raise FileValidationException("File size exceeds 5MB limit. Please upload a smaller file.")

    def upload_file(
        self, content: bytes, filename: str, content_type: str | None,
        user_id: str, document_type: DocumentType,
    ) -> str:
        """Store the file in the private bucket and return its path."""
        self.validate_file(content_type, len(content))
        safe_name = re.sub(r"[^a-zA-Z0-9.-]", "_", filename or "document")
        path = f"{user_id}/{document_type.value}-{int(time.time() * 1000)}-{safe_name}"
        return storage.upload(DOCUMENTS_BUCKET, path, content)

    def get_signed_url(self, path: str, expires_in: int | None = None) -> str:
        return storage.create_signed_url(DOCUMENTS_BUCKET, path, expires_in)

    def _viewable_url(self, path: str) -> str | None:
        try:
            return self.get_signed_url(path)
        except NotFoundException:
            logger.warning(f"Document file missing from storage: {path}")
            return None

    # ─── Rows ─────────────────────────────────────────────────────────────────
    def submit_document(
        self, db: Session, user: User, document_type: DocumentType,
        content: bytes, filename: str, content_type: str | None,
    ) -> dict:
        path = self.upload_file(content, filename, content_type, user.id, document_type)
        doc = DocumentVerification(
            user_id=user.id,
            document_type=document_type,
            document_url=path,
            status=DocumentStatus.PENDING,
        )
        db.add(doc)
        if document_type == DocumentType.DRIVER_LICENSE:
            user.driver_license_url = path
        db.commit()
        db.refresh(doc)
        return _serialize(doc)

    def list_documents(
        self, db: Session, page: int, limit: int, status: str | None = None,
    ) -> tuple[list[dict], int]:
        q = db.query(DocumentVerification).options(joinedload(DocumentVerification.user))
        if status:
            q = q.filter(DocumentVerification.status == status)
        total = q.count()
        docs = q.order_by(DocumentVerification.submitted_at.desc()) \
                .offset((page - 1) * limit).limit(limit).all()
        return [_serialize(d) for d in docs], total

    def get_user_documents(self, db: Session, user_id: str) -> list[dict]:
        docs = db.query(DocumentVerification).filter(DocumentVerification.user_id == user_id) \
                 .order_by(DocumentVerification.submitted_at.desc()).all()
        return [_serialize(d) for d in docs]

    def get_pending_count(self, db: Session) -> int:
        return db.query(DocumentVerification).filter(
            DocumentVerification.status == DocumentStatus.PENDING,
        ).count()

    def _get(self, db: Session, document_id: str) -> DocumentVerification:
        doc = db.get(DocumentVerification, document_id)
        if not doc:
            raise NotFoundException("Document")
        return doc

    def get_document_url(self, db: Session, document_id: str, user_id: str | None = None) -> str:
        """Signed URL for one document. `user_id` restricts access to the owner."""
        doc = self._get(db, document_id)
        if user_id is not None and doc.user_id != user_id:
            raise ForbiddenException("You can only view your own documents")
        return self.get_signed_url(doc.document_url)

    # ─── Review ───────────────────────────────────────────────────────────────
    def _notify(self, doc: DocumentVerification) -> bool:
        user = doc.user
        try:
            if doc.status == DocumentStatus.APPROVED:
                email_service.send_document_approved(user.email, user.name, doc.document_type.value)
            else:
                email_service.send_document_rejected(
                    user.email, user.name, doc.document_type.value, doc.rejection_reason or DEFAULT_REJECTION,
                )
            return True
        except AppException as e:
            logger.error(f"Document review email failed for {doc.id}: {e}")
            return False

    def approve_document(self, db: Session, document_id: str, reviewer_id: str) -> dict:
        doc = self._get(db, document_id)
        doc.status           = DocumentStatus.APPROVED
        doc.rejection_reason = None
        doc.reviewed_at      = datetime.now(timezone.utc)
        doc.reviewed_by      = reviewer_id
        db.commit()
        db.refresh(doc)
        return {**_serialize(doc), "emailSent": self._notify(doc)}

    def reject_document(self, db: Session, document_id: str, reviewer_id: str, reason: str) -> dict:
        doc = self._get(db, document_id)
        doc.status           = DocumentStatus.REJECTED
        doc.rejection_reason = reason
        doc.reviewed_at      = datetime.now(timezone.utc)
        doc.reviewed_by      = reviewer_id
        db.commit()
        db.refresh(doc)
        return {**_serialize(doc), "emailSent": self._notify(doc)}

    def approve_all_user_documents(self, db: Session, user_id: str, reviewer_id: str, commit: bool = True) -> int:
        """Approve every pending document of a user. Returns the row count."""
        updated = db.query(DocumentVerification).filter(
            DocumentVerification.user_id == user_id,
            DocumentVerification.status == DocumentStatus.PENDING,
        ).update({
            DocumentVerification.status:      DocumentStatus.APPROVED,
            DocumentVerification.reviewed_at: datetime.now(timezone.utc),
            DocumentVerification.reviewed_by: reviewer_id,
        }, synchronize_session=False)
        if commit:
            db.commit()
        return updated

    def reject_all_user_documents(
        self, db: Session, user_id: str, reviewer_id: str, reason: str | None = None, commit: bool = True,
    ) -> int:
        updated = db.query(DocumentVerification).filter(
            DocumentVerification.user_id == user_id,
            DocumentVerification.status == DocumentStatus.PENDING,
        ).update({
            DocumentVerification.status:           DocumentStatus.REJECTED,
            DocumentVerification.rejection_reason: reason or DEFAULT_REJECTION,
            DocumentVerification.reviewed_at:      datetime.now(timezone.utc),
            DocumentVerification.reviewed_by:      reviewer_id,
        }, synchronize_session=False)
        if commit:
            db.commit()
        return updated

    # ─── Delete ───────────────────────────────────────────────────────────────
    def delete_document(self, db: Session, document_id: str, user_id: str | None = None) -> None:
        doc = self._get(db, document_id)
        if user_id is not None and doc.user_id != user_id:
            raise ForbiddenException("You can only delete your own documents")
        path = doc.document_url
        db.delete(doc)
        db.commit()
        try:
            storage.remove(DOCUMENTS_BUCKET, [path])
        except AppException as e:
            logger.error(f"Document row {document_id} deleted but file removal failed: {e}")

    # ─── Reservation view ─────────────────────────────────────────────────────
    def get_reservation_documents(self, db: Session, reservation_id: str) -> dict:
        """Latest document of each type for the reservation's customer, with signed URLs."""
        reservation = db.get(Reservation, reservation_id)
        if not reservation:
            raise NotFoundException("Reservation")

        docs = db.query(DocumentVerification).filter(
            DocumentVerification.user_id == reservation.user_id,
        ).order_by(DocumentVerification.submitted_at.desc()).all()

        latest: dict[str, dict | None] = {t.value: None for t in DocumentType}
        for doc in docs:
            key = doc.document_type.value
            if latest[key] is None:
                latest[key] = _serialize(doc, self._viewable_url(doc.document_url))
        return {
            "driverLicense": latest[DocumentType.DRIVER_LICENSE.value],
            "validId":       latest[DocumentType.VALID_ID.value],
        }


document_service = DocumentService()
