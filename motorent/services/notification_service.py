from sqlalchemy.orm import Session

from motorent.models.notification import Notification
from motorent.utils.exceptions import NotFoundException
from motorent.utils.mappers import transform_notification, transform_notifications


class NotificationService:

    def create_notification(
        self, db: Session, user_id: str, type: str, title: str, message: str,
        reservation_id: str | None = None, motorcycle_name: str | None = None,
    ) -> dict:
        n = Notification(
            user_id=user_id,
            type=type,
            title=title,
            message=message,
            reservation_id=reservation_id,
            motorcycle_name=motorcycle_name,
            read=False,
        )
        db.add(n)
        db.commit()
        db.refresh(n)
        return transform_notification(n)

    def get_user_notifications(self, db: Session, user_id: str, unread_only: bool = False) -> list[dict]:
        q = db.query(Notification).filter(Notification.user_id == user_id)
        if unread_only:
            q = q.filter(Notification.read.is_(False))
        return transform_notifications(q.order_by(Notification.timestamp.desc()).all())

    def get_unread_count(self, db: Session, user_id: str) -> int:
        return db.query(Notification).filter(
            Notification.user_id == user_id, Notification.read.is_(False),
        ).count()

    def _get_own(self, db: Session, notification_id: str, user_id: str) -> Notification:
        n = db.query(Notification).filter(
            Notification.id == notification_id, Notification.user_id == user_id,
        ).first()
        if not n:
            raise NotFoundException("Notification")
        return n

    def mark_as_read(self, db: Session, notification_id: str, user_id: str) -> dict:
        n = self._get_own(db, notification_id, user_id)
        n.read = True
        db.commit()
        db.refresh(n)
        return transform_notification(n)

    def mark_all_as_read(self, db: Session, user_id: str) -> int:
        updated = db.query(Notification).filter(
            Notification.user_id == user_id, Notification.read.is_(False),
        ).update({Notification.read: True}, synchronize_session=False)
        db.commit()
        return updated

    def delete_notification(self, db: Session, notification_id: str, user_id: str) -> None:
        db.delete(self._get_own(db, notification_id, user_id))
        db.commit()


notification_service = NotificationService()
