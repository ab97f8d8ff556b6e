from sqlalchemy import or_
from sqlalchemy.orm import Session

from motorent.models.reservation import Reservation
from motorent.models.transaction import Transaction
from motorent.models.user import User
from motorent.schemas.user import UserCreateRequest, UserUpdateRequest
from motorent.utils.exceptions import NotFoundException, DuplicateEntryException, ResourceInUseException
from motorent.utils.mappers import transform_user


def serialize_profile(u: User) -> dict:
    return {
        **transform_user(u),
        "username":         u.username,
        "licenseNumber":    u.license_number,
        "driverLicenseUrl": u.driver_license_url,
        "createdAt":        u.created_at.isoformat() if u.created_at else None,
    }


class UserService:

    # ─── Lookups ──────────────────────────────────────────────────────────────
    def find_by_id(self, db: Session, user_id: str) -> User | None:
        return db.get(User, user_id)

    def find_by_email(self, db: Session, email: str) -> User | None:
        return db.query(User).filter(User.email == email.lower()).first()

    def find_by_username(self, db: Session, username: str) -> User | None:
        return db.query(User).filter(User.username == username).first()

    def find_by_email_or_username(self, db: Session, identifier: str) -> User | None:
        return db.query(User).filter(or_(
            User.email == identifier.lower(), User.username == identifier,
        )).first()

    def email_exists(self, db: Session, email: str) -> bool:
        return self.find_by_email(db, email) is not None

    def username_exists(self, db: Session, username: str) -> bool:
        return self.find_by_username(db, username) is not None

    # ─── List ─────────────────────────────────────────────────────────────────
    def list_users(self, db: Session, page: int, limit: int, search: str | None) -> tuple[list[dict], int]:
        q = db.query(User)
        if search:
            kw = f"%{search}%"
            q = q.filter(or_(User.name.ilike(kw), User.email.ilike(kw), User.username.ilike(kw)))
        total = q.count()
        users = q.order_by(User.created_at.desc()).offset((page - 1) * limit).limit(limit).all()
        return [serialize_profile(u) for u in users], total

    def get_user(self, db: Session, user_id: str) -> dict:
        u = self.find_by_id(db, user_id)
        if not u:
            raise NotFoundException("User")
        return serialize_profile(u)

    def get_users_with_licenses(self, db: Session) -> list[dict]:
        users = db.query(User).filter(User.driver_license_url.isnot(None)) \
                  .order_by(User.created_at.desc()).all()
        return [serialize_profile(u) for u in users]

    # ─── Create / Update / Delete ─────────────────────────────────────────────
    def create_user(self, db: Session, data: UserCreateRequest) -> dict:
        if self.email_exists(db, data.email):
            raise DuplicateEntryException("Email already registered", field="email")
        if data.username and self.username_exists(db, data.username):
            raise DuplicateEntryException(
                "This username is already taken. Please choose a different one.", field="username",
            )
        u = User(name=data.name, email=data.email.lower(), phone=data.phone, username=data.username)
        if data.id:
            u.id = data.id
        db.add(u)
        db.commit()
        db.refresh(u)
        return serialize_profile(u)

    def update_user(self, db: Session, user_id: str, data: UserUpdateRequest) -> dict:
        u = self.find_by_id(db, user_id)
        if not u:
            raise NotFoundException("User")

        if data.username and data.username != u.username:
            if db.query(User).filter(User.username == data.username, User.id != user_id).first():
                raise DuplicateEntryException(
                    "This username is already taken. Please choose a different one.", field="username",
                )
            u.username = data.username

        if data.name:                         u.name               = data.name
        if data.phone is not None:            u.phone              = data.phone
        if data.licenseNumber is not None:    u.license_number     = data.licenseNumber
        if data.driverLicenseUrl is not None: u.driver_license_url = data.driverLicenseUrl

        db.commit()
        db.refresh(u)
        return serialize_profile(u)

    def delete_user(self, db: Session, user_id: str) -> None:
        u = self.find_by_id(db, user_id)
        if not u:
            raise NotFoundException("User")
        in_use = db.query(Reservation).filter(Reservation.user_id == user_id).count() \
            + db.query(Transaction).filter(Transaction.user_id == user_id).count()
        if in_use:
            raise ResourceInUseException("Cannot delete: this user has reservations or transactions.")
        db.delete(u)
        db.commit()


user_service = UserService()
