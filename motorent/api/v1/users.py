from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from motorent.database import get_db
from motorent.dependencies import get_current_admin, get_current_user
from motorent.models.admin_user import AdminUser
from motorent.models.user import User
from motorent.schemas.common import success_response, paginated_response
from motorent.schemas.user import UserCreateRequest, UserUpdateRequest
from motorent.services.user_service import user_service, serialize_profile

router = APIRouter(prefix="/users")


# ─── Self service ─────────────────────────────────────────────────────────────
@router.get("/me", summary="My profile")
def get_me(user: User = Depends(get_current_user)):
    return success_response("Profile retrieved", serialize_profile(user))


@router.patch("/me", summary="Update my profile")
def update_me(
    body: UserUpdateRequest,
    db:   Session = Depends(get_db),
    user: User    = Depends(get_current_user),
):
    return success_response("Profile updated successfully", user_service.update_user(db, user.id, body))


@router.get("/check", summary="Check whether an email or username is taken")
def check_exists(
    email:    Optional[str] = Query(None),
    username: Optional[str] = Query(None),
    db:       Session       = Depends(get_db),
):
    return success_response("Check complete", {
        "emailExists":    user_service.email_exists(db, email) if email else None,
        "usernameExists": user_service.username_exists(db, username) if username else None,
    })


# ─── Admin ────────────────────────────────────────────────────────────────────
@router.get("", summary="List customers (Admin)")
def list_users(
    page:   int           = Query(1, ge=1),
    limit:  int           = Query(20, ge=1, le=100),
    search: Optional[str] = Query(None),
    db:     Session       = Depends(get_db),
    _:      AdminUser     = Depends(get_current_admin),
):
    data, total = user_service.list_users(db, page, limit, search)
    return paginated_response("Users retrieved successfully", data, total, page, limit)


@router.get("/with-licenses", summary="Customers who uploaded a driver's license (Admin)")
def users_with_licenses(db: Session = Depends(get_db), _: AdminUser = Depends(get_current_admin)):
    return success_response("Users retrieved", user_service.get_users_with_licenses(db))


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create a customer profile (Admin)")
def create_user(
    body: UserCreateRequest,
    db:   Session   = Depends(get_db),
    _:    AdminUser = Depends(get_current_admin),
):
    return success_response("User created successfully", user_service.create_user(db, body))


@router.get("/{user_id}", summary="Get customer by ID (Admin)")
def get_user(user_id: str, db: Session = Depends(get_db), _: AdminUser = Depends(get_current_admin)):
    return success_response("User retrieved", user_service.get_user(db, user_id))


@router.patch("/{user_id}", summary="Update customer (Admin)")
def update_user(
    user_id: str,
    body:    UserUpdateRequest,
    db:      Session   = Depends(get_db),
    _:       AdminUser = Depends(get_current_admin),
):
    return success_response("User updated successfully", user_service.update_user(db, user_id, body))


@router.delete("/{user_id}", summary="Delete customer (Admin)")
def delete_user(user_id: str, db: Session = Depends(get_db), _: AdminUser = Depends(get_current_admin)):
    user_service.delete_user(db, user_id)
    return success_response("User deleted successfully", None)
