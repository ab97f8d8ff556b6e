from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy.orm import Session

from motorent.database import get_db
from motorent.dependencies import get_current_admin
from motorent.models.admin_user import AdminUser
from motorent.schemas.common import success_response
from motorent.schemas.motorcycle import MotorcycleCreateRequest, MotorcycleUpdateRequest, AvailabilityRequest
from motorent.services import storage_service
from motorent.services.motorcycle_service import motorcycle_service
from motorent.utils.exceptions import InvalidDateRangeException
from motorent.utils.mappers import is_valid_date_range

router = APIRouter(prefix="/motorcycles")


@router.get("", summary="List motorcycles")
def list_motorcycles(
    search:       Optional[str] = Query(None, description="Matches name or type"),
    type:         Optional[str] = Query(None),
    availability: Optional[str] = Query(None, description="Available | Reserved | In Maintenance"),
    db:           Session       = Depends(get_db),
):
    return success_response("Motorcycles retrieved successfully",
                            motorcycle_service.list_motorcycles(db, search, type, availability))


@router.get("/available", summary="Motorcycles that can be booked now")
def available_motorcycles(db: Session = Depends(get_db)):
    return success_response("Motorcycles retrieved successfully", motorcycle_service.get_available_motorcycles(db))


# ─── Images (Admin) ───────────────────────────────────────────────────────────
@router.get("/images", summary="List uploaded motorcycle images (Admin)")
def list_images(_: AdminUser = Depends(get_current_admin)):
    return success_response("Images retrieved", storage_service.list_motorcycle_images())


@router.post("/images", status_code=status.HTTP_201_CREATED, summary="Upload motorcycle images (Admin)")
def upload_images(
    files: list[UploadFile] = File(..., description="JPG, PNG, WEBP or GIF, 5MB max each"),
    _:     AdminUser        = Depends(get_current_admin),
):
    batch = [(f.file.read(), f.filename, f.content_type) for f in files]
    return success_response("Images uploaded successfully", {"urls": storage_service.upload_multiple_images(batch)})


@router.delete("/images", summary="Delete a motorcycle image by its public URL (Admin)")
def delete_image(url: str = Query(...), _: AdminUser = Depends(get_current_admin)):
    return success_response("Image deleted", {"deleted": storage_service.delete_motorcycle_image(url)})


# ─── Single motorcycle ────────────────────────────────────────────────────────
@router.get("/{motorcycle_id}", summary="Get motorcycle by ID")
def get_motorcycle(motorcycle_id: str, db: Session = Depends(get_db)):
    return success_response("Motorcycle retrieved", motorcycle_service.get_motorcycle(db, motorcycle_id))


@router.get("/{motorcycle_id}/availability", summary="Check whether a motorcycle is free for a date range")
def check_availability(
    motorcycle_id: str,
    startDate:     date    = Query(...),
    endDate:       date    = Query(...),
    db:            Session = Depends(get_db),
):
    if not is_valid_date_range(startDate, endDate):
        raise InvalidDateRangeException()
    available = motorcycle_service.check_availability(db, motorcycle_id, startDate, endDate)
    return success_response("Availability checked", {"available": available})


@router.get("/{motorcycle_id}/reservations", summary="Upcoming reservations of a motorcycle (Admin)")
def motorcycle_reservations(
    motorcycle_id: str,
    db:            Session   = Depends(get_db),
    _:             AdminUser = Depends(get_current_admin),
):
    return success_response("Reservations retrieved", motorcycle_service.get_upcoming_reservations(db, motorcycle_id))


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create motorcycle (Admin)")
def create_motorcycle(
    body: MotorcycleCreateRequest,
    db:   Session   = Depends(get_db),
    _:    AdminUser = Depends(get_current_admin),
):
    return success_response("Motorcycle created successfully", motorcycle_service.create_motorcycle(db, body))


@router.patch("/{motorcycle_id}", summary="Update motorcycle (Admin)")
def update_motorcycle(
    motorcycle_id: str,
    body:          MotorcycleUpdateRequest,
    db:            Session   = Depends(get_db),
    _:             AdminUser = Depends(get_current_admin),
):
    return success_response("Motorcycle updated successfully",
                            motorcycle_service.update_motorcycle(db, motorcycle_id, body))


@router.patch("/{motorcycle_id}/availability", summary="Change availability (Admin)")
def update_availability(
    motorcycle_id: str,
    body:          AvailabilityRequest,
    db:            Session   = Depends(get_db),
    _:             AdminUser = Depends(get_current_admin),
):
    return success_response("Availability updated",
                            motorcycle_service.update_availability(db, motorcycle_id, body.availability))


@router.delete("/{motorcycle_id}", summary="Delete motorcycle (Admin)")
def delete_motorcycle(
    motorcycle_id: str,
    db:            Session   = Depends(get_db),
    _:             AdminUser = Depends(get_current_admin),
):
    motorcycle_service.delete_motorcycle(db, motorcycle_id)
    return success_response("Motorcycle deleted successfully", None)
