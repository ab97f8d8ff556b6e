import re
from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, field_validator, model_validator

from motorent.models.reservation import ReservationStatus

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def _check_time(v: Optional[str]) -> Optional[str]:
    if v is not None and not _TIME_RE.match(v):
        raise ValueError("Time must be in HH:MM format")
    return v


class ReservationCreateRequest(BaseModel):
    motorcycleId:         str
    startDate:            date
    endDate:              date
    pickupTime:           Optional[str]      = None
    returnTime:           Optional[str]      = None
    customerName:         Optional[str]      = None
    customerEmail:        Optional[EmailStr] = None
    customerPhone:        Optional[str]      = None
    paymentMethod:        Literal["cash", "gcash"] = "cash"
    gcashReferenceNumber: Optional[str]      = None
    gcashProofUrl:        Optional[str]      = None
    licenseImageUrl:      Optional[str]      = None

    @field_validator("pickupTime", "returnTime")
    @classmethod
    def check_times(cls, v):
        return _check_time(v)

    @model_validator(mode="after")
    def check_gcash(self) -> "ReservationCreateRequest":
        if self.paymentMethod == "gcash" and not self.gcashReferenceNumber:
            raise ValueError("GCash reference number is required for GCash payments")
        return self


class ReservationUpdateRequest(BaseModel):
    pickupTime:           Optional[str] = None
    returnTime:           Optional[str] = None
    customerName:         Optional[str] = None
    customerEmail:        Optional[str] = None
    customerPhone:        Optional[str] = None
    paymentMethod:        Optional[Literal["cash", "gcash"]] = None
    gcashReferenceNumber: Optional[str] = None
    gcashProofUrl:        Optional[str] = None
    adminNotes:           Optional[str] = None

    @field_validator("pickupTime", "returnTime")
    @classmethod
    def check_times(cls, v):
        return _check_time(v)


class StatusUpdateRequest(BaseModel):
    status: ReservationStatus
    note:   Optional[str] = None


class ApproveRequest(BaseModel):
    note: Optional[str] = None


class RejectRequest(BaseModel):
    note: Optional[str] = None

    @field_validator("note")
    @classmethod
    def check_note(cls, v):
        return v.strip() if v and v.strip() else None


class CancelRequest(BaseModel):
    note: Optional[str] = None
