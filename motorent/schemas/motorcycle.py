from typing import Optional

from pydantic import BaseModel, field_validator

from motorent.models.motorcycle import Availability


# ─── Requests ─────────────────────────────────────────────────────────────────
class MotorcycleCreateRequest(BaseModel):
    name:           str
    brand:          Optional[str]   = None
    model:          Optional[str]   = None
    type:           Optional[str]   = None      # Scooter | Sport | Touring | ...
    engineCapacity: Optional[int]   = None
    transmission:   Optional[str]   = None
    year:           Optional[int]   = None
    color:          Optional[str]   = None
    plateNumber:    Optional[str]   = None
    fuelCapacity:   Optional[float] = None
    pricePerDay:    float
    description:    Optional[str]   = None
    image:          Optional[str]   = None
    features:       list[str]       = []
    availability:   Availability    = Availability.AVAILABLE
    fuelType:       Optional[str]   = None
    mileage:        Optional[str]   = None

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        if not v.strip(): raise ValueError("Name cannot be empty")
        return v.strip()

    @field_validator("pricePerDay")
    @classmethod
    def check_price(cls, v):
        if v <= 0: raise ValueError("Price per day must be greater than 0")
        return v

    @field_validator("year")
    @classmethod
    def check_year(cls, v):
        if v is not None and not (1900 <= v <= 2100): raise ValueError("Year must be between 1900 and 2100")
        return v

    @field_validator("plateNumber")
    @classmethod
    def check_plate(cls, v):
        return v.strip().upper() if v and v.strip() else None


class MotorcycleUpdateRequest(BaseModel):
    name:           Optional[str]          = None
    brand:          Optional[str]          = None
    model:          Optional[str]          = None
    type:           Optional[str]          = None
    engineCapacity: Optional[int]          = None
    transmission:   Optional[str]          = None
    year:           Optional[int]          = None
    color:          Optional[str]          = None
    plateNumber:    Optional[str]          = None
    fuelCapacity:   Optional[float]        = None
    pricePerDay:    Optional[float]        = None
    description:    Optional[str]          = None
    image:          Optional[str]          = None
    features:       Optional[list[str]]    = None
    availability:   Optional[Availability] = None
    rating:         Optional[float]        = None
    reviewCount:    Optional[int]          = None
    fuelType:       Optional[str]          = None
    mileage:        Optional[str]          = None

    @field_validator("pricePerDay")
    @classmethod
    def check_price(cls, v):
        if v is not None and v <= 0: raise ValueError("Price per day must be greater than 0")
        return v


class AvailabilityRequest(BaseModel):
    availability: Availability
