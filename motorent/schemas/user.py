from typing import Optional

from pydantic import BaseModel, field_validator

from motorent.utils.mappers import is_valid_phone_number


class UserCreateRequest(BaseModel):
    id:       Optional[str] = None
    name:     str
    email:    str
    phone:    Optional[str] = None
    username: Optional[str] = None


class UserUpdateRequest(BaseModel):
    name:             Optional[str] = None
    username:         Optional[str] = None
    phone:            Optional[str] = None
    licenseNumber:    Optional[str] = None
    driverLicenseUrl: Optional[str] = None

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        if v is not None and not v.strip(): raise ValueError("Name cannot be empty")
        return v.strip() if v else v

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v):
        if v and not is_valid_phone_number(v): raise ValueError("Invalid Philippine mobile number")
        return v
