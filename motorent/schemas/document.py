from typing import Optional

from pydantic import BaseModel, field_validator


class DocumentRejectRequest(BaseModel):
    reason: str

    @field_validator("reason")
    @classmethod
    def check_reason(cls, v):
        if not v.strip(): raise ValueError("Rejection reason is required")
        return v.strip()


class BulkRejectRequest(BaseModel):
    reason: Optional[str] = None
