from typing import Optional

from pydantic import BaseModel, field_validator

from motorent.models.transaction import TransactionType, TransactionStatus


class TransactionCreateRequest(BaseModel):
    userId:        str
    reservationId: Optional[str]     = None
    type:          TransactionType
    amount:        float
    status:        TransactionStatus = TransactionStatus.PENDING
    description:   Optional[str]     = None

    @field_validator("amount")
    @classmethod
    def check_amount(cls, v):
        if v <= 0: raise ValueError("Amount must be greater than 0")
        return v
