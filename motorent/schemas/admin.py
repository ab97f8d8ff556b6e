from pydantic import BaseModel, EmailStr


class TestEmailRequest(BaseModel):
    to: EmailStr
