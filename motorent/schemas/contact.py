from pydantic import BaseModel, EmailStr, field_validator


class ContactCreateRequest(BaseModel):
    name:    str
    email:   EmailStr
    message: str

    @field_validator("name", "message")
    @classmethod
    def not_empty(cls, v):
        if not v.strip(): raise ValueError("This field cannot be empty")
        return v.strip()


class ContactReplyRequest(BaseModel):
    reply: str

    @field_validator("reply")
    @classmethod
    def check_reply(cls, v):
        if not v.strip(): raise ValueError("Reply cannot be empty")
        return v.strip()
