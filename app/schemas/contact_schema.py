from typing import Optional

from pydantic import BaseModel, EmailStr, field_validator


class ContactRequest(BaseModel):
    name: str
    email: EmailStr
    phone: Optional[str] = None
    event_type: Optional[str] = None
    message: str

    @field_validator("name", "message")
    @classmethod
    def not_blank(cls, v):
        if not v.strip():
            raise ValueError("This field is required")
        return v.strip()


class ContactResult(BaseModel):
    success: bool
    message: Optional[str] = None


class ContactInfoOut(BaseModel):
    phone: Optional[str] = None
    whatsapp_url: Optional[str] = None
