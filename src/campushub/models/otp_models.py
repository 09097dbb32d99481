from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from campushub.models.common import utc_now


class OTPDocument(BaseModel):
    """
    One-time password record in the `otps` collection.

    A TTL index on `expires_at` purges records an hour after they expire; records are also
    deleted as soon as they are used or invalidated.
    """

    email: str
    otp: str = Field(..., pattern=r"^\d{6}$")
    expires_at: datetime
    is_verified: bool = False
    verified_at: Optional[datetime] = None
    verification_attempts: int = Field(default=0, ge=0, le=5)
    created_at: datetime = Field(default_factory=utc_now)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.strip().lower()


class SendOTPRequest(BaseModel):
    email: EmailStr


class VerifyOTPRequest(BaseModel):
    email: EmailStr
    otp: str = Field(..., pattern=r"^\d{6}$")


class OTPSentResponse(BaseModel):
    email: str
    expires_at: datetime


class OTPVerifiedResponse(BaseModel):
    email: str
    verified: bool = True
