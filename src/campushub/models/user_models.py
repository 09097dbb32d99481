"""
# User Models

Pydantic models for campushub user accounts.

Usernames and emails are unique across the `users` collection (enforced both by the service
layer and by unique indexes). Emails are stored lowercase. Phone numbers are Philippine mobile
numbers in E.164 form (`+639XXXXXXXXX`) so that event notifications can be delivered by SMS.

Password hashes are stored in the `password` field and are **never** part of a response model.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from campushub.models.common import DocumentResponse, utc_now

PHONE_NUMBER_PATTERN = r"^\+639\d{9}$"


class UserRole(str, Enum):
    """Roles a stored user may hold. `guest` is implied for unauthenticated callers."""

    ADMIN = "admin"
    ADVISER = "adviser"
    OFFICER = "officer"
    STUDENT = "student"


class UserDocument(BaseModel):
    """User document as stored in the `users` collection."""

    model_config = ConfigDict(use_enum_values=True)

    username: str = Field(..., min_length=3, max_length=50, description="Unique username")
    email: str = Field(..., description="Unique email, stored lowercase")
    password: str = Field(..., description="bcrypt password hash")
    role: UserRole = Field(default=UserRole.STUDENT, description="Authorization role")
    phone_number: str = Field(..., pattern=PHONE_NUMBER_PATTERN, description="E.164 mobile number")
    password_reset_token: Optional[str] = None
    password_reset_expires: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.strip().lower()


class CreateUserRequest(BaseModel):
    """Admin request to create a user account."""

    model_config = ConfigDict(use_enum_values=True)

    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=8, max_length=128)
    email: EmailStr
    phone_number: str = Field(..., min_length=13, max_length=13, pattern=PHONE_NUMBER_PATTERN)
    role: UserRole = UserRole.STUDENT


class UpdateUserRequest(BaseModel):
    """Partial update; at least one field must be present."""

    model_config = ConfigDict(use_enum_values=True)

    username: Optional[str] = Field(None, min_length=3, max_length=50)
    password: Optional[str] = Field(None, min_length=8, max_length=128)
    email: Optional[EmailStr] = None
    phone_number: Optional[str] = Field(None, min_length=13, max_length=13, pattern=PHONE_NUMBER_PATTERN)
    role: Optional[UserRole] = None

    @model_validator(mode="after")
    def at_least_one_field(self):
        if not self.model_dump(exclude_none=True):
            raise ValueError("At least one field must be provided for update")
        return self


class UserResponse(DocumentResponse):
    username: str
    email: str
    role: UserRole
    phone_number: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserSummary(BaseModel):
    """Populated user reference embedded in other responses."""

    id: str
    username: str
    email: str
    role: UserRole


class CurrentUser(BaseModel):
    """The authenticated caller, as resolved from the request token."""

    id: Optional[str] = None
    username: Optional[str] = None
    email: Optional[str] = None
    role: str = "guest"

    @property
    def is_guest(self) -> bool:
        return self.id is None


class UserListResponse(BaseModel):
    data: List[UserResponse]
    total: int
    page: int
    limit: int


def user_summary(doc: Optional[Dict]) -> Optional[UserSummary]:
    if not doc:
        return None
    return UserSummary(id=str(doc["_id"]), username=doc["username"], email=doc["email"], role=doc["role"])
