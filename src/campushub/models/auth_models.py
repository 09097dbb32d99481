from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from campushub.models.user_models import PHONE_NUMBER_PATTERN, UserResponse, UserRole


class SignUpRequest(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    phone_number: str = Field(..., pattern=PHONE_NUMBER_PATTERN)
    role: UserRole = UserRole.STUDENT


class SignInRequest(BaseModel):
    identifier: str = Field(..., min_length=1, description="Email or username")
    password: str = Field(..., min_length=1)


class ResetPasswordRequest(BaseModel):
    email: EmailStr
    otp: str = Field(..., pattern=r"^\d{6}$")
    new_password: str = Field(..., min_length=8, max_length=128)


class AuthResponse(BaseModel):
    """Authenticated user together with the issued token.

    In production the token is also set as the httpOnly auth cookie.
    """

    user: UserResponse
    token: Optional[str] = None
