"""
Auth schemas.
"""

from typing import Literal, Optional

from pydantic import EmailStr, Field

from app.shared.schemas import CamelModel
from app.features.users.schemas import UserResponse


class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72)
    name: str = Field(..., min_length=2, max_length=100)
    role: Literal["COACH", "ATHLETE"] = "ATHLETE"
    invitation_code: Optional[str] = Field(default=None, max_length=16)


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class ChangePasswordRequest(CamelModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8, max_length=72)


class AuthResponse(CamelModel):
    message: str
    user: UserResponse
    token: str


class MeResponse(CamelModel):
    user: UserResponse
