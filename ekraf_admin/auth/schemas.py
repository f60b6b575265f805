"""
This module defines the Pydantic models used by the authentication endpoints.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import EmailStr, Field, field_validator

from ekraf_admin.common.schemas import ApiModel
from ekraf_admin.users.schemas import BusinessStatus, Gender, User


class LoginLevel(str, Enum):
    """
    The login endpoint is split per account level.
    """
    SUPERADMIN = "superadmin"
    ADMIN = "admin"
    UMKM = "umkm"


class LoginRequest(ApiModel):
    username_or_email: str = Field(..., min_length=1, alias="usernameOrEmail")
    password: str = Field(..., min_length=1)


class LoginResponse(ApiModel):
    message: str = ""
    token: str = Field(..., min_length=1)
    user: User


class RegistrationData(ApiModel):
    """
    Request body for registering a new UMKM partner account.
    """
    name: str = Field(..., min_length=1)
    username: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=6)
    gender: Gender
    phone_number: str = Field(..., min_length=1)
    business_name: Optional[str] = None
    business_status: Optional[BusinessStatus] = None
    business_category_id: Optional[int] = None


class TemporaryUser(ApiModel):
    """
    A registration awaiting email verification.
    """
    id: int
    name: str
    username: str
    email: str
    gender: Optional[Gender] = None
    phone_number: Optional[str] = None
    business_name: Optional[str] = None
    business_status: Optional[BusinessStatus] = None
    level_id: str = ""
    business_category_id: Optional[int] = None
    verification_token: Optional[str] = Field(default=None, alias="verificationToken")
    verification_token_expiry: Optional[datetime] = Field(default=None, alias="verificationTokenExpiry")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")

    @field_validator('level_id', mode='before')
    @classmethod
    def stringify_level_id(cls, value):
        return str(value) if isinstance(value, int) else value


class RegisterResponse(ApiModel):
    message: str = ""
    user: TemporaryUser


class ForgotPasswordRequest(ApiModel):
    email: EmailStr


class ResetPasswordRequest(ApiModel):
    token: str = Field(..., min_length=1)
    password: str = Field(..., min_length=6)


class VerifyEmailRequest(ApiModel):
    token: str = Field(..., min_length=1)


class VerifyEmailResponse(ApiModel):
    message: str = ""
    user: User
