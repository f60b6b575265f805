"""
This module defines the Pydantic models used for users and partners ("mitra").
A partner is a user on the UMKM level; whether it is active derives solely
from ``verifiedAt``.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ekraf_admin.business_categories.schemas import BusinessCategory
from ekraf_admin.common.schemas import ApiModel, TimestampMixin, parse_timestamp, rename_legacy_fields

# Level names that identify a partner account
PARTNER_LEVELS = {"user", "umkm"}

USER_LEGACY_FIELDS = {
    "id_user": "id",
    "nama_user": "name",
    "nohp": "phone_number",
    "jk": "gender",
    "nama_usaha": "business_name",
    "status_usaha": "business_status",
    "id_level": "level_id",
    "id_kategori_usaha": "business_category_id",
}


class Gender(str, Enum):
    MALE = "Laki-laki"
    FEMALE = "Perempuan"


class BusinessStatus(str, Enum):
    NEW = "BARU"
    ESTABLISHED = "SUDAH_LAMA"


class PartnerFilter(str, Enum):
    ALL = "all"
    ACTIVE = "active"
    INACTIVE = "inactive"


class Level(TimestampMixin):
    """
    A user role classification such as superadmin, admin or user.
    """
    id: str
    name: str

    @field_validator('id', mode='before')
    @classmethod
    def stringify_id(cls, value):
        return str(value) if isinstance(value, int) else value


class User(TimestampMixin):
    """
    A user record as returned by the backend, including partner data.
    """
    id: str
    name: str
    email: str
    level_id: str = ""
    username: Optional[str] = None
    gender: Optional[Gender] = None
    phone_number: Optional[str] = None
    image: Optional[str] = None
    business_name: Optional[str] = None
    business_status: Optional[BusinessStatus] = None
    business_category_id: Optional[int] = None
    email_verified_at: Optional[datetime] = None
    two_factor_enabled: Optional[bool] = None
    verified_at: Optional[datetime] = Field(default=None, alias="verifiedAt")
    product_count: Optional[int] = Field(default=None, alias="productCount")
    level: Optional[str] = None
    levels: Optional[Level] = None
    business_categories: Optional[BusinessCategory] = None

    @model_validator(mode='before')
    @classmethod
    def translate_legacy_fields(cls, data):
        data = rename_legacy_fields(data, USER_LEGACY_FIELDS)
        if isinstance(data, dict) and not data.get("level"):
            # Older payloads nest the level name as tbl_level.level
            legacy_level = data.get("tbl_level")
            if isinstance(legacy_level, dict) and legacy_level.get("level"):
                data["level"] = legacy_level["level"]
        return data

    @field_validator('id', 'level_id', mode='before')
    @classmethod
    def stringify_ids(cls, value):
        # BigInt ids arrive as strings or numbers depending on the endpoint
        return str(value) if isinstance(value, int) else value

    @field_validator('verified_at', 'email_verified_at', mode='before')
    @classmethod
    def parse_verification_time(cls, value):
        return parse_timestamp(value)

    @property
    def is_active(self) -> bool:
        return self.verified_at is not None

    @property
    def level_name(self) -> Optional[str]:
        if self.levels is not None:
            return self.levels.name
        return self.level

    @property
    def is_partner(self) -> bool:
        return (self.level_name or "").lower() in PARTNER_LEVELS


class UserUpdate(ApiModel):
    """
    Request body for updating a user.
    The backend validates the complete record, so every field is sent.
    """
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    phone_number: Optional[str] = None
    username: Optional[str] = None
    gender: Optional[Gender] = None
    image: Optional[str] = None
    business_name: Optional[str] = None
    business_status: Optional[BusinessStatus] = None
    business_category_id: Optional[int] = None
    level_id: str = ""

    @classmethod
    def from_user(cls, user: User) -> 'UserUpdate':
        return cls.model_validate(user.model_dump(include=set(cls.model_fields)))


class PartnerStats(BaseModel):
    """
    Partner counts shown on the partner management screen.
    """
    total: int = 0
    active: int = 0
    inactive: int = 0
