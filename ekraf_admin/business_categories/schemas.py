"""
This module defines the Pydantic models used for business category management.
"""

from typing import Optional

from pydantic import Field, field_validator

from ekraf_admin.common.schemas import ApiModel, TimestampMixin
from ekraf_admin.subsectors.schemas import Subsector


class BusinessCategory(TimestampMixin):
    """
    Reference data: the category a partner business or product belongs to.
    """
    id: int
    name: str
    image: Optional[str] = None
    sub_sector_id: Optional[str] = None
    description: Optional[str] = None
    sub_sectors: Optional[Subsector] = None

    @field_validator('sub_sector_id', mode='before')
    @classmethod
    def stringify_sub_sector_id(cls, value):
        # Subsector ids are BigInts the backend sometimes sends as numbers
        return str(value) if isinstance(value, int) else value


class BusinessCategoryPayload(ApiModel):
    """
    Request body for creating or fully updating a business category.
    The backend validates the complete record on update as well.
    """
    name: str = Field(..., min_length=1, description="Category name")
    sub_sector_id: str = Field(..., min_length=1, description="Owning subsector id")
    image: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def from_category(cls, category: BusinessCategory) -> 'BusinessCategoryPayload':
        return cls(
            name=category.name,
            sub_sector_id=category.sub_sector_id or "",
            image=category.image,
            description=category.description,
        )
