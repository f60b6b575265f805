"""
This module defines the Pydantic models used for creative-economy subsectors.
"""

from typing import Optional

from pydantic import Field

from ekraf_admin.common.schemas import ApiModel, TimestampMixin


class Subsector(TimestampMixin):
    """
    A creative-economy subsector that business categories are grouped under.
    """
    id: str
    title: str
    slug: str = ""
    image: Optional[str] = None
    description: Optional[str] = None


class SubsectorPayload(ApiModel):
    """
    Request body for creating or renaming a subsector.
    """
    title: str = Field(..., min_length=1, description="Subsector title")
