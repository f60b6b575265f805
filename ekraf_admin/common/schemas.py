"""
This module defines common Pydantic models used across the resource clients.
These models represent the response envelopes shared by every endpoint of the backend.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, TypeVar, Generic, List, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ekraf_admin.config import DEFAULT_TIMEZONE


def parse_timestamp(value: Any) -> Any:
    """Parse the timestamp formats the backend emits into timezone-aware datetimes."""
    if value is None or value == "":
        return None

    if isinstance(value, str):
        try:
            # fromisoformat on older interpreters rejects the trailing "Z"
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            try:
                value = datetime.strptime(value, "%Y-%m-%d %H:%M:%S")
            except ValueError:
                # Let Pydantic report the validation error
                return value

    if isinstance(value, datetime) and value.tzinfo is None:
        return DEFAULT_TIMEZONE.localize(value)
    return value


class ApiModel(BaseModel):
    """
    Base model for backend records.
    Unknown fields are ignored so new backend columns do not break parsing.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class TimestampMixin(ApiModel):
    """
    Adds the created and updated timestamp fields most backend records carry.
    """
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator('created_at', 'updated_at', mode='before')
    @classmethod
    def parse_datetime(cls, value):
        return parse_timestamp(value)


T = TypeVar('T')


class MessageResponse(ApiModel):
    """
    Envelope for responses that only carry a message, such as deletes.
    """
    message: str = ""
    success: Optional[bool] = None


class ApiResponse(MessageResponse, Generic[T]):
    """
    Envelope for single-record and unpaginated list responses.
    """
    data: T


class PaginatedResponse(MessageResponse, Generic[T]):
    """
    Envelope for paginated list responses.

    Pages are 1-indexed. Endpoints that do not paginate are treated as a
    single page, but ``data`` itself must always be present.
    """
    data: List[T]
    total_pages: int = Field(default=1, ge=0, alias="totalPages")
    current_page: int = Field(default=1, ge=1, alias="currentPage")

    @model_validator(mode='after')
    def check_page_bounds(self):
        if self.total_pages >= 1 and self.current_page > self.total_pages:
            raise ValueError(
                f"currentPage {self.current_page} exceeds totalPages {self.total_pages}"
            )
        return self

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages


def rename_legacy_fields(data: Any, legacy_names: dict) -> Any:
    """
    Translate legacy backend field names to their canonical names.

    Canonical fields already present win over their legacy counterparts.
    """
    if not isinstance(data, dict):
        return data
    renamed = dict(data)
    for legacy, canonical in legacy_names.items():
        if legacy in renamed:
            value = renamed.pop(legacy)
            renamed.setdefault(canonical, value)
    return renamed
