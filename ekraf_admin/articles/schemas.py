"""
This module defines the Pydantic models used for article management.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ekraf_admin.common.schemas import ApiModel, TimestampMixin
from ekraf_admin.users.schemas import User


class ArticleAuthor(BaseModel):
    name: str
    email: Optional[str] = None


class Article(TimestampMixin):
    """
    An article published by a user.
    """
    id: int
    author_id: str = ""
    artikel_kategori_id: str = ""
    title: str
    slug: str = ""
    thumbnail: str = ""
    content: str = ""
    is_featured: bool = False
    users: Optional[User] = None
    author: Optional[ArticleAuthor] = None

    @field_validator('author_id', 'artikel_kategori_id', mode='before')
    @classmethod
    def stringify_ids(cls, value):
        return str(value) if isinstance(value, int) else value


class ArticlePayload(ApiModel):
    """
    Request body for creating or fully updating an article.
    """
    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    artikel_kategori_id: str = Field(..., min_length=1, description="Article category id")
    thumbnail: str = ""
    is_featured: bool = False

    @classmethod
    def from_article(cls, article: Article) -> 'ArticlePayload':
        return cls.model_validate(article.model_dump(include=set(cls.model_fields)))
