"""Request schemas for API endpoints.

These schemas only check shape. Content rules (lengths, URL formats, path
rules) are applied by the services so the same checks run for every caller.
"""
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from api.models import DEFAULT_ICON, DEFAULT_COLOR, NavigationTypeEnum
from shared.utils import parse_tags


class ArticleInput(BaseModel):
    """Input schema shared by article creation and editing."""
    title: str = Field(..., description="Article title")
    excerpt: str = Field(default="", description="Short summary shown in listings")
    content: str = Field(..., description="Markdown body")
    category: str = Field(default="", description="Category name, empty for uncategorized")
    tags: List[str] = Field(default_factory=list, description="Tags, as a list or a comma-separated string")
    cover_image: Optional[str] = Field(default=None, description="Cover image URL")
    published: bool = Field(default=False, description="Whether the article is publicly listed")

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, v):
        """Accept the comma-separated form used by the editor."""
        return parse_tags(v)


class CategoryInput(BaseModel):
    """Input schema for creating or editing a category."""
    name: str = Field(..., description="Unique category name")
    description: str = Field(default="", description="Category description")
    icon: str = Field(default=DEFAULT_ICON, description="Icon or emoji")
    color: str = Field(default=DEFAULT_COLOR, description="Hex theme color")
    slug: Optional[str] = Field(
        default=None,
        description="Explicit slug; derived from the name when omitted"
    )


class NavigationInput(BaseModel):
    """Input schema for a navigation entry."""
    title: str = Field(..., description="Menu label")
    path: str = Field(..., description="Internal path, category path or external URL")
    type: NavigationTypeEnum = Field(default=NavigationTypeEnum.INTERNAL)
    order: int = Field(default=0, description="Menu position, ascending")
    enabled: bool = Field(default=True)


class SignInRequest(BaseModel):
    """Administrator credentials."""
    email: str
    password: str = Field(..., min_length=1)
