"""Article model definitions."""
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field, field_validator


class ArticleModel(BaseModel):
    """Article model for database representation."""
    id: str = Field(alias="_id")
    title: str
    excerpt: str = ""
    content: str
    category: str = ""
    tags: List[str] = Field(default_factory=list)
    cover_image: Optional[str] = None
    published: bool = False
    views: int = Field(default=0, ge=0)
    author: str = "Anonymous"
    created_at: datetime
    updated_at: datetime

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v):
        return str(v)

    @field_validator("author", mode="before")
    @classmethod
    def default_author(cls, v):
        return v or "Anonymous"

    class Config:
        populate_by_name = True
