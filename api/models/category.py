"""Category model definitions."""
from datetime import datetime
from pydantic import BaseModel, Field, field_validator


DEFAULT_ICON = "📝"
DEFAULT_COLOR = "#3b82f6"


class CategoryModel(BaseModel):
    """Category model for database representation."""
    id: str = Field(alias="_id")
    name: str
    slug: str
    description: str = ""
    icon: str = DEFAULT_ICON
    color: str = DEFAULT_COLOR
    created_at: datetime
    updated_at: datetime

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v):
        return str(v)

    class Config:
        populate_by_name = True
