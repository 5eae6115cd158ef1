"""Navigation entry model definitions."""
from enum import Enum
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field, field_validator


class NavigationTypeEnum(str, Enum):
    """Navigation link type enumeration."""
    INTERNAL = "internal"
    EXTERNAL = "external"
    CATEGORY = "category"


class NavigationEntryModel(BaseModel):
    """Navigation entry model for database representation."""
    id: str = Field(alias="_id")
    title: str
    path: str
    type: NavigationTypeEnum
    order: int = 0
    enabled: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v):
        return str(v)

    class Config:
        populate_by_name = True
