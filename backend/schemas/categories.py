from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field, field_validator

from .common import CamelModel, strip_nullable, strip_required


class CategoryRead(CamelModel):
    id: UUID
    name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CategoryCreate(CamelModel):
    name: str = Field(max_length=255)
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        return strip_required(v)

    @field_validator("description")
    @classmethod
    def _description(cls, v: Optional[str]) -> Optional[str]:
        return strip_nullable(v)


class CategoryUpdate(CamelModel):
    name: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return strip_required(v)

    @field_validator("description")
    @classmethod
    def _description(cls, v: Optional[str]) -> Optional[str]:
        return strip_nullable(v)
