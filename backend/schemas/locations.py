from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field, field_validator

from .common import CamelModel, strip_nullable, strip_required


class LocationRead(CamelModel):
    id: UUID
    name: str
    description: Optional[str] = None
    type: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    zip_code: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class LocationCreate(CamelModel):
    name: str = Field(max_length=255)
    description: Optional[str] = None
    type: Optional[str] = Field(default=None, max_length=50)
    address: Optional[str] = None
    city: Optional[str] = Field(default=None, max_length=100)
    state: Optional[str] = Field(default=None, max_length=100)
    country: Optional[str] = Field(default=None, max_length=100)
    zip_code: Optional[str] = Field(default=None, max_length=20)
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        return strip_required(v)

    @field_validator("description", "address", "city", "state", "country", "zip_code")
    @classmethod
    def _strip_nullable(cls, v: Optional[str]) -> Optional[str]:
        return strip_nullable(v)

    @field_validator("type")
    @classmethod
    def _type(cls, v: Optional[str]) -> Optional[str]:
        v = strip_nullable(v)
        return v.lower() if v else None


class LocationUpdate(LocationCreate):
    name: Optional[str] = Field(default=None, max_length=255)
    is_active: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def _name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return strip_required(v)
