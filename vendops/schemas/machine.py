"""Pydantic schemas for machines."""
from datetime import datetime
from typing import Optional, List
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from vendops.schemas.base import BaseResponseSchema, BaseCreateSchema, BaseUpdateSchema


class MachineCreate(BaseCreateSchema):
    name: str = Field(..., min_length=1, max_length=200)
    serial_number: Optional[str] = Field(None, max_length=100)
    manufacturer: Optional[str] = Field(None, max_length=100)
    status: str = Field("ACTIVE", max_length=30)
    location_id: Optional[UUID] = None


class MachineUpdate(BaseUpdateSchema):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    serial_number: Optional[str] = Field(None, max_length=100)
    manufacturer: Optional[str] = None
    status: Optional[str] = Field(None, max_length=30)
    location_id: Optional[UUID] = None

    @field_validator("name", "status")
    @classmethod
    def not_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v


class MachineResponse(BaseResponseSchema):
    id: UUID
    name: str
    serial_number: Optional[str] = None
    manufacturer: Optional[str] = None
    status: str
    location_id: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime


class MachineListResponse(BaseModel):
    items: List[MachineResponse]
    total: int
    skip: int = 0
    limit: int = 50
