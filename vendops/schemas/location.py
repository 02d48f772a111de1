"""Pydantic schemas for locations and their commission terms."""
from datetime import datetime
from typing import Optional, List
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from vendops.schemas.base import BaseResponseSchema, BaseCreateSchema, BaseUpdateSchema
from vendops.services.commission_engine import CommissionModel


class LocationBase(BaseCreateSchema):
    """Base schema for Location."""
    name: str = Field(..., min_length=1, max_length=200)

    address_line1: Optional[str] = Field(None, max_length=255)
    address_line2: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    postal_code: Optional[str] = Field(None, max_length=20)

    contact_name: Optional[str] = Field(None, max_length=200)
    contact_email: Optional[str] = Field(None, max_length=255)
    contact_phone: Optional[str] = Field(None, max_length=30)

    # Commission terms
    commission_model: CommissionModel = CommissionModel.NONE
    commission_pct_bps: Optional[int] = Field(None, ge=0, le=10000, description="Basis points of gross")
    commission_flat_cents: Optional[int] = Field(None, ge=0, description="Flat monthly fee in cents")
    commission_min_cents: Optional[int] = Field(None, ge=0, description="Monthly minimum in cents")
    commission_notes: Optional[str] = None


class LocationCreate(LocationBase):
    """Schema for creating Location."""
    pass


class LocationUpdate(BaseUpdateSchema):
    """Schema for updating Location."""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    contact_name: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    commission_model: Optional[CommissionModel] = None
    commission_pct_bps: Optional[int] = Field(None, ge=0, le=10000)
    commission_flat_cents: Optional[int] = Field(None, ge=0)
    commission_min_cents: Optional[int] = Field(None, ge=0)
    commission_notes: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_null(cls, v):
        """Name may be omitted from an update but not cleared."""
        if v is None:
            raise ValueError("name cannot be null")
        return v


class LocationResponse(BaseResponseSchema):
    """Response schema for Location."""
    id: UUID
    name: str
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    contact_name: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    # Plain string: rows written elsewhere may carry a tag outside CommissionModel
    commission_model: Optional[str] = None
    commission_pct_bps: Optional[int] = None
    commission_flat_cents: Optional[int] = None
    commission_min_cents: Optional[int] = None
    commission_notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class LocationListResponse(BaseModel):
    """Response for listing locations."""
    items: List[LocationResponse]
    total: int
    skip: int = 0
    limit: int = 50
