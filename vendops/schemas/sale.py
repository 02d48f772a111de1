"""Pydantic schemas for sale lines."""
from datetime import datetime
from typing import Optional, List
from uuid import UUID

from pydantic import BaseModel, Field

from vendops.schemas.base import BaseResponseSchema, BaseCreateSchema


class SaleCreate(BaseCreateSchema):
    """Schema for recording a sale line."""
    machine_id: UUID
    product_name: Optional[str] = Field(None, max_length=200)
    qty: int = Field(..., gt=0)
    unit_price_cents: int = Field(..., ge=0)
    unit_cost_cents: Optional[int] = Field(None, ge=0)
    payment_method: Optional[str] = Field(None, max_length=30)
    source: Optional[str] = Field(None, max_length=30)
    occurred_at: Optional[datetime] = None  # Defaults to now


class SaleResponse(BaseResponseSchema):
    id: UUID
    machine_id: UUID
    product_name: Optional[str] = None
    qty: int
    unit_price_cents: int
    unit_cost_cents: Optional[int] = None
    line_total_cents: int
    payment_method: Optional[str] = None
    source: Optional[str] = None
    occurred_at: datetime


class SaleListResponse(BaseModel):
    items: List[SaleResponse]
    total: int
    skip: int = 0
    limit: int = 100
