"""Pydantic schemas for commission calculation, reports and payouts."""
from datetime import datetime, date
from typing import Optional, List
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field, field_serializer

from vendops.schemas.base import BaseResponseSchema, BaseCreateSchema, money


# ==================== Calculation ====================

class CommissionCalculateRequest(BaseCreateSchema):
    """Ad hoc engine run for a single set of commission terms."""
    commission_model: Optional[str] = Field("none", max_length=30)
    commission_pct_bps: Optional[int] = Field(None, ge=0, le=10000)
    commission_flat_cents: Optional[int] = Field(None, ge=0)
    commission_min_cents: Optional[int] = Field(None, ge=0)
    gross_revenue: Decimal = Field(Decimal("0"), ge=0, description="Gross sales in dollars")
    window_days: int = Field(30, ge=1, le=3660)


class CommissionCalculateResponse(BaseModel):
    commission_model: Optional[str] = None
    gross_revenue: float
    window_days: int
    commission_amount: float
    status: str


# ==================== Report ====================

class CommissionRowResponse(BaseModel):
    """One location line of the commission report."""
    location_id: UUID
    location_name: str
    commission_model: str
    commission_pct_bps: int
    commission_flat_cents: int
    commission_min_cents: int
    gross_revenue: float
    commission_amount: float
    status: str


class CommissionSummaryResponse(BaseModel):
    total_commissions: float
    total_revenue: float
    avg_commission_rate: float = Field(..., description="total_commissions / total_revenue")
    avg_commission_rate_pct: float
    locations_with_commissions: int
    total_locations: int


class CommissionReportResponse(BaseModel):
    period_label: str
    start_date: date
    end_date: date
    window_days: int
    summary: CommissionSummaryResponse
    items: List[CommissionRowResponse]


# ==================== Payouts ====================

class CommissionPayoutGenerateRequest(BaseCreateSchema):
    """Snapshot a reporting window into payouts. Either period or both dates."""
    period: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    notes: Optional[str] = None


class CommissionPayoutMarkPaidRequest(BaseCreateSchema):
    paid_at: Optional[datetime] = None


class CommissionPayoutResponse(BaseResponseSchema):
    id: UUID
    location_id: UUID
    period_start: date
    period_end: date
    window_days: int
    commission_model: str
    gross_revenue: Decimal
    amount: Decimal
    paid: bool
    paid_at: Optional[datetime] = None
    notes: Optional[str] = None
    calculated_at: datetime
    created_at: datetime

    @field_serializer("gross_revenue", "amount")
    def serialize_money(self, value: Decimal) -> float:
        return money(value)


class CommissionPayoutListResponse(BaseModel):
    items: List[CommissionPayoutResponse]
    total: int
    skip: int = 0
    limit: int = 50
