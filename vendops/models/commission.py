"""Commission payout snapshots.

Commission reports are recomputed on every request. A payout freezes the
amount owed to a location for one window so it can be tracked until paid.
"""
import uuid
from datetime import datetime, date, timezone
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import String, Boolean, DateTime, ForeignKey, Integer, Text, Numeric, Date
from sqlalchemy import UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vendops.database import Base
from vendops.db_types import UUIDType

if TYPE_CHECKING:
    from vendops.models.location import Location


class CommissionPayout(Base):
    """Commission owed to a location for one reporting window."""
    __tablename__ = "commission_payouts"
    __table_args__ = (
        UniqueConstraint("location_id", "period_start", "period_end", name="uq_payout_location_period"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUIDType,
        primary_key=True,
        default=uuid.uuid4
    )
    location_id: Mapped[uuid.UUID] = mapped_column(
        UUIDType,
        ForeignKey("locations.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    # Window (both dates inclusive)
    period_start: Mapped[date] = mapped_column(Date, nullable=False)
    period_end: Mapped[date] = mapped_column(Date, nullable=False)
    window_days: Mapped[int] = mapped_column(Integer, nullable=False)

    # Inputs at calculation time
    commission_model: Mapped[str] = mapped_column(String(30), nullable=False)
    gross_revenue: Mapped[Decimal] = mapped_column(
        Numeric(14, 2),
        default=Decimal("0"),
        nullable=False
    )

    amount: Mapped[Decimal] = mapped_column(
        Numeric(14, 2),
        nullable=False,
        comment="Commission owed in dollars"
    )

    # Status
    paid: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    paid_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    calculated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False
    )

    # Relationships
    location: Mapped["Location"] = relationship("Location")

    def __repr__(self) -> str:
        return f"<CommissionPayout(location={self.location_id}, {self.period_start}..{self.period_end}, amount={self.amount})>"
