"""Sale line model."""
import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from sqlalchemy import String, DateTime, ForeignKey, Integer, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vendops.database import Base
from vendops.db_types import UUIDType

if TYPE_CHECKING:
    from vendops.models.machine import Machine


class Sale(Base):
    """
    One sale line recorded by a machine.
    Line value = qty * unit_price_cents.
    """
    __tablename__ = "sales"
    __table_args__ = (
        Index("ix_sales_machine_occurred", "machine_id", "occurred_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUIDType,
        primary_key=True,
        default=uuid.uuid4
    )
    machine_id: Mapped[uuid.UUID] = mapped_column(
        UUIDType,
        ForeignKey("machines.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )
    product_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)

    qty: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_cost_cents: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    payment_method: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    source: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)

    occurred_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
        index=True
    )

    # Relationships
    machine: Mapped["Machine"] = relationship("Machine", back_populates="sales")

    @property
    def line_total_cents(self) -> int:
        return self.qty * self.unit_price_cents

    def __repr__(self) -> str:
        return f"<Sale(machine={self.machine_id}, qty={self.qty}, price={self.unit_price_cents})>"
