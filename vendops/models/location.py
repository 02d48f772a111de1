"""Location model: a partner site that hosts machines and earns commission."""
import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional, List

from sqlalchemy import String, DateTime, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vendops.database import Base
from vendops.db_types import UUIDType
from vendops.services.commission_engine import CommissionModel

if TYPE_CHECKING:
    from vendops.models.machine import Machine


class Location(Base):
    """
    Location with its commission terms.

    commission_model is kept as a plain string column so that values written
    by other tools survive a read; the engine decides what an unknown tag means.
    """
    __tablename__ = "locations"

    id: Mapped[uuid.UUID] = mapped_column(
        UUIDType,
        primary_key=True,
        default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)

    # Address
    address_line1: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    address_line2: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    state: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    postal_code: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    # Contact
    contact_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    contact_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    contact_phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)

    # Commission terms
    commission_model: Mapped[Optional[str]] = mapped_column(
        String(30),
        nullable=True,
        default=CommissionModel.NONE.value,
        index=True,
        comment="none, percent_gross, flat_month or hybrid"
    )
    commission_pct_bps: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        comment="Basis points of gross revenue"
    )
    commission_flat_cents: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        comment="Flat monthly fee in cents"
    )
    commission_min_cents: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        comment="Minimum monthly commission in cents"
    )
    commission_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Timestamps
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
    machines: Mapped[List["Machine"]] = relationship(
        "Machine",
        back_populates="location"
    )

    @property
    def has_commission(self) -> bool:
        """Locations on the 'none' model (or with no model) are left out of commission reports."""
        return self.commission_model not in (None, CommissionModel.NONE.value)

    def __repr__(self) -> str:
        return f"<Location(name='{self.name}', model='{self.commission_model}')>"
