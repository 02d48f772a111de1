"""Vending machine model."""
import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional, List

from sqlalchemy import String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vendops.database import Base
from vendops.db_types import UUIDType

if TYPE_CHECKING:
    from vendops.models.location import Location
    from vendops.models.sale import Sale


class Machine(Base):
    """A vending machine, optionally placed at a location."""
    __tablename__ = "machines"

    id: Mapped[uuid.UUID] = mapped_column(
        UUIDType,
        primary_key=True,
        default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    serial_number: Mapped[Optional[str]] = mapped_column(
        String(100),
        unique=True,
        nullable=True
    )
    manufacturer: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    status: Mapped[str] = mapped_column(String(30), default="ACTIVE", nullable=False)

    location_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUIDType,
        ForeignKey("locations.id", ondelete="RESTRICT"),
        nullable=True,
        index=True
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
    location: Mapped[Optional["Location"]] = relationship(
        "Location",
        back_populates="machines"
    )
    sales: Mapped[List["Sale"]] = relationship(
        "Sale",
        back_populates="machine"
    )

    def __repr__(self) -> str:
        return f"<Machine(name='{self.name}', serial='{self.serial_number}')>"
