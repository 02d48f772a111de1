"""
Base Schema Classes for Pydantic Models

RULE: All response schemas that use `from_attributes=True` MUST inherit from BaseResponseSchema.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from pydantic import BaseModel, ConfigDict


CENT = Decimal("0.01")


def to_cents(value: Decimal) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def money(value: Optional[Decimal]) -> float:
    """Round a dollar amount to cents for presentation."""
    if value is None:
        return 0.0
    return float(to_cents(value))


class BaseResponseSchema(BaseModel):
    """
    Base class for all response schemas that read from ORM models.

    Usage:
        class MachineResponse(BaseResponseSchema):
            id: UUID
            name: str
            location_id: Optional[UUID] = None
    """
    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
    )


class BaseCreateSchema(BaseModel):
    """
    Base class for create/input schemas.

    Enum fields are dumped as their plain values so they can be written
    straight into string columns.
    """
    model_config = ConfigDict(
        extra='ignore',
        use_enum_values=True,
        validate_default=True,
    )


class BaseUpdateSchema(BaseModel):
    """
    Base class for update/patch schemas.

    All fields are optional by default for partial updates.
    """
    model_config = ConfigDict(
        extra='ignore',
        use_enum_values=True,
    )
