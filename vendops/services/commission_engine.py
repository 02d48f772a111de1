"""Commission engine for location partner payouts.

Computes the commission owed to a location's partner for a reporting
window. Supported calculation models:
- percent_gross: basis points of gross revenue
- flat_month: flat monthly fee pro-rated by window length
- hybrid: percent_gross + flat_month
- minimum floor: pro-rated monthly minimum applied after any model

Monthly figures are pro-rated linearly against a 30-day month, regardless
of the calendar month the window falls in.

Amounts are Decimal dollars and are never rounded here; rounding to cents
belongs to presentation (schemas, CSV export).
"""
import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

logger = logging.getLogger(__name__)


class CommissionModel(str, Enum):
    """Commission model stored on a location."""
    NONE = "none"
    PERCENT_GROSS = "percent_gross"
    FLAT_MONTH = "flat_month"
    HYBRID = "hybrid"


# Canonical month length for pro-rating monthly fees and floors
PRORATION_DAYS = 30

BPS_DIVISOR = Decimal("10000")
CENTS_PER_DOLLAR = Decimal("100")
ZERO = Decimal("0")


# ==================== Policies ====================

@dataclass(frozen=True)
class NoCommission:
    """No commission component."""


@dataclass(frozen=True)
class PercentGross:
    bps: int = 0


@dataclass(frozen=True)
class FlatMonth:
    cents: int = 0


@dataclass(frozen=True)
class Hybrid:
    bps: int = 0
    cents: int = 0


@dataclass(frozen=True)
class WithFloor:
    """Wraps a base policy with a pro-rated monthly minimum."""
    policy: "CommissionPolicy"
    min_cents: int = 0


CommissionPolicy = Union[NoCommission, PercentGross, FlatMonth, Hybrid, WithFloor]


@dataclass(frozen=True)
class CommissionConfig:
    """Commission terms as stored on a location. Every field may be null."""
    commission_model: Optional[str] = None
    commission_pct_bps: Optional[int] = None
    commission_flat_cents: Optional[int] = None
    commission_min_cents: Optional[int] = None

    @classmethod
    def from_record(cls, record) -> "CommissionConfig":
        """Read the four commission attributes off a location-like object."""
        return cls(
            commission_model=record.commission_model,
            commission_pct_bps=record.commission_pct_bps,
            commission_flat_cents=record.commission_flat_cents,
            commission_min_cents=record.commission_min_cents,
        )


def _to_decimal(value: Union[Decimal, int, float, str, None]) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        # str() keeps 1000.1 as 1000.1 instead of its binary expansion
        return Decimal(str(value))
    return Decimal(value)


def policy_from_config(
    model: Union[CommissionConfig, str, None],
    pct_bps: Optional[int] = None,
    flat_cents: Optional[int] = None,
    min_cents: Optional[int] = None,
) -> CommissionPolicy:
    """
    Build a policy from the stored location columns.

    Accepts either a CommissionConfig or the four values separately.
    Null numeric columns count as zero. An unrecognized model contributes
    nothing, but a configured minimum still applies to it.
    """
    if isinstance(model, CommissionConfig):
        model, pct_bps, flat_cents, min_cents = (
            model.commission_model,
            model.commission_pct_bps,
            model.commission_flat_cents,
            model.commission_min_cents,
        )

    pct_bps = pct_bps or 0
    flat_cents = flat_cents or 0
    min_cents = min_cents or 0

    try:
        commission_model = CommissionModel(model) if model is not None else CommissionModel.NONE
    except ValueError:
        logger.warning(f"Unrecognized commission model '{model}', treating base commission as zero")
        commission_model = None

    if commission_model == CommissionModel.PERCENT_GROSS:
        base: CommissionPolicy = PercentGross(bps=pct_bps)
    elif commission_model == CommissionModel.FLAT_MONTH:
        base = FlatMonth(cents=flat_cents)
    elif commission_model == CommissionModel.HYBRID:
        base = Hybrid(bps=pct_bps, cents=flat_cents)
    else:
        base = NoCommission()

    if min_cents > 0:
        return WithFloor(policy=base, min_cents=min_cents)
    return base


def prorate_monthly(cents: Optional[int], window_days: int) -> Decimal:
    """Scale a monthly amount in cents to dollars for a window of `window_days`."""
    return _to_decimal(cents) * Decimal(window_days) / (CENTS_PER_DOLLAR * PRORATION_DAYS)


def percent_of_gross(bps: Optional[int], gross_revenue) -> Decimal:
    return _to_decimal(gross_revenue) * _to_decimal(bps) / BPS_DIVISOR


def calculate_commission(
    policy: CommissionPolicy,
    gross_revenue: Union[Decimal, int, float],
    window_days: int,
) -> Decimal:
    """
    Commission in dollars owed for a window.

    Args:
        policy: Commission policy of the location
        gross_revenue: Gross sales in dollars for the window
        window_days: Number of calendar days the window covers

    Returns:
        Unrounded commission amount in dollars
    """
    if isinstance(policy, WithFloor):
        amount = calculate_commission(policy.policy, gross_revenue, window_days)
        floor = prorate_monthly(policy.min_cents, window_days)
        if floor > 0 and amount < floor:
            return floor
        return amount

    if isinstance(policy, PercentGross):
        return percent_of_gross(policy.bps, gross_revenue)

    if isinstance(policy, FlatMonth):
        return prorate_monthly(policy.cents, window_days)

    if isinstance(policy, Hybrid):
        return percent_of_gross(policy.bps, gross_revenue) + prorate_monthly(policy.cents, window_days)

    if isinstance(policy, NoCommission):
        return ZERO

    raise TypeError(f"Unsupported commission policy: {policy!r}")


def compute_commission_amount(
    commission_model: Optional[str],
    commission_pct_bps: Optional[int],
    commission_flat_cents: Optional[int],
    commission_min_cents: Optional[int],
    gross_revenue: Union[Decimal, int, float],
    window_days: int,
) -> Decimal:
    """Flat-argument form: parse the stored columns, then calculate."""
    policy = policy_from_config(
        commission_model,
        commission_pct_bps,
        commission_flat_cents,
        commission_min_cents,
    )
    return calculate_commission(policy, gross_revenue, window_days)
