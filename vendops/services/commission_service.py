"""Commission reporting and payout service.

Joins sales to machines to locations for a reporting window, runs the
commission engine per location and aggregates the results:
- per-location rows sorted by commission owed
- summary KPIs (totals, average rate, locations with commission due)
- CSV export of the report
- payout snapshots that can be tracked until paid
"""
import csv
import io
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import select, func, and_, delete
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from vendops.core.periods import ReportingWindow
from vendops.models.commission import CommissionPayout
from vendops.models.location import Location
from vendops.models.machine import Machine
from vendops.models.sale import Sale
from vendops.schemas.base import to_cents
from vendops.services.commission_engine import (
    CommissionConfig,
    CommissionModel,
    CENTS_PER_DOLLAR,
    ZERO,
    calculate_commission,
    policy_from_config,
)

logger = logging.getLogger(__name__)


STATUS_DUE = "Due"
STATUS_NONE = "None"
UNKNOWN_LOCATION_NAME = "Unknown Location"

MODEL_LABELS = {
    CommissionModel.PERCENT_GROSS.value: "% of Gross",
    CommissionModel.FLAT_MONTH.value: "Flat Monthly",
    CommissionModel.HYBRID.value: "Hybrid",
}


class PayoutNotFoundError(Exception):
    """Raised when a payout id does not exist."""


class PayoutAlreadyPaidError(Exception):
    """Raised when marking a payout that is already paid."""


@dataclass
class CommissionRow:
    location_id: uuid.UUID
    location_name: str
    commission_model: str
    commission_pct_bps: int
    commission_flat_cents: int
    commission_min_cents: int
    gross_revenue: Decimal
    commission_amount: Decimal

    @property
    def status(self) -> str:
        return STATUS_DUE if self.commission_amount > 0 else STATUS_NONE


@dataclass
class CommissionSummary:
    total_commissions: Decimal = ZERO
    total_revenue: Decimal = ZERO
    avg_commission_rate: Decimal = ZERO
    locations_with_commissions: int = 0
    total_locations: int = 0


@dataclass
class CommissionReport:
    window: ReportingWindow
    rows: List[CommissionRow] = field(default_factory=list)
    summary: CommissionSummary = field(default_factory=CommissionSummary)


def model_label(model: Optional[str]) -> str:
    return MODEL_LABELS.get(model or "", "None")


def is_commissionable(model: Optional[str]) -> bool:
    return model not in (None, CommissionModel.NONE.value)


def build_commission_rows(
    locations: Iterable[Location],
    gross_by_location: Dict[uuid.UUID, Decimal],
    window_days: int,
) -> List[CommissionRow]:
    """
    Run the engine for every commissionable location.

    Locations on the 'none' model are dropped entirely. Locations without
    sales in the window still get a row, since flat fees and minimums apply
    regardless of revenue.
    """
    rows = []
    for location in locations:
        if not is_commissionable(location.commission_model):
            continue

        config = CommissionConfig.from_record(location)
        gross = gross_by_location.get(location.id, ZERO)
        amount = calculate_commission(policy_from_config(config), gross, window_days)

        rows.append(CommissionRow(
            location_id=location.id,
            location_name=location.name or UNKNOWN_LOCATION_NAME,
            commission_model=config.commission_model,
            commission_pct_bps=config.commission_pct_bps or 0,
            commission_flat_cents=config.commission_flat_cents or 0,
            commission_min_cents=config.commission_min_cents or 0,
            gross_revenue=gross,
            commission_amount=amount,
        ))

    rows.sort(key=lambda r: (-r.commission_amount, r.location_name))
    return rows


def summarize_commissions(rows: List[CommissionRow]) -> CommissionSummary:
    total_commissions = sum((r.commission_amount for r in rows), ZERO)
    total_revenue = sum((r.gross_revenue for r in rows), ZERO)
    avg_rate = total_commissions / total_revenue if total_revenue > 0 else ZERO

    return CommissionSummary(
        total_commissions=total_commissions,
        total_revenue=total_revenue,
        avg_commission_rate=avg_rate,
        locations_with_commissions=sum(1 for r in rows if r.commission_amount > 0),
        total_locations=len(rows),
    )


def _fmt(value: Decimal) -> str:
    return str(to_cents(value))


def render_commission_csv(report: CommissionReport) -> str:
    """CSV text of a report with a trailing TOTALS line."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    label = report.window.label

    writer.writerow([
        "Location", "Model", "% (bps)", "Flat/mo", "Min/mo",
        "Gross Revenue", "Commission Due", "Status", "Period",
    ])
    for row in report.rows:
        writer.writerow([
            row.location_name,
            model_label(row.commission_model),
            row.commission_pct_bps,
            _fmt(Decimal(row.commission_flat_cents) / CENTS_PER_DOLLAR),
            _fmt(Decimal(row.commission_min_cents) / CENTS_PER_DOLLAR),
            _fmt(row.gross_revenue),
            _fmt(row.commission_amount),
            row.status,
            label,
        ])
    writer.writerow([
        "TOTALS", "", "", "", "",
        _fmt(report.summary.total_revenue),
        _fmt(report.summary.total_commissions),
        "",
        label,
    ])
    return buffer.getvalue()


class CommissionService:
    """Service for commission reports and payouts."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ==================== REPORT ====================

    async def get_commissionable_locations(self) -> List[Location]:
        result = await self.db.execute(
            select(Location)
            .where(
                and_(
                    Location.commission_model.is_not(None),
                    Location.commission_model != CommissionModel.NONE.value,
                )
            )
            .order_by(Location.name)
        )
        return list(result.scalars().all())

    async def gross_revenue_by_location(self, window: ReportingWindow) -> Dict[uuid.UUID, Decimal]:
        """
        Gross revenue in dollars per location for sales in [start, end).
        Sales on machines that are not placed at a location are ignored.
        """
        stmt = (
            select(
                Machine.location_id,
                func.sum(Sale.qty * Sale.unit_price_cents).label("gross_cents"),
            )
            .join(Machine, Sale.machine_id == Machine.id)
            .where(
                and_(
                    Sale.occurred_at >= window.start,
                    Sale.occurred_at < window.end,
                    Machine.location_id.is_not(None),
                )
            )
            .group_by(Machine.location_id)
        )
        result = await self.db.execute(stmt)

        return {
            location_id: Decimal(int(gross_cents or 0)) / CENTS_PER_DOLLAR
            for location_id, gross_cents in result.all()
        }

    async def get_commission_report(self, window: ReportingWindow) -> CommissionReport:
        locations = await self.get_commissionable_locations()
        gross_by_location = await self.gross_revenue_by_location(window)

        rows = build_commission_rows(locations, gross_by_location, window.window_days)
        summary = summarize_commissions(rows)

        logger.debug(
            f"Commission report {window.label}: {summary.total_locations} locations, "
            f"{summary.total_commissions} owed"
        )
        return CommissionReport(window=window, rows=rows, summary=summary)

    async def export_commission_csv(self, window: ReportingWindow) -> str:
        report = await self.get_commission_report(window)
        return render_commission_csv(report)

    # ==================== PAYOUTS ====================

    async def generate_payouts(
        self,
        window: ReportingWindow,
        notes: Optional[str] = None,
    ) -> List[CommissionPayout]:
        """
        Snapshot the report for a window into payouts.

        Only rows with commission due are recorded. Each row is upserted on
        (location, period): unpaid payouts are recalculated, paid ones are
        left alone. Unpaid payouts for locations that no longer owe anything
        in the window are removed.
        """
        report = await self.get_commission_report(window)
        now = datetime.now(timezone.utc)
        due_rows = [row for row in report.rows if row.commission_amount > 0]
        insert = self._dialect_insert()
        payouts = []

        for row in due_rows:
            stmt = insert(CommissionPayout).values([{
                "id": uuid.uuid4(),
                "location_id": row.location_id,
                "period_start": window.start_date,
                "period_end": window.end_date,
                "window_days": window.window_days,
                "commission_model": row.commission_model,
                "gross_revenue": to_cents(row.gross_revenue),
                "amount": to_cents(row.commission_amount),
                "paid": False,
                "notes": notes,
                "calculated_at": now,
                "created_at": now,
                "updated_at": now,
            }])
            refreshed = {
                "window_days": stmt.excluded.window_days,
                "commission_model": stmt.excluded.commission_model,
                "gross_revenue": stmt.excluded.gross_revenue,
                "amount": stmt.excluded.amount,
                "calculated_at": stmt.excluded.calculated_at,
                "updated_at": stmt.excluded.updated_at,
            }
            if notes is not None:
                refreshed["notes"] = stmt.excluded.notes
            stmt = stmt.on_conflict_do_update(
                index_elements=[
                    CommissionPayout.location_id,
                    CommissionPayout.period_start,
                    CommissionPayout.period_end,
                ],
                set_=refreshed,
                where=CommissionPayout.paid.is_(False),
            )

            # No row comes back when the existing payout is already paid
            result = await self.db.scalars(
                stmt.returning(CommissionPayout),
                execution_options={"populate_existing": True},
            )
            payout = result.one_or_none()
            if payout is not None:
                payouts.append(payout)

        stale = await self.db.execute(
            delete(CommissionPayout)
            .where(
                and_(
                    CommissionPayout.period_start == window.start_date,
                    CommissionPayout.period_end == window.end_date,
                    CommissionPayout.paid.is_(False),
                    CommissionPayout.location_id.not_in([row.location_id for row in due_rows]),
                )
            )
            .execution_options(synchronize_session="fetch")
        )

        logger.info(
            f"Generated {len(payouts)} commission payouts for {window.label} "
            f"({len(due_rows) - len(payouts)} already paid, {stale.rowcount} stale removed)"
        )
        return payouts

    def _dialect_insert(self):
        if self.db.get_bind().dialect.name == "sqlite":
            return sqlite_insert
        return pg_insert


    async def list_payouts(
        self,
        location_id: Optional[uuid.UUID] = None,
        paid: Optional[bool] = None,
        skip: int = 0,
        limit: int = 50,
    ) -> Tuple[List[CommissionPayout], int]:
        filters = []
        if location_id:
            filters.append(CommissionPayout.location_id == location_id)
        if paid is not None:
            filters.append(CommissionPayout.paid == paid)

        query = select(CommissionPayout)
        count_query = select(func.count(CommissionPayout.id))
        if filters:
            query = query.where(and_(*filters))
            count_query = count_query.where(and_(*filters))

        total_result = await self.db.execute(count_query)
        total = total_result.scalar() or 0

        query = query.order_by(
            CommissionPayout.period_start.desc(),
            CommissionPayout.amount.desc(),
        ).offset(skip).limit(limit)
        result = await self.db.execute(query)

        return list(result.scalars().all()), total

    async def mark_payout_paid(
        self,
        payout_id: uuid.UUID,
        paid_at: Optional[datetime] = None,
    ) -> CommissionPayout:
        result = await self.db.execute(
            select(CommissionPayout).where(CommissionPayout.id == payout_id)
        )
        payout = result.scalar_one_or_none()

        if payout is None:
            raise PayoutNotFoundError(f"Commission payout {payout_id} not found")
        if payout.paid:
            raise PayoutAlreadyPaidError(f"Commission payout {payout_id} is already paid")

        payout.paid = True
        payout.paid_at = paid_at or datetime.now(timezone.utc)
        await self.db.flush()

        logger.info(f"Commission payout {payout_id} marked paid ({payout.amount})")
        return payout
