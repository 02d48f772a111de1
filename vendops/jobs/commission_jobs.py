"""
Commission Payout Job.

Snapshots the previous full calendar month into commission payouts so
partners can be paid against a fixed amount.

Triggers:
- Monthly scheduled job (via APScheduler)
"""
import logging
from datetime import date, datetime, timezone
from typing import Dict, Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from vendops.core.periods import resolve_window
from vendops.services.commission_service import CommissionService

logger = logging.getLogger(__name__)


async def run_monthly_payouts_job(db: AsyncSession, today: Optional[date] = None) -> Dict[str, Any]:
    """
    Generate payouts for last month.

    Returns:
        Summary of the window and payouts written
    """
    started_at = datetime.now(timezone.utc)
    window = resolve_window("last_month", today=today)
    logger.info(f"Starting commission payout job for {window.label}...")

    service = CommissionService(db)
    payouts = await service.generate_payouts(window, notes=f"Auto-generated for {window.label}")

    return {
        "started_at": started_at.isoformat(),
        "period_start": window.start_date.isoformat(),
        "period_end": window.end_date.isoformat(),
        "payouts": len(payouts),
        "total_amount": float(sum(p.amount for p in payouts)),
    }
