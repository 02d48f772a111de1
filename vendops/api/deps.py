from typing import Annotated, Optional
from datetime import date

from fastapi import Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from vendops.config import settings
from vendops.core.periods import ReportingWindow, resolve_window, custom_window
from vendops.database import get_db


def get_reporting_window(
    period: Optional[str] = Query(None, description="Period key, e.g. last_30_days or last_month"),
    start_date: Optional[date] = Query(None, description="Custom window start (inclusive)"),
    end_date: Optional[date] = Query(None, description="Custom window end (inclusive)"),
) -> ReportingWindow:
    """
    Dependency resolving the reporting window from query parameters.

    Explicit dates win over a period key; with neither, the configured
    default period is used.
    """
    return window_from_params(period, start_date, end_date)


def window_from_params(
    period: Optional[str],
    start_date: Optional[date],
    end_date: Optional[date],
) -> ReportingWindow:
    try:
        if start_date or end_date:
            if not (start_date and end_date):
                raise ValueError("start_date and end_date must be given together")
            return custom_window(start_date, end_date)
        return resolve_window(period or settings.DEFAULT_REPORT_PERIOD)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )


# Type aliases for cleaner endpoint signatures
DB = Annotated[AsyncSession, Depends(get_db)]
Window = Annotated[ReportingWindow, Depends(get_reporting_window)]
