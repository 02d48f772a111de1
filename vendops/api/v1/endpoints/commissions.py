"""API endpoints for commission calculation, reports and payouts."""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, HTTPException, status, Query
from fastapi.responses import Response

from vendops.api.deps import DB, Window, window_from_params
from vendops.schemas.base import money
from vendops.schemas.commission import (
    # Calculation
    CommissionCalculateRequest, CommissionCalculateResponse,
    # Report
    CommissionReportResponse, CommissionRowResponse, CommissionSummaryResponse,
    # Payouts
    CommissionPayoutGenerateRequest, CommissionPayoutMarkPaidRequest,
    CommissionPayoutResponse, CommissionPayoutListResponse,
)
from vendops.services.commission_engine import compute_commission_amount
from vendops.services.commission_service import (
    CommissionService,
    CommissionReport,
    PayoutNotFoundError,
    PayoutAlreadyPaidError,
    STATUS_DUE,
    STATUS_NONE,
)

router = APIRouter()


def _report_response(report: CommissionReport) -> CommissionReportResponse:
    summary = report.summary
    return CommissionReportResponse(
        period_label=report.window.label,
        start_date=report.window.start_date,
        end_date=report.window.end_date,
        window_days=report.window.window_days,
        summary=CommissionSummaryResponse(
            total_commissions=money(summary.total_commissions),
            total_revenue=money(summary.total_revenue),
            avg_commission_rate=float(summary.avg_commission_rate),
            avg_commission_rate_pct=round(float(summary.avg_commission_rate) * 100, 2),
            locations_with_commissions=summary.locations_with_commissions,
            total_locations=summary.total_locations,
        ),
        items=[
            CommissionRowResponse(
                location_id=row.location_id,
                location_name=row.location_name,
                commission_model=row.commission_model,
                commission_pct_bps=row.commission_pct_bps,
                commission_flat_cents=row.commission_flat_cents,
                commission_min_cents=row.commission_min_cents,
                gross_revenue=money(row.gross_revenue),
                commission_amount=money(row.commission_amount),
                status=row.status,
            )
            for row in report.rows
        ],
    )


# ==================== Calculation ====================

@router.post("/calculate", response_model=CommissionCalculateResponse)
async def calculate_commission(request: CommissionCalculateRequest):
    """
    Run the commission engine on ad hoc terms.

    Monthly flat fees and minimums are pro-rated by window_days / 30.
    """
    amount = compute_commission_amount(
        request.commission_model,
        request.commission_pct_bps,
        request.commission_flat_cents,
        request.commission_min_cents,
        request.gross_revenue,
        request.window_days,
    )
    return CommissionCalculateResponse(
        commission_model=request.commission_model,
        gross_revenue=money(request.gross_revenue),
        window_days=request.window_days,
        commission_amount=money(amount),
        status=STATUS_DUE if amount > 0 else STATUS_NONE,
    )


# ==================== Reports ====================

@router.get("/report", response_model=CommissionReportResponse)
async def get_commission_report(db: DB, window: Window):
    """
    Commission owed per location for a reporting window.

    Locations on the 'none' model are excluded. Rows are sorted by
    commission amount, highest first.
    """
    service = CommissionService(db)
    report = await service.get_commission_report(window)
    return _report_response(report)


@router.get("/report/export")
async def export_commission_report(db: DB, window: Window):
    """Download the commission report as CSV."""
    service = CommissionService(db)
    content = await service.export_commission_csv(window)
    filename = f"location_commission_{window.start_date.isoformat()}_{window.end_date.isoformat()}.csv"

    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"}
    )


# ==================== Payouts ====================

@router.post("/payouts/generate", response_model=CommissionPayoutListResponse)
async def generate_commission_payouts(payload: CommissionPayoutGenerateRequest, db: DB):
    """Snapshot a reporting window into payouts for every location with commission due."""
    window = window_from_params(payload.period, payload.start_date, payload.end_date)

    service = CommissionService(db)
    payouts = await service.generate_payouts(window, notes=payload.notes)
    await db.commit()

    return CommissionPayoutListResponse(
        items=[CommissionPayoutResponse.model_validate(p) for p in payouts],
        total=len(payouts),
        skip=0,
        limit=len(payouts),
    )


@router.get("/payouts", response_model=CommissionPayoutListResponse)
async def list_commission_payouts(
    db: DB,
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    location_id: Optional[UUID] = None,
    paid: Optional[bool] = None,
):
    """List payouts, most recent window first."""
    service = CommissionService(db)
    payouts, total = await service.list_payouts(
        location_id=location_id,
        paid=paid,
        skip=skip,
        limit=limit,
    )
    return CommissionPayoutListResponse(
        items=[CommissionPayoutResponse.model_validate(p) for p in payouts],
        total=total,
        skip=skip,
        limit=limit,
    )


@router.post("/payouts/{payout_id}/mark-paid", response_model=CommissionPayoutResponse)
async def mark_commission_payout_paid(
    payout_id: UUID,
    db: DB,
    payload: Optional[CommissionPayoutMarkPaidRequest] = None,
):
    """Mark a payout as paid."""
    service = CommissionService(db)
    try:
        payout = await service.mark_payout_paid(
            payout_id,
            paid_at=payload.paid_at if payload else None,
        )
    except PayoutNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except PayoutAlreadyPaidError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    await db.commit()
    await db.refresh(payout)
    return payout
