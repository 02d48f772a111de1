"""API endpoints for sale lines."""
from datetime import date, datetime, timezone
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, HTTPException, status, Query
from sqlalchemy import select, func, and_

from vendops.api.deps import DB, window_from_params
from vendops.models.machine import Machine
from vendops.models.sale import Sale
from vendops.schemas.sale import SaleCreate, SaleResponse, SaleListResponse

router = APIRouter()


def _as_utc(value: Optional[datetime]) -> datetime:
    """Sales are stored in UTC; naive timestamps are taken to be UTC already."""
    if value is None:
        return datetime.now(timezone.utc)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@router.post("", response_model=SaleResponse, status_code=status.HTTP_201_CREATED)
async def create_sale(sale_in: SaleCreate, db: DB):
    """Record a sale line against a machine."""
    machine = await db.get(Machine, sale_in.machine_id)
    if not machine:
        raise HTTPException(status_code=404, detail="Machine not found")

    data = sale_in.model_dump()
    data["occurred_at"] = _as_utc(sale_in.occurred_at)

    sale = Sale(**data)
    db.add(sale)
    await db.commit()
    await db.refresh(sale)

    return sale


@router.get("", response_model=SaleListResponse)
async def list_sales(
    db: DB,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    machine_id: Optional[UUID] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
):
    """List sale lines, newest first. Dates are inclusive."""
    filters = []
    if machine_id:
        filters.append(Sale.machine_id == machine_id)
    if start_date or end_date:
        window = window_from_params(None, start_date, end_date)
        filters.append(Sale.occurred_at >= window.start)
        filters.append(Sale.occurred_at < window.end)

    query = select(Sale)
    count_query = select(func.count(Sale.id))
    if filters:
        query = query.where(and_(*filters))
        count_query = count_query.where(and_(*filters))

    total_result = await db.execute(count_query)
    total = total_result.scalar() or 0

    query = query.order_by(Sale.occurred_at.desc()).offset(skip).limit(limit)
    result = await db.execute(query)

    return SaleListResponse(
        items=[SaleResponse.model_validate(s) for s in result.scalars().all()],
        total=total,
        skip=skip,
        limit=limit,
    )


@router.delete("/{sale_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_sale(sale_id: UUID, db: DB):
    """Delete a sale line."""
    sale = await db.get(Sale, sale_id)
    if not sale:
        raise HTTPException(status_code=404, detail="Sale not found")

    await db.delete(sale)
    await db.commit()
