"""API endpoints for locations and their commission terms."""
import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, HTTPException, status, Query
from sqlalchemy import select, func, and_

from vendops.api.deps import DB
from vendops.models.location import Location
from vendops.models.machine import Machine
from vendops.schemas.location import (
    LocationCreate, LocationUpdate, LocationResponse, LocationListResponse,
)
from vendops.services.commission_engine import CommissionModel

logger = logging.getLogger(__name__)

router = APIRouter()


async def _get_location_or_404(db, location_id: UUID) -> Location:
    result = await db.execute(select(Location).where(Location.id == location_id))
    location = result.scalar_one_or_none()
    if not location:
        raise HTTPException(status_code=404, detail="Location not found")
    return location


@router.post("", response_model=LocationResponse, status_code=status.HTTP_201_CREATED)
async def create_location(location_in: LocationCreate, db: DB):
    """Create a location with its commission terms."""
    location = Location(**location_in.model_dump())

    db.add(location)
    await db.commit()
    await db.refresh(location)

    return location


@router.get("", response_model=LocationListResponse)
async def list_locations(
    db: DB,
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    commission_model: Optional[CommissionModel] = None,
    search: Optional[str] = Query(None, min_length=1),
):
    """List locations, optionally filtered by commission model or name."""
    query = select(Location)
    count_query = select(func.count(Location.id))

    filters = []
    if commission_model:
        filters.append(Location.commission_model == commission_model.value)
    if search:
        filters.append(Location.name.ilike(f"%{search}%"))

    if filters:
        query = query.where(and_(*filters))
        count_query = count_query.where(and_(*filters))

    total_result = await db.execute(count_query)
    total = total_result.scalar() or 0

    query = query.order_by(Location.name).offset(skip).limit(limit)
    result = await db.execute(query)
    locations = result.scalars().all()

    return LocationListResponse(
        items=[LocationResponse.model_validate(loc) for loc in locations],
        total=total,
        skip=skip,
        limit=limit,
    )


@router.get("/{location_id}", response_model=LocationResponse)
async def get_location(location_id: UUID, db: DB):
    """Get location by ID."""
    return await _get_location_or_404(db, location_id)


@router.put("/{location_id}", response_model=LocationResponse)
async def update_location(location_id: UUID, location_in: LocationUpdate, db: DB):
    """Update location fields, including commission terms."""
    location = await _get_location_or_404(db, location_id)

    update_data = location_in.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(location, field, value)

    await db.commit()
    await db.refresh(location)

    return location


@router.delete("/{location_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_location(location_id: UUID, db: DB):
    """Delete a location. Fails while machines are still placed there."""
    location = await _get_location_or_404(db, location_id)

    machine_count_result = await db.execute(
        select(func.count(Machine.id)).where(Machine.location_id == location_id)
    )
    machine_count = machine_count_result.scalar() or 0
    if machine_count:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Location has {machine_count} machine(s) assigned; move them first"
        )

    await db.delete(location)
    await db.commit()
    logger.info(f"Deleted location {location_id}")
