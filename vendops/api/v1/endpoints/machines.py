"""API endpoints for vending machines."""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, HTTPException, status, Query
from sqlalchemy import select, func

from vendops.api.deps import DB
from vendops.models.location import Location
from vendops.models.machine import Machine
from vendops.models.sale import Sale
from vendops.schemas.machine import (
    MachineCreate, MachineUpdate, MachineResponse, MachineListResponse,
)

router = APIRouter()


async def _ensure_location(db, location_id: Optional[UUID]) -> None:
    if location_id is None:
        return
    result = await db.execute(select(Location.id).where(Location.id == location_id))
    if result.scalar_one_or_none() is None:
        raise HTTPException(status_code=404, detail="Location not found")


async def _ensure_unique_serial(db, serial_number: Optional[str], exclude_id: Optional[UUID] = None) -> None:
    if not serial_number:
        return
    query = select(Machine.id).where(Machine.serial_number == serial_number)
    if exclude_id:
        query = query.where(Machine.id != exclude_id)
    result = await db.execute(query)
    if result.first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Machine with serial number '{serial_number}' already exists"
        )


@router.post("", response_model=MachineResponse, status_code=status.HTTP_201_CREATED)
async def create_machine(machine_in: MachineCreate, db: DB):
    """Register a machine, optionally placing it at a location."""
    await _ensure_location(db, machine_in.location_id)
    await _ensure_unique_serial(db, machine_in.serial_number)

    machine = Machine(**machine_in.model_dump())
    db.add(machine)
    await db.commit()
    await db.refresh(machine)

    return machine


@router.get("", response_model=MachineListResponse)
async def list_machines(
    db: DB,
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    location_id: Optional[UUID] = None,
):
    """List machines."""
    query = select(Machine)
    count_query = select(func.count(Machine.id))

    if location_id:
        query = query.where(Machine.location_id == location_id)
        count_query = count_query.where(Machine.location_id == location_id)

    total_result = await db.execute(count_query)
    total = total_result.scalar() or 0

    query = query.order_by(Machine.name).offset(skip).limit(limit)
    result = await db.execute(query)

    return MachineListResponse(
        items=[MachineResponse.model_validate(m) for m in result.scalars().all()],
        total=total,
        skip=skip,
        limit=limit,
    )


@router.get("/{machine_id}", response_model=MachineResponse)
async def get_machine(machine_id: UUID, db: DB):
    """Get machine by ID."""
    machine = await db.get(Machine, machine_id)
    if not machine:
        raise HTTPException(status_code=404, detail="Machine not found")
    return machine


@router.put("/{machine_id}", response_model=MachineResponse)
async def update_machine(machine_id: UUID, machine_in: MachineUpdate, db: DB):
    """Update a machine. Setting location_id moves it."""
    machine = await db.get(Machine, machine_id)
    if not machine:
        raise HTTPException(status_code=404, detail="Machine not found")

    update_data = machine_in.model_dump(exclude_unset=True)
    if "location_id" in update_data:
        await _ensure_location(db, update_data["location_id"])
    if "serial_number" in update_data:
        await _ensure_unique_serial(db, update_data["serial_number"], exclude_id=machine_id)

    for field, value in update_data.items():
        setattr(machine, field, value)

    await db.commit()
    await db.refresh(machine)

    return machine


@router.delete("/{machine_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_machine(machine_id: UUID, db: DB):
    """Delete a machine. Fails while it has recorded sales."""
    machine = await db.get(Machine, machine_id)
    if not machine:
        raise HTTPException(status_code=404, detail="Machine not found")

    sale_count_result = await db.execute(
        select(func.count(Sale.id)).where(Sale.machine_id == machine_id)
    )
    sale_count = sale_count_result.scalar() or 0
    if sale_count:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Machine has {sale_count} recorded sale(s); retire it by status instead"
        )

    await db.delete(machine)
    await db.commit()
