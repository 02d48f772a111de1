from fastapi import APIRouter

from vendops.api.v1.endpoints import (
    # Operational records
    locations,
    machines,
    sales,
    # Commission engine, reports & payouts
    commissions,
)

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(locations.router, prefix="/locations", tags=["Locations"])
api_router.include_router(machines.router, prefix="/machines", tags=["Machines"])
api_router.include_router(sales.router, prefix="/sales", tags=["Sales"])
api_router.include_router(commissions.router, prefix="/commissions", tags=["Commissions"])
