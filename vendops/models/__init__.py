"""SQLAlchemy models. Importing this package registers every table on Base.metadata."""
from vendops.models.location import Location
from vendops.models.machine import Machine
from vendops.models.sale import Sale
from vendops.models.commission import CommissionPayout

__all__ = [
    "Location",
    "Machine",
    "Sale",
    "CommissionPayout",
]
