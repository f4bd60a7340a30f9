"""
Database Models

Import all models here to ensure they are registered with SQLAlchemy
"""

from src.service.inventory.driven_adapter.model.hold_model import HoldItemModel, HoldModel
from src.service.inventory.driven_adapter.model.seat_model import SeatModel
from src.service.inventory.driven_adapter.model.staff_allocation_model import (
    StaffAllocationModel,
    StaffSaleModel,
)
from src.service.inventory.driven_adapter.model.ticket_model import TicketModel
from src.service.inventory.driven_adapter.model.ticket_tier_model import TicketTierModel
from src.service.inventory.driven_adapter.model.waitlist_entry_model import WaitlistEntryModel

__all__ = [
    'HoldItemModel',
    'HoldModel',
    'SeatModel',
    'StaffAllocationModel',
    'StaffSaleModel',
    'TicketModel',
    'TicketTierModel',
    'WaitlistEntryModel',
]
