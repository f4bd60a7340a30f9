"""Application layer interfaces (Ports)"""

from src.service.inventory.app.interface.i_hold_repo import IHoldRepo
from src.service.inventory.app.interface.i_inventory_release_notifier import (
    IInventoryReleaseNotifier,
)
from src.service.inventory.app.interface.i_inventory_store import IInventoryStore
from src.service.inventory.app.interface.i_staff_allocation_repo import IStaffAllocationRepo
from src.service.inventory.app.interface.i_ticket_repo import ITicketRepo
from src.service.inventory.app.interface.i_waitlist_repo import IWaitlistRepo

__all__ = [
    'IHoldRepo',
    'IInventoryReleaseNotifier',
    'IInventoryStore',
    'IStaffAllocationRepo',
    'ITicketRepo',
    'IWaitlistRepo',
]
