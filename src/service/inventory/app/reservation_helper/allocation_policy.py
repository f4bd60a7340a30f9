"""
Allocation Policy

Decides which concrete units satisfy a request, and who gets scarce
inventory first:

- explicit seats: each must exist and read AVAILABLE
- section (+ row/table): lowest-ordered available seats, "best available"
- tier only: unassigned tier units
- staff: quota on the allocation decides, public availability does not
- waitlist: oldest active entry first

The policy only reads. Placement does the compare-and-set, so a unit picked
here can still be lost to a concurrent hold.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.dto.allocation_request import AllocationRequest
from src.service.inventory.domain.entity.staff_allocation_entity import StaffAllocation
from src.service.inventory.domain.entity.waitlist_entry_entity import WaitlistEntry
from src.service.inventory.domain.enum.inventory_status import SeatStatus
from src.service.inventory.domain.inventory_errors import (
    SeatNotFoundError,
    SeatUnavailableError,
    StaffAllocationNotFoundError,
)
from src.service.inventory.domain.value_object.sellable_unit import TierUnit, Unit


class AllocationPolicy:
    @Logger.io
    async def resolve(
        self, uow: AbstractUnitOfWork, *, request: AllocationRequest, now: datetime
    ) -> List[Unit]:
        if request.requested_units < 1:
            raise DomainError('Quantity must be at least 1', 400)

        if request.seats:
            if len(set(request.seats)) != len(request.seats):
                raise DomainError('The same seat was requested twice', 400)
            units: List[Unit] = []
            for seat_ref in request.seats:
                seat = await uow.inventory_store.get_seat_by_ref(
                    event_id=request.event_id, seat_ref=seat_ref
                )
                if not seat:
                    raise SeatNotFoundError(f'Seat {seat_ref} not found')
                if seat.effective_status(now) != SeatStatus.AVAILABLE:
                    raise SeatUnavailableError(f'Seat {seat_ref} is not available')
                units.append(seat.unit)
            return units

        if request.section_id:
            seats = await uow.inventory_store.find_available_seats(
                event_id=request.event_id,
                section_id=request.section_id,
                row_id=request.row_id,
                quantity=request.quantity,
                now=now,
            )
            if len(seats) < request.quantity:
                raise SeatUnavailableError(
                    f'Only {len(seats)} seats available in section {request.section_id}'
                )
            return [seat.unit for seat in seats]

        if request.tier_id:
            return [TierUnit(tier_id=request.tier_id, quantity=request.quantity)]

        raise DomainError('Request a tier, a section or explicit seats', 400)

    @Logger.io
    async def staff_allocation_for_sale(
        self, uow: AbstractUnitOfWork, *, allocation_id: UUID, quantity: int
    ) -> StaffAllocation:
        allocation = await uow.staff_allocation_repo.get_by_id(allocation_id=allocation_id)
        if not allocation:
            raise StaffAllocationNotFoundError()
        allocation.ensure_can_sell(quantity)
        return allocation

    @Logger.io
    async def next_waitlist_entry(
        self, uow: AbstractUnitOfWork, *, tier_id: UUID
    ) -> Optional[WaitlistEntry]:
        return await uow.waitlist_repo.get_oldest_active(tier_id=tier_id)
