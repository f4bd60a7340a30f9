"""
Void Ticket Use Case (refund)

Flow:
1. VOID ticket -> return it (repeated refunds are no-ops)
2. Compare-and-set VALID -> VOID
3. Give the unit back:
   - seat: RESERVED -> AVAILABLE
   - staff-sold tier ticket on an active allocation: sold -> staff pool,
     allocation tickets_sold -= 1
   - any other tier ticket: sold -= 1
4. After commit, offer freed public tier units to the waitlist
"""

from typing import Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.clock.utc_clock import Clock
from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork, UnitOfWorkFactory
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.inventory_metrics import metrics
from src.service.inventory.app.interface.i_inventory_release_notifier import (
    IInventoryReleaseNotifier,
)
from src.service.inventory.domain.entity.ticket_entity import Ticket
from src.service.inventory.domain.enum.inventory_status import TicketStatus
from src.service.inventory.domain.enum.unit_kind import UnitKind
from src.service.inventory.domain.inventory_errors import (
    InvalidTicketTransitionError,
    InventoryConflictError,
    TicketNotFoundError,
)
from src.service.inventory.domain.value_object.sellable_unit import TierUnit


class VoidTicketUseCase:
    def __init__(
        self,
        *,
        uow_factory: UnitOfWorkFactory,
        release_notifier: IInventoryReleaseNotifier,
        clock: Clock,
    ) -> None:
        self.uow_factory = uow_factory
        self.release_notifier = release_notifier
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
        release_notifier: IInventoryReleaseNotifier = Depends(
            Provide[Container.release_notifier]
        ),
        clock: Clock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(uow_factory=uow_factory, release_notifier=release_notifier, clock=clock)

    @Logger.io
    async def void_ticket(self, *, ticket_id: UUID) -> Ticket:
        now = self.clock()
        async with self.uow_factory() as uow:
            ticket = await uow.ticket_repo.get_by_id(ticket_id=ticket_id)
            if not ticket:
                raise TicketNotFoundError()
            if ticket.status == TicketStatus.VOID:
                return ticket

            voided = ticket.void(now)
            if not await uow.ticket_repo.transition(ticket=voided, from_status=TicketStatus.VALID):
                current = await uow.ticket_repo.get_by_id(ticket_id=ticket_id)
                if current and current.status == TicketStatus.VOID:
                    return current
                raise InvalidTicketTransitionError('Ticket changed while voiding')

            publicly_freed = await self._return_unit(uow, ticket=ticket)
            await uow.commit()

        metrics.record_ticket_voided(unit_kind=ticket.unit_kind)
        Logger.base.info(f'↩️ [VOID] Ticket {ticket.code} voided')
        if publicly_freed and ticket.tier_id:
            await self.release_notifier.notify_released(tier_id=ticket.tier_id, quantity=1)
        return voided

    async def _return_unit(self, uow: AbstractUnitOfWork, *, ticket: Ticket) -> bool:
        """Returns True when a public tier unit was freed"""
        if ticket.unit_kind == UnitKind.SEAT:
            assert ticket.seat_id is not None
            seat = await uow.inventory_store.get_seat(seat_id=ticket.seat_id)
            if not seat or not await uow.inventory_store.revert_sale(
                unit=seat.unit, hold_id=ticket.hold_id
            ):
                raise InventoryConflictError(f'Seat of ticket {ticket.code} is not reserved')
            return False

        assert ticket.tier_id is not None
        if ticket.staff_sale_id:
            sale = await uow.staff_allocation_repo.get_sale(sale_id=ticket.staff_sale_id)
            allocation = (
                await uow.staff_allocation_repo.get_by_id(allocation_id=sale.allocation_id)
                if sale
                else None
            )
            if allocation:
                if not await uow.staff_allocation_repo.return_quota(
                    allocation_id=allocation.id, quantity=1
                ):
                    raise InventoryConflictError(
                        f'Staff allocation {allocation.id} has no sales to return'
                    )
                if allocation.is_active:
                    if not await uow.inventory_store.return_sold_unit_to_staff(
                        tier_id=ticket.tier_id
                    ):
                        raise InventoryConflictError(f'Tier of ticket {ticket.code} has no sales')
                    return False

        if not await uow.inventory_store.revert_sale(
            unit=TierUnit(tier_id=ticket.tier_id), hold_id=ticket.hold_id
        ):
            raise InventoryConflictError(f'Tier of ticket {ticket.code} has no sales')
        return True
