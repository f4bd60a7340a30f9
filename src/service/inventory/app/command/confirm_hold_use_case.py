"""
Confirm Hold Use Case

Idempotent finalization: confirming a hold twice returns the same tickets.

Flow:
1. Load hold (by id, or by payment reference for gateway callbacks)
2. CONFIRMED -> return its tickets
3. Past its window -> expire it, release the units, raise HoldExpiredError
4. Otherwise finalize; if a concurrent confirm won the race, read its tickets

The tickets returned for an already CONFIRMED hold leave out codes retired by
a transfer; the reissued ticket stays on the same hold and takes their place.
"""

from datetime import datetime
from typing import List, Optional, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.clock.utc_clock import Clock
from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork, UnitOfWorkFactory
from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.interface.i_inventory_release_notifier import (
    IInventoryReleaseNotifier,
)
from src.service.inventory.app.reservation_helper.hold_release_executor import (
    HoldReleaseExecutor,
    notify_freed,
)
from src.service.inventory.app.reservation_helper.ticket_finalizer import TicketFinalizer
from src.service.inventory.domain.entity.hold_entity import Hold
from src.service.inventory.domain.entity.ticket_entity import Ticket
from src.service.inventory.domain.enum.inventory_status import HoldStatus, TicketStatus
from src.service.inventory.domain.inventory_errors import (
    HoldExpiredError,
    HoldNotActiveError,
    HoldNotFoundError,
)
from src.service.inventory.domain.value_object.sale_context import SaleContext


async def load_hold(
    uow: AbstractUnitOfWork, *, hold_id: Optional[UUID] = None, payment_ref: Optional[str] = None
) -> Hold:
    if hold_id is not None:
        hold = await uow.hold_repo.get_by_id(hold_id=hold_id)
    elif payment_ref:
        hold = await uow.hold_repo.get_by_payment_ref(payment_ref=payment_ref)
    else:
        hold = None
    if not hold:
        raise HoldNotFoundError()
    return hold


async def issued_tickets(uow: AbstractUnitOfWork, *, hold_id: UUID) -> List[Ticket]:
    """Tickets a confirm reports; codes retired by a transfer are replaced by their reissue"""
    tickets = await uow.ticket_repo.list_by_hold(hold_id=hold_id)
    return [ticket for ticket in tickets if ticket.status != TicketStatus.TRANSFERRED]


class ConfirmHoldUseCase:
    def __init__(
        self,
        *,
        uow_factory: UnitOfWorkFactory,
        finalizer: TicketFinalizer,
        release_executor: HoldReleaseExecutor,
        release_notifier: IInventoryReleaseNotifier,
        clock: Clock,
    ) -> None:
        self.uow_factory = uow_factory
        self.finalizer = finalizer
        self.release_executor = release_executor
        self.release_notifier = release_notifier
        self.clock = clock
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
        finalizer: TicketFinalizer = Depends(Provide[Container.ticket_finalizer]),
        release_executor: HoldReleaseExecutor = Depends(Provide[Container.release_executor]),
        release_notifier: IInventoryReleaseNotifier = Depends(
            Provide[Container.release_notifier]
        ),
        clock: Clock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(
            uow_factory=uow_factory,
            finalizer=finalizer,
            release_executor=release_executor,
            release_notifier=release_notifier,
            clock=clock,
        )

    @Logger.io
    async def confirm_hold(self, *, hold_id: UUID, sale_context: SaleContext) -> List[Ticket]:
        return await self._confirm(hold_id=hold_id, sale_context=sale_context)

    @Logger.io
    async def confirm_hold_by_payment_ref(
        self, *, payment_ref: str, sale_context: SaleContext
    ) -> List[Ticket]:
        return await self._confirm(payment_ref=payment_ref, sale_context=sale_context)

    async def _confirm(
        self,
        *,
        sale_context: SaleContext,
        hold_id: Optional[UUID] = None,
        payment_ref: Optional[str] = None,
    ) -> List[Ticket]:
        now = self.clock()
        with self.tracer.start_as_current_span(
            'use_case.confirm_hold',
            attributes={'hold.id': str(hold_id), 'payment_method': str(sale_context.payment_method)},
        ):
            async with self.uow_factory() as uow:
                hold = await load_hold(uow, hold_id=hold_id, payment_ref=payment_ref)

                if hold.status == HoldStatus.CONFIRMED:
                    return await issued_tickets(uow, hold_id=hold.id)
                self._ensure_not_released(hold)

                if hold.is_expired(now):
                    freed = await self.release_executor.release(
                        uow, hold=hold, reason=HoldStatus.EXPIRED, now=now
                    )
                    await uow.commit()
                else:
                    tickets = await self.finalizer.finalize(
                        uow, hold=hold, sale_context=sale_context, now=now
                    )
                    if tickets is not None:
                        await uow.commit()
                        return tickets
                    freed = None

            if freed is not None or hold.is_expired(now):
                if freed:
                    await notify_freed(self.release_notifier, freed)
                raise HoldExpiredError()

            return await self._read_winner(hold_id=hold.id, now=now)

    @staticmethod
    def _ensure_not_released(hold: Hold) -> None:
        if hold.status == HoldStatus.EXPIRED:
            raise HoldExpiredError()
        if hold.status != HoldStatus.ACTIVE:
            raise HoldNotActiveError(f'Hold is {hold.status}, cannot confirm')

    async def _read_winner(self, *, hold_id: UUID, now: datetime) -> List[Ticket]:
        """The finalize compare-and-set lost: report whatever the winner did"""
        async with self.uow_factory() as uow:
            hold = await load_hold(uow, hold_id=hold_id)
            if hold.status == HoldStatus.CONFIRMED:
                return await issued_tickets(uow, hold_id=hold.id)
        self._ensure_not_released(hold)
        # Still ACTIVE, so the guard failed on expiry
        raise HoldExpiredError()
