from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.clock.utc_clock import Clock
from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.logging.loguru_io import Logger
from src.service.inventory.domain.entity.ticket_entity import Ticket
from src.service.inventory.domain.enum.inventory_status import TicketStatus
from src.service.inventory.domain.inventory_errors import (
    InvalidTicketTransitionError,
    TicketNotFoundError,
)


class ScanTicketUseCase:
    """Door check-in: VALID -> USED, a second scan of the same code is rejected"""

    def __init__(self, *, uow_factory: UnitOfWorkFactory, clock: Clock) -> None:
        self.uow_factory = uow_factory
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
        clock: Clock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(uow_factory=uow_factory, clock=clock)

    @Logger.io
    async def scan_ticket(self, *, code: str) -> Ticket:
        async with self.uow_factory() as uow:
            ticket = await uow.ticket_repo.get_by_code(code=code)
            if not ticket:
                raise TicketNotFoundError()

            used = ticket.mark_used(self.clock())
            if not await uow.ticket_repo.transition(ticket=used, from_status=TicketStatus.VALID):
                raise InvalidTicketTransitionError('Ticket has already been used')
            await uow.commit()

        Logger.base.info(f'🚪 [SCAN] Ticket {ticket.code} admitted')
        return used
