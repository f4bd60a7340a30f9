from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.clock.utc_clock import Clock
from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import ConflictError
from src.platform.logging.loguru_io import Logger
from src.service.inventory.domain.entity.ticket_entity import Ticket
from src.service.inventory.domain.enum.inventory_status import TicketStatus
from src.service.inventory.domain.inventory_errors import TicketNotFoundError


class ClaimTicketUseCase:
    """Attach an attendee account to a ticket by its code (guest list and gifted tickets)"""

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
    async def claim_ticket(self, *, code: str, attendee_id: str) -> Ticket:
        async with self.uow_factory() as uow:
            ticket = await uow.ticket_repo.get_by_code(code=code)
            if not ticket:
                raise TicketNotFoundError()

            if ticket.attendee_id == attendee_id:
                return ticket
            claimed = ticket.claim(attendee_id=attendee_id, now=self.clock())
            if not await uow.ticket_repo.transition(ticket=claimed, from_status=TicketStatus.VALID):
                raise ConflictError('Ticket changed while claiming')
            await uow.commit()

        Logger.base.info(f'🙋 [CLAIM] Ticket {ticket.code} claimed by {attendee_id}')
        return claimed
