from typing import Optional, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.clock.utc_clock import Clock
from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.service.inventory.domain.entity.ticket_entity import Ticket
from src.service.inventory.domain.enum.inventory_status import TicketStatus
from src.service.inventory.domain.inventory_errors import (
    InvalidTicketTransitionError,
    TicketNotFoundError,
)


class TransferTicketUseCase:
    """
    Retires the ticket (VALID -> TRANSFERRED) and issues a new code on the
    same unit for the recipient. The old code stops scanning. Inventory
    counters do not move.
    """

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
    async def transfer_ticket(
        self,
        *,
        ticket_id: UUID,
        recipient_name: Optional[str],
        recipient_email: Optional[str],
        recipient_id: Optional[str] = None,
    ) -> Ticket:
        if not (recipient_name or recipient_email or recipient_id):
            raise DomainError('Transfer needs a recipient', 400)

        async with self.uow_factory() as uow:
            ticket = await uow.ticket_repo.get_by_id(ticket_id=ticket_id)
            if not ticket:
                raise TicketNotFoundError()

            retired, reissued = ticket.transfer_to(
                now=self.clock(),
                attendee_name=recipient_name,
                attendee_email=recipient_email,
                attendee_id=recipient_id,
            )
            # Retire first: one VALID ticket per seat at a time
            if not await uow.ticket_repo.transition(ticket=retired, from_status=TicketStatus.VALID):
                raise InvalidTicketTransitionError('Ticket changed while transferring')
            await uow.ticket_repo.create_many(tickets=[reissued])
            await uow.commit()

        Logger.base.info(f'🔁 [TRANSFER] Ticket {ticket.code} -> {reissued.code}')
        return reissued
