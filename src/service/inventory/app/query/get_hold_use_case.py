from typing import List, Self
from uuid import UUID

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.clock.utc_clock import Clock
from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.logging.loguru_io import Logger
from src.service.inventory.domain.entity.hold_entity import Hold
from src.service.inventory.domain.entity.ticket_entity import Ticket
from src.service.inventory.domain.enum.inventory_status import HoldStatus
from src.service.inventory.domain.inventory_errors import HoldNotFoundError


@attrs.frozen
class HoldView:
    hold: Hold
    status: HoldStatus  # EXPIRED once past the window, even before the sweep
    tickets: List[Ticket]


class GetHoldUseCase:
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
    async def get_hold(self, *, hold_id: UUID) -> HoldView:
        async with self.uow_factory() as uow:
            hold = await uow.hold_repo.get_by_id(hold_id=hold_id)
            if not hold:
                raise HoldNotFoundError()
            tickets = (
                await uow.ticket_repo.list_by_hold(hold_id=hold.id)
                if hold.status == HoldStatus.CONFIRMED
                else []
            )
        status = HoldStatus.EXPIRED if hold.is_expired(self.clock()) else hold.status
        return HoldView(hold=hold, status=status, tickets=tickets)
