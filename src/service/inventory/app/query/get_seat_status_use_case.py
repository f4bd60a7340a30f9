from typing import Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.clock.utc_clock import Clock
from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.logging.loguru_io import Logger
from src.service.inventory.domain.enum.inventory_status import SeatStatus
from src.service.inventory.domain.inventory_errors import SeatNotFoundError
from src.service.inventory.domain.value_object.sellable_unit import SeatRef


class GetSeatStatusUseCase:
    """Status as of now: a HELD seat whose hold window closed reads AVAILABLE"""

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
    async def get_seat_status(self, *, event_id: UUID, seat_ref: SeatRef) -> SeatStatus:
        async with self.uow_factory() as uow:
            status = await uow.inventory_store.get_seat_status(
                event_id=event_id, seat_ref=seat_ref, now=self.clock()
            )
        if status is None:
            raise SeatNotFoundError(f'Seat {seat_ref} not found')
        return status
