from typing import Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.clock.utc_clock import Clock
from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.inventory.domain.inventory_errors import InventoryInUseError


class DeleteSeatingChartUseCase:
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
    async def delete_chart(self, *, event_id: UUID, chart_id: str) -> int:
        async with self.uow_factory() as uow:
            claimed = await uow.inventory_store.count_claimed_chart_seats(
                event_id=event_id, chart_id=chart_id, now=self.clock()
            )
            if claimed:
                raise InventoryInUseError(
                    f'Cannot delete a seating chart with {claimed} held or reserved seats'
                )
            deleted = await uow.inventory_store.delete_chart(event_id=event_id, chart_id=chart_id)
            if not deleted:
                raise NotFoundError('Seating chart not found')
            await uow.commit()

        Logger.base.info(f'🗑️ [CHART] Deleted {chart_id} ({deleted} seats)')
        return deleted
