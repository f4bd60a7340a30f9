from typing import Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.logging.loguru_io import Logger
from src.service.inventory.domain.inventory_errors import InventoryInUseError, TierNotFoundError


class DeleteTierUseCase:
    """Only a tier with nothing sold, held or carved out for staff can be deleted"""

    def __init__(self, *, uow_factory: UnitOfWorkFactory) -> None:
        self.uow_factory = uow_factory

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
    ) -> Self:
        return cls(uow_factory=uow_factory)

    @Logger.io
    async def delete_tier(self, *, tier_id: UUID) -> None:
        async with self.uow_factory() as uow:
            tier = await uow.inventory_store.get_tier(tier_id=tier_id)
            if not tier:
                raise TierNotFoundError()
            tier.ensure_deletable()

            # Counters may have moved since the read
            if not await uow.inventory_store.delete_tier(tier_id=tier_id):
                raise InventoryInUseError('Ticket tier gained holds or sales while deleting')
            await uow.commit()

        Logger.base.info(f'🗑️ [TIER] Deleted tier {tier_id}')
