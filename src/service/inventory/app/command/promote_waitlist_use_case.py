from typing import Optional, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.clock.utc_clock import Clock
from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.reservation_helper.waitlist_promoter import (
    WaitlistOffer,
    WaitlistPromoter,
)
from src.service.inventory.domain.inventory_errors import TierNotFoundError


class PromoteWaitlistUseCase:
    """Manual trigger for the same FIFO promotion that runs after every release"""

    def __init__(
        self, *, uow_factory: UnitOfWorkFactory, promoter: WaitlistPromoter, clock: Clock
    ) -> None:
        self.uow_factory = uow_factory
        self.promoter = promoter
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
        promoter: WaitlistPromoter = Depends(Provide[Container.waitlist_promoter]),
        clock: Clock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(uow_factory=uow_factory, promoter=promoter, clock=clock)

    @Logger.io
    async def promote_next(self, *, tier_id: UUID) -> Optional[WaitlistOffer]:
        async with self.uow_factory() as uow:
            if not await uow.inventory_store.get_tier(tier_id=tier_id):
                raise TierNotFoundError()
            offer = await self.promoter.promote_next(uow, tier_id=tier_id, now=self.clock())
            if offer:
                await uow.commit()
        return offer
