from typing import Self
from uuid import UUID

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.clock.utc_clock import Clock
from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.logging.loguru_io import Logger
from src.service.inventory.domain.entity.ticket_tier_entity import TicketTier
from src.service.inventory.domain.inventory_errors import TierNotFoundError


@attrs.frozen
class TierAvailability:
    tier: TicketTier
    available: int  # quantity - sold - unexpired holds
    public_available: int  # available - staff pool


class GetTierAvailabilityUseCase:
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
    async def get_availability(self, *, tier_id: UUID) -> TierAvailability:
        now = self.clock()
        async with self.uow_factory() as uow:
            tier = await uow.inventory_store.get_tier(tier_id=tier_id)
            if not tier:
                raise TierNotFoundError()
            return TierAvailability(
                tier=tier,
                available=await uow.inventory_store.get_available_count(tier_id=tier_id, now=now),
                public_available=await uow.inventory_store.get_public_available_count(
                    tier_id=tier_id, now=now
                ),
            )
