from datetime import datetime
from typing import Optional, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.clock.utc_clock import Clock
from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.logging.loguru_io import Logger
from src.service.inventory.domain.entity.ticket_tier_entity import TicketTier


class CreateTierUseCase:
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
    async def create_tier(
        self,
        *,
        event_id: UUID,
        name: str,
        price: int,
        quantity: int,
        description: Optional[str] = None,
        sale_start: Optional[datetime] = None,
        sale_end: Optional[datetime] = None,
        is_active: bool = True,
    ) -> TicketTier:
        tier = TicketTier.create(
            event_id=event_id,
            name=name,
            price=price,
            quantity=quantity,
            description=description,
            sale_start=sale_start,
            sale_end=sale_end,
            is_active=is_active,
            now=self.clock(),
        )
        async with self.uow_factory() as uow:
            await uow.inventory_store.create_tier(tier=tier)
            await uow.commit()

        Logger.base.info(f'🎟️ [TIER] Created "{tier.name}" x{tier.quantity} for event {event_id}')
        return tier
