from typing import Optional, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.clock.utc_clock import Clock
from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.logging.loguru_io import Logger
from src.service.inventory.domain.entity.waitlist_entry_entity import WaitlistEntry
from src.service.inventory.domain.inventory_errors import TierNotFoundError


class JoinWaitlistUseCase:
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
    async def join_waitlist(
        self,
        *,
        tier_id: UUID,
        actor_id: str,
        quantity: int = 1,
        email: Optional[str] = None,
        name: Optional[str] = None,
    ) -> tuple[WaitlistEntry, int]:
        """Returns the entry and how many active entries are ahead of it"""
        async with self.uow_factory() as uow:
            tier = await uow.inventory_store.get_tier(tier_id=tier_id)
            if not tier:
                raise TierNotFoundError()

            entry = WaitlistEntry.join(
                event_id=tier.event_id,
                tier_id=tier.id,
                actor_id=actor_id,
                quantity=quantity,
                email=email,
                name=name,
                now=self.clock(),
            )
            await uow.waitlist_repo.create(entry=entry)
            position = await uow.waitlist_repo.count_active_ahead(entry=entry)
            await uow.commit()

        Logger.base.info(f'📝 [WAITLIST] {actor_id} joined "{tier.name}" at position {position + 1}')
        return entry, position
