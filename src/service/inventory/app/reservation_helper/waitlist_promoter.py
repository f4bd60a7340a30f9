"""
Waitlist Promoter

Offers freed tier inventory to the head of the waitlist.

Flow:
1. Oldest ACTIVE entry for the tier (strict FIFO: if the head does not fit,
   nobody behind it jumps the queue)
2. Place a WAITLIST hold for the entry's quantity with the offer TTL
3. Compare-and-set the entry ACTIVE -> NOTIFIED with the hold id
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

import attrs

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ConflictError
from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.reservation_helper.allocation_policy import AllocationPolicy
from src.service.inventory.app.reservation_helper.hold_placement_executor import (
    HoldPlacementExecutor,
)
from src.service.inventory.domain.entity.hold_entity import Hold
from src.service.inventory.domain.entity.waitlist_entry_entity import WaitlistEntry
from src.service.inventory.domain.enum.actor_kind import ActorKind
from src.service.inventory.domain.value_object.actor import Actor
from src.service.inventory.domain.value_object.sellable_unit import TierUnit


@attrs.frozen
class WaitlistOffer:
    entry: WaitlistEntry
    hold: Hold


class WaitlistPromoter:
    def __init__(
        self,
        *,
        policy: AllocationPolicy,
        placement_executor: HoldPlacementExecutor,
        offer_ttl_seconds: int,
    ) -> None:
        self.policy = policy
        self.placement_executor = placement_executor
        self.offer_ttl_seconds = offer_ttl_seconds

    @Logger.io
    async def promote_next(
        self, uow: AbstractUnitOfWork, *, tier_id: UUID, now: datetime
    ) -> Optional[WaitlistOffer]:
        entry = await self.policy.next_waitlist_entry(uow, tier_id=tier_id)
        if not entry:
            return None

        available = await uow.inventory_store.get_public_available_count(tier_id=tier_id, now=now)
        if available < entry.quantity:
            Logger.base.info(
                f'⏳ [WAITLIST] Head entry {entry.id} wants {entry.quantity}, '
                f'only {available} available'
            )
            return None

        hold = await self.placement_executor.place(
            uow,
            event_id=entry.event_id,
            actor=Actor(kind=ActorKind.WAITLIST, id=str(entry.id)),
            units=[TierUnit(tier_id=tier_id, quantity=entry.quantity)],
            ttl_seconds=self.offer_ttl_seconds,
            now=now,
        )
        notified = entry.notify(hold_id=hold.id, now=now)
        if not await uow.waitlist_repo.mark_notified(entry_id=entry.id, hold_id=hold.id, at=now):
            raise ConflictError(f'Waitlist entry {entry.id} was promoted concurrently')

        return WaitlistOffer(entry=notified, hold=hold)
