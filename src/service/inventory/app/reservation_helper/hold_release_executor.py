"""
Hold Release Executor

Moves a hold out of ACTIVE (CANCELLED or EXPIRED) and gives its units back,
inside the caller's unit of work.

Flow:
1. Compare-and-set hold ACTIVE -> reason (loser of a race does nothing)
2. Tier items: held -= quantity
3. Seat items: HELD by this hold -> AVAILABLE (a seat already re-held by a
   newer hold after expiry is left alone)

expire_and_notify commits the expiry on its own and only then tells the
release notifier, so a waitlist head is offered the freed units before the
request that triggered the expiry can place its own hold.
"""

from collections import Counter
from datetime import datetime
from typing import List, Optional
from uuid import UUID

import attrs
from opentelemetry import trace

from src.platform.database.unit_of_work import AbstractUnitOfWork, UnitOfWorkFactory
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.inventory_metrics import metrics
from src.service.inventory.app.interface.i_inventory_release_notifier import (
    IInventoryReleaseNotifier,
)
from src.service.inventory.domain.entity.hold_entity import Hold
from src.service.inventory.domain.enum.inventory_status import HoldStatus
from src.service.inventory.domain.inventory_errors import InventoryConflictError
from src.service.inventory.domain.value_object.sellable_unit import SeatUnit, TierUnit


@attrs.frozen
class ExpiryResult:
    holds_expired: int
    freed: Counter[UUID]  # tier_id -> units returned to public inventory


async def notify_freed(notifier: IInventoryReleaseNotifier, freed: Counter[UUID]) -> None:
    for tier_id, quantity in freed.items():
        await notifier.notify_released(tier_id=tier_id, quantity=quantity)


class HoldReleaseExecutor:
    def __init__(self) -> None:
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def release(
        self, uow: AbstractUnitOfWork, *, hold: Hold, reason: HoldStatus, now: datetime
    ) -> Optional[Counter[UUID]]:
        """
        Returns tier_id -> units freed, or None when another request already
        moved the hold out of ACTIVE.
        """
        released = hold.release(reason=reason, now=now)
        if not await uow.hold_repo.transition(
            hold_id=hold.id, from_status=HoldStatus.ACTIVE, to_status=released.status, at=now
        ):
            return None

        freed: Counter[UUID] = Counter()
        for item in hold.items:
            match item.to_unit():
                case TierUnit(tier_id=tier_id, quantity=quantity):
                    if not await uow.inventory_store.release_tier_units(
                        tier_id=tier_id, quantity=quantity
                    ):
                        Logger.base.critical(
                            f'🚨 [RELEASE] Tier {tier_id} held counter below {quantity} '
                            f'while releasing hold {hold.id}'
                        )
                        raise InventoryConflictError(
                            f'Tier {tier_id} held counter is inconsistent with hold {hold.id}'
                        )
                    freed[tier_id] += quantity
                case SeatUnit(seat_id=seat_id):
                    await uow.inventory_store.release_seat(seat_id=seat_id, hold_id=hold.id)

        metrics.record_hold_released(reason=reason)
        Logger.base.info(f'🔓 [RELEASE] Hold {hold.id} -> {reason} ({hold.unit_count} units)')
        return freed

    @Logger.io
    async def expire_overdue(
        self,
        uow: AbstractUnitOfWork,
        *,
        now: datetime,
        limit: int,
        tier_ids: Optional[List[UUID]] = None,
        seat_ids: Optional[List[UUID]] = None,
    ) -> ExpiryResult:
        """Expire ACTIVE holds past their window; scoped to given tiers/seats when provided"""
        with self.tracer.start_as_current_span(
            'reservation_helper.expire_overdue', attributes={'limit': limit}
        ):
            overdue = await uow.hold_repo.list_expired(
                now=now, limit=limit, tier_ids=tier_ids, seat_ids=seat_ids
            )
            expired = 0
            freed: Counter[UUID] = Counter()
            for hold in overdue:
                released = await self.release(uow, hold=hold, reason=HoldStatus.EXPIRED, now=now)
                if released is not None:
                    expired += 1
                    freed.update(released)
            return ExpiryResult(holds_expired=expired, freed=freed)

    @Logger.io
    async def expire_and_notify(
        self,
        *,
        uow_factory: UnitOfWorkFactory,
        notifier: IInventoryReleaseNotifier,
        now: datetime,
        limit: int,
        tier_ids: Optional[List[UUID]] = None,
    ) -> ExpiryResult:
        async with uow_factory() as uow:
            result = await self.expire_overdue(uow, now=now, limit=limit, tier_ids=tier_ids)
            await uow.commit()

        await notify_freed(notifier, result.freed)
        return result
