"""
Hold Placement Executor

Places one hold, all-or-nothing, inside the caller's unit of work.

Flow:
1. Lazily expire overdue holds that touch the requested seats, and tiers
   unless the units come from a staff pool
2. Insert the hold row and its items
3. Seats: compare-and-set AVAILABLE -> HELD, any miss raises SeatUnavailableError
4. Tiers: compare-and-set held += n against public availability, a miss
   raises HoldConflictError (or, for staff sales, moves units out of
   staff_reserved instead)

Raising leaves the unit of work uncommitted, so the caller's rollback
undoes every seat already flipped.
"""

import time
from datetime import datetime
from typing import List, Optional

from opentelemetry import trace

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ConflictError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.inventory_metrics import metrics
from src.service.inventory.app.reservation_helper.hold_release_executor import (
    HoldReleaseExecutor,
)
from src.service.inventory.domain.entity.hold_entity import Hold
from src.service.inventory.domain.inventory_errors import (
    HoldConflictError,
    InventoryConflictError,
    SeatUnavailableError,
)
from src.service.inventory.domain.value_object.actor import Actor
from src.service.inventory.domain.value_object.sellable_unit import Unit


LAZY_EXPIRY_BATCH = 100


class HoldPlacementExecutor:
    def __init__(self, *, release_executor: HoldReleaseExecutor) -> None:
        self.release_executor = release_executor
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def place(
        self,
        uow: AbstractUnitOfWork,
        *,
        event_id,
        actor: Actor,
        units: List[Unit],
        ttl_seconds: int,
        now: datetime,
        payment_ref: Optional[str] = None,
        from_staff_pool: bool = False,
    ) -> Hold:
        start = time.perf_counter()
        hold = Hold.create(
            event_id=event_id,
            actor=actor,
            units=units,
            now=now,
            ttl_seconds=ttl_seconds,
            payment_ref=payment_ref,
        )

        with self.tracer.start_as_current_span(
            'reservation_helper.place_hold',
            attributes={
                'hold.id': str(hold.id),
                'actor.kind': str(actor.kind),
                'units': hold.unit_count,
            },
        ):
            try:
                await self._place(uow, hold=hold, now=now, from_staff_pool=from_staff_pool)
            except SeatUnavailableError:
                metrics.record_hold(
                    actor_kind=actor.kind,
                    result='seat_unavailable',
                    duration=time.perf_counter() - start,
                )
                raise
            except HoldConflictError:
                metrics.record_hold(
                    actor_kind=actor.kind, result='conflict', duration=time.perf_counter() - start
                )
                raise

        metrics.record_hold(
            actor_kind=actor.kind, result='created', duration=time.perf_counter() - start
        )
        Logger.base.info(
            f'🎫 [HOLD] {hold.id} placed for {actor} ({hold.unit_count} units, '
            f'expires {hold.expires_at.isoformat()})'
        )
        return hold

    async def _place(
        self, uow: AbstractUnitOfWork, *, hold: Hold, now: datetime, from_staff_pool: bool
    ) -> None:
        if hold.payment_ref and await uow.hold_repo.get_by_payment_ref(
            payment_ref=hold.payment_ref
        ):
            raise ConflictError('Payment reference is already attached to another hold')

        # Staff-pool sales leave overdue public tier holds to the sweep
        tier_ids = (
            []
            if from_staff_pool
            else [item.tier_id for item in hold.tier_items if item.tier_id is not None]
        )
        seat_ids = [item.seat_id for item in hold.seat_items if item.seat_id is not None]
        await self.release_executor.expire_overdue(
            uow, now=now, limit=LAZY_EXPIRY_BATCH, tier_ids=tier_ids, seat_ids=seat_ids
        )

        await uow.hold_repo.create(hold=hold)

        for item in hold.seat_items:
            assert item.seat_id is not None
            if not await uow.inventory_store.hold_seat(
                seat_id=item.seat_id, hold_id=hold.id, held_until=hold.expires_at, now=now
            ):
                raise SeatUnavailableError(f'Seat {item.seat_ref} is not available')

        for item in hold.tier_items:
            assert item.tier_id is not None
            if from_staff_pool:
                if not await uow.inventory_store.move_staff_units_to_hold(
                    tier_id=item.tier_id, quantity=item.quantity
                ):
                    Logger.base.critical(
                        f'🚨 [HOLD] Tier {item.tier_id} staff pool below {item.quantity} '
                        f'although the allocation quota allowed the sale'
                    )
                    raise InventoryConflictError(
                        'Staff pool of the tier is smaller than the allocation quota'
                    )
            elif not await uow.inventory_store.reserve_tier_units(
                tier_id=item.tier_id, quantity=item.quantity
            ):
                raise HoldConflictError(f'Not enough tickets available (requested {item.quantity})')
