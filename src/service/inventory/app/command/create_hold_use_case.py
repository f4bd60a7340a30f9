"""
Create Hold Use Case

Flow:
1. Validate actor, TTL and per-hold limits
2. Overdue holds on the tier expire in a committed transaction of their own,
   and the waitlist is offered the freed units before this request competes
3. Tier sale window (buyer checkout only)
4. Allocation policy: request -> concrete units
5. Placement: lazy expiry of seats + compare-and-set per unit, one transaction
"""

from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.clock.utc_clock import Clock
from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.dto.allocation_request import AllocationRequest
from src.service.inventory.app.interface.i_inventory_release_notifier import (
    IInventoryReleaseNotifier,
)
from src.service.inventory.app.reservation_helper.allocation_policy import AllocationPolicy
from src.service.inventory.app.reservation_helper.hold_placement_executor import (
    LAZY_EXPIRY_BATCH,
    HoldPlacementExecutor,
)
from src.service.inventory.app.reservation_helper.hold_release_executor import (
    HoldReleaseExecutor,
)
from src.service.inventory.domain.entity.hold_entity import Hold
from src.service.inventory.domain.enum.actor_kind import ActorKind
from src.service.inventory.domain.inventory_errors import TierNotFoundError, TierNotOnSaleError
from src.service.inventory.domain.value_object.actor import Actor


class CreateHoldUseCase:
    def __init__(
        self,
        *,
        uow_factory: UnitOfWorkFactory,
        policy: AllocationPolicy,
        placement_executor: HoldPlacementExecutor,
        release_executor: HoldReleaseExecutor,
        release_notifier: IInventoryReleaseNotifier,
        clock: Clock,
    ) -> None:
        self.uow_factory = uow_factory
        self.policy = policy
        self.placement_executor = placement_executor
        self.release_executor = release_executor
        self.release_notifier = release_notifier
        self.clock = clock
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
        policy: AllocationPolicy = Depends(Provide[Container.allocation_policy]),
        placement_executor: HoldPlacementExecutor = Depends(
            Provide[Container.placement_executor]
        ),
        release_executor: HoldReleaseExecutor = Depends(Provide[Container.release_executor]),
        release_notifier: IInventoryReleaseNotifier = Depends(
            Provide[Container.release_notifier]
        ),
        clock: Clock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(
            uow_factory=uow_factory,
            policy=policy,
            placement_executor=placement_executor,
            release_executor=release_executor,
            release_notifier=release_notifier,
            clock=clock,
        )

    @staticmethod
    def _resolve_ttl(ttl_seconds: Optional[int]) -> int:
        ttl = settings.HOLD_TTL_SECONDS if ttl_seconds is None else ttl_seconds
        if ttl <= 0:
            raise DomainError('Hold TTL must be positive', 400)
        if ttl > settings.HOLD_MAX_TTL_SECONDS:
            raise DomainError(
                f'Hold TTL must not exceed {settings.HOLD_MAX_TTL_SECONDS} seconds', 400
            )
        return ttl

    @Logger.io
    async def create_hold(
        self,
        *,
        request: AllocationRequest,
        actor: Actor,
        ttl_seconds: Optional[int] = None,
        payment_ref: Optional[str] = None,
    ) -> Hold:
        """
        Raises:
            SeatUnavailableError: a requested seat is held or reserved
            HoldConflictError: not enough tier units left
            TierNotOnSaleError: tier inactive or outside its sale window
        """
        ttl = self._resolve_ttl(ttl_seconds)
        if (
            actor.kind == ActorKind.BUYER_SESSION
            and request.requested_units > settings.MAX_UNITS_PER_HOLD
        ):
            raise DomainError(
                f'A hold is limited to {settings.MAX_UNITS_PER_HOLD} tickets', 400
            )

        now = self.clock()
        with self.tracer.start_as_current_span(
            'use_case.create_hold',
            attributes={
                'event.id': str(request.event_id),
                'actor.kind': str(actor.kind),
                'requested_units': request.requested_units,
            },
        ):
            if request.tier_id:
                await self.release_executor.expire_and_notify(
                    uow_factory=self.uow_factory,
                    notifier=self.release_notifier,
                    now=now,
                    limit=LAZY_EXPIRY_BATCH,
                    tier_ids=[request.tier_id],
                )

            async with self.uow_factory() as uow:
                if request.tier_id:
                    tier = await uow.inventory_store.get_tier(tier_id=request.tier_id)
                    if not tier or tier.event_id != request.event_id:
                        raise TierNotFoundError()
                    if actor.kind == ActorKind.BUYER_SESSION:
                        tier.ensure_on_sale(now)
                    elif not tier.is_active and actor.kind != ActorKind.GUEST_IMPORT:
                        raise TierNotOnSaleError(f'Ticket tier "{tier.name}" is not active')

                units = await self.policy.resolve(uow, request=request, now=now)
                hold = await self.placement_executor.place(
                    uow,
                    event_id=request.event_id,
                    actor=actor,
                    units=units,
                    ttl_seconds=ttl,
                    now=now,
                    payment_ref=payment_ref,
                )
                await uow.commit()

        return hold
