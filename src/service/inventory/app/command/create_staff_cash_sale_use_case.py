"""
Create Staff Cash Sale Use Case

One transaction, all-or-nothing:
1. Quota pre-check (StaffQuotaExceededError names what is left)
2. Compare-and-set tickets_sold += n within allocated_tickets
3. Hold on the staff pool (staff_reserved -> held), no public availability check
4. Finalize immediately into tickets tagged with the staff sale
5. Commission and cash totals on the allocation
"""

from typing import List, Optional, Self
from uuid import UUID

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.clock.utc_clock import Clock
from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.reservation_helper.allocation_policy import AllocationPolicy
from src.service.inventory.app.reservation_helper.hold_placement_executor import (
    HoldPlacementExecutor,
)
from src.service.inventory.app.reservation_helper.ticket_finalizer import TicketFinalizer
from src.service.inventory.domain.entity.staff_allocation_entity import StaffSale
from src.service.inventory.domain.entity.ticket_entity import Ticket
from src.service.inventory.domain.enum.actor_kind import ActorKind
from src.service.inventory.domain.enum.payment_method import PaymentMethod
from src.service.inventory.domain.inventory_errors import (
    InventoryConflictError,
    StaffQuotaExceededError,
    TierNotFoundError,
)
from src.service.inventory.domain.value_object.actor import Actor
from src.service.inventory.domain.value_object.sale_context import SaleContext
from src.service.inventory.domain.value_object.sellable_unit import TierUnit


# Finalized in the same transaction, the window only has to outlive it
STAFF_SALE_HOLD_TTL_SECONDS = 60


@attrs.frozen
class StaffSaleResult:
    sale: StaffSale
    tickets: List[Ticket]


class CreateStaffCashSaleUseCase:
    def __init__(
        self,
        *,
        uow_factory: UnitOfWorkFactory,
        policy: AllocationPolicy,
        placement_executor: HoldPlacementExecutor,
        finalizer: TicketFinalizer,
        clock: Clock,
    ) -> None:
        self.uow_factory = uow_factory
        self.policy = policy
        self.placement_executor = placement_executor
        self.finalizer = finalizer
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
        finalizer: TicketFinalizer = Depends(Provide[Container.ticket_finalizer]),
        clock: Clock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(
            uow_factory=uow_factory,
            policy=policy,
            placement_executor=placement_executor,
            finalizer=finalizer,
            clock=clock,
        )

    @Logger.io
    async def create_sale(
        self,
        *,
        allocation_id: UUID,
        staff_user_id: str,
        quantity: int,
        payment_method: PaymentMethod,
        buyer_name: Optional[str] = None,
        buyer_email: Optional[str] = None,
    ) -> StaffSaleResult:
        now = self.clock()
        with self.tracer.start_as_current_span(
            'use_case.staff_cash_sale',
            attributes={'allocation.id': str(allocation_id), 'quantity': quantity},
        ):
            async with self.uow_factory() as uow:
                allocation = await self.policy.staff_allocation_for_sale(
                    uow, allocation_id=allocation_id, quantity=quantity
                )
                if allocation.staff_user_id != staff_user_id:
                    raise DomainError('Staff allocation belongs to another staff member', 403)
                tier = await uow.inventory_store.get_tier(tier_id=allocation.tier_id)
                if not tier:
                    raise TierNotFoundError()

                if not await uow.staff_allocation_repo.consume_quota(
                    allocation_id=allocation.id, quantity=quantity
                ):
                    raise StaffQuotaExceededError(
                        f'Staff allocation {allocation.id} ran out of tickets'
                    )

                hold = await self.placement_executor.place(
                    uow,
                    event_id=allocation.event_id,
                    actor=Actor(kind=ActorKind.STAFF, id=staff_user_id),
                    units=[TierUnit(tier_id=tier.id, quantity=quantity)],
                    ttl_seconds=STAFF_SALE_HOLD_TTL_SECONDS,
                    now=now,
                    from_staff_pool=True,
                )

                sale = StaffSale.record(
                    allocation=allocation,
                    hold_id=hold.id,
                    quantity=quantity,
                    unit_price=tier.price,
                    payment_method=payment_method,
                    buyer_name=buyer_name,
                    buyer_email=buyer_email,
                    now=now,
                )
                await uow.staff_allocation_repo.create_sale(sale=sale)

                tickets = await self.finalizer.finalize(
                    uow,
                    hold=hold,
                    sale_context=SaleContext(
                        payment_method=payment_method,
                        order_id=f'staff-{sale.id}',
                        staff_sale_id=sale.id,
                        attendee_name=buyer_name,
                        attendee_email=buyer_email,
                    ),
                    now=now,
                )
                if tickets is None:
                    raise InventoryConflictError(f'Staff sale hold {hold.id} changed before finalize')

                await uow.staff_allocation_repo.add_sale_totals(
                    allocation_id=allocation.id,
                    commission_amount=sale.commission_amount,
                    cash_amount=sale.cash_amount,
                )
                await uow.commit()

        Logger.base.info(
            f'💵 [STAFF] {staff_user_id} sold {quantity} x "{tier.name}" '
            f'({payment_method}, commission {sale.commission_amount})'
        )
        return StaffSaleResult(sale=sale, tickets=tickets)
