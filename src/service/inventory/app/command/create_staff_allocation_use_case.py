from decimal import Decimal
from typing import Optional, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.clock.utc_clock import Clock
from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.logging.loguru_io import Logger
from src.service.inventory.domain.entity.staff_allocation_entity import StaffAllocation
from src.service.inventory.domain.enum.payment_method import CommissionType
from src.service.inventory.domain.inventory_errors import HoldConflictError, TierNotFoundError


class CreateStaffAllocationUseCase:
    """Carves tickets out of public availability for a staff member to sell"""

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
    async def create_allocation(
        self,
        *,
        tier_id: UUID,
        staff_user_id: str,
        allocated_tickets: int,
        commission_type: CommissionType = CommissionType.PERCENTAGE,
        commission_value: Decimal = Decimal('0'),
        name: Optional[str] = None,
    ) -> StaffAllocation:
        async with self.uow_factory() as uow:
            tier = await uow.inventory_store.get_tier(tier_id=tier_id)
            if not tier:
                raise TierNotFoundError()

            allocation = StaffAllocation.create(
                event_id=tier.event_id,
                tier_id=tier.id,
                staff_user_id=staff_user_id,
                name=name,
                allocated_tickets=allocated_tickets,
                commission_type=commission_type,
                commission_value=commission_value,
                now=self.clock(),
            )
            if not await uow.inventory_store.carve_staff_units(
                tier_id=tier.id, quantity=allocation.reserved_units
            ):
                raise HoldConflictError(
                    f'Not enough tickets available to allocate {allocated_tickets}'
                )
            await uow.staff_allocation_repo.create(allocation=allocation)
            await uow.commit()

        Logger.base.info(
            f'👥 [STAFF] Allocated {allocated_tickets} of "{tier.name}" to {staff_user_id}'
        )
        return allocation
