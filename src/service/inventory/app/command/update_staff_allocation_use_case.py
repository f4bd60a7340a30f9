from decimal import Decimal
from typing import Optional, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.clock.utc_clock import Clock
from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import ConflictError
from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.interface.i_inventory_release_notifier import (
    IInventoryReleaseNotifier,
)
from src.service.inventory.domain.entity.staff_allocation_entity import StaffAllocation
from src.service.inventory.domain.enum.payment_method import CommissionType
from src.service.inventory.domain.inventory_errors import (
    HoldConflictError,
    InventoryConflictError,
    StaffAllocationNotFoundError,
)


class UpdateStaffAllocationUseCase:
    """
    Resize, (de)activate or re-price an allocation.

    The tier's staff_reserved counter follows the allocation's unsold
    remainder: growing carves more public units, shrinking or deactivating
    hands them back to public sale.
    """

    def __init__(
        self,
        *,
        uow_factory: UnitOfWorkFactory,
        release_notifier: IInventoryReleaseNotifier,
        clock: Clock,
    ) -> None:
        self.uow_factory = uow_factory
        self.release_notifier = release_notifier
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
        release_notifier: IInventoryReleaseNotifier = Depends(
            Provide[Container.release_notifier]
        ),
        clock: Clock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(uow_factory=uow_factory, release_notifier=release_notifier, clock=clock)

    @Logger.io
    async def update_allocation(
        self,
        *,
        allocation_id: UUID,
        allocated_tickets: Optional[int] = None,
        is_active: Optional[bool] = None,
        commission_type: Optional[CommissionType] = None,
        commission_value: Optional[Decimal] = None,
    ) -> StaffAllocation:
        async with self.uow_factory() as uow:
            current = await uow.staff_allocation_repo.get_by_id(allocation_id=allocation_id)
            if not current:
                raise StaffAllocationNotFoundError()

            updated = current.resize(
                now=self.clock(),
                allocated_tickets=allocated_tickets,
                is_active=is_active,
                commission_type=commission_type,
                commission_value=commission_value,
            )

            delta = updated.reserved_units - current.reserved_units
            if delta > 0 and not await uow.inventory_store.carve_staff_units(
                tier_id=current.tier_id, quantity=delta
            ):
                raise HoldConflictError(f'Not enough tickets available to allocate {delta} more')
            if delta < 0 and not await uow.inventory_store.return_staff_units(
                tier_id=current.tier_id, quantity=-delta
            ):
                raise InventoryConflictError(
                    f'Staff pool of tier {current.tier_id} is smaller than allocation {current.id}'
                )

            if not await uow.staff_allocation_repo.update_if_unchanged(
                allocation=updated, expected=current
            ):
                raise ConflictError('Staff allocation changed concurrently, retry')
            await uow.commit()

        Logger.base.info(
            f'👥 [STAFF] Allocation {allocation_id}: {current.allocated_tickets} -> '
            f'{updated.allocated_tickets}, active={updated.is_active}'
        )
        if delta < 0:
            await self.release_notifier.notify_released(tier_id=current.tier_id, quantity=-delta)
        return updated
