from typing import Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.logging.loguru_io import Logger
from src.service.inventory.domain.entity.staff_allocation_entity import StaffAllocation
from src.service.inventory.domain.inventory_errors import StaffAllocationNotFoundError


class GetStaffAllocationUseCase:
    def __init__(self, *, uow_factory: UnitOfWorkFactory) -> None:
        self.uow_factory = uow_factory

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
    ) -> Self:
        return cls(uow_factory=uow_factory)

    @Logger.io
    async def get_allocation(self, *, allocation_id: UUID) -> StaffAllocation:
        async with self.uow_factory() as uow:
            allocation = await uow.staff_allocation_repo.get_by_id(allocation_id=allocation_id)
        if not allocation:
            raise StaffAllocationNotFoundError()
        return allocation
