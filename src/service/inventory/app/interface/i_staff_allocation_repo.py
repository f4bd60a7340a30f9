from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.service.inventory.domain.entity.staff_allocation_entity import StaffAllocation, StaffSale


class IStaffAllocationRepo(ABC):
    @abstractmethod
    async def create(self, *, allocation: StaffAllocation) -> StaffAllocation:
        pass

    @abstractmethod
    async def get_by_id(self, *, allocation_id: UUID) -> Optional[StaffAllocation]:
        pass

    @abstractmethod
    async def list_by_tier(self, *, tier_id: UUID) -> List[StaffAllocation]:
        pass

    @abstractmethod
    async def update_if_unchanged(
        self, *, allocation: StaffAllocation, expected: StaffAllocation
    ) -> bool:
        """Write resize/activation changes only if tickets_sold, allocation and activity still match `expected`"""
        pass

    @abstractmethod
    async def consume_quota(self, *, allocation_id: UUID, quantity: int) -> bool:
        """tickets_sold += quantity, only on an active allocation with enough left"""
        pass

    @abstractmethod
    async def return_quota(self, *, allocation_id: UUID, quantity: int) -> bool:
        """tickets_sold -= quantity (voided staff ticket)"""
        pass

    @abstractmethod
    async def add_sale_totals(
        self, *, allocation_id: UUID, commission_amount: int, cash_amount: int
    ) -> None:
        pass

    @abstractmethod
    async def create_sale(self, *, sale: StaffSale) -> StaffSale:
        pass

    @abstractmethod
    async def get_sale(self, *, sale_id: UUID) -> Optional[StaffSale]:
        pass
