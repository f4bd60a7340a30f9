from datetime import datetime
from typing import Optional
from uuid import UUID

import attrs
from uuid_utils.compat import uuid7

from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.service.inventory.domain.inventory_errors import InventoryInUseError, TierNotOnSaleError


@attrs.define
class TicketTier:
    """
    Fungible ticket inventory counted per tier.

    Counters, all kept non-negative by the store:
        sold            tickets issued and not voided
        held            units inside ACTIVE holds
        staff_reserved  units carved out for active staff allocations and not yet sold

    sold + held + staff_reserved <= quantity at every commit.
    """

    id: UUID
    event_id: UUID
    name: str
    price: int  # cents
    quantity: int
    sold: int = 0
    held: int = 0
    staff_reserved: int = 0
    description: Optional[str] = None
    sale_start: Optional[datetime] = None
    sale_end: Optional[datetime] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        event_id: UUID,
        name: str,
        price: int,
        quantity: int,
        now: datetime,
        description: Optional[str] = None,
        sale_start: Optional[datetime] = None,
        sale_end: Optional[datetime] = None,
        is_active: bool = True,
    ) -> 'TicketTier':
        if not name or not name.strip():
            raise DomainError('Tier name is required', 400)
        if price < 0:
            raise DomainError('Price must not be negative', 400)
        if quantity < 1:
            raise DomainError('Quantity must be at least 1', 400)
        if sale_start and sale_end and sale_end <= sale_start:
            raise DomainError('Sale end must be after sale start', 400)

        return cls(
            id=uuid7(),
            event_id=event_id,
            name=name.strip(),
            description=description,
            price=price,
            quantity=quantity,
            sale_start=sale_start,
            sale_end=sale_end,
            is_active=is_active,
            created_at=now,
            updated_at=now,
        )

    @property
    def unclaimed(self) -> int:
        """Counter view of public availability, may lag behind holds that expired unswept"""
        return self.quantity - self.sold - self.held - self.staff_reserved

    def is_on_sale(self, now: datetime) -> bool:
        if not self.is_active:
            return False
        if self.sale_start and now < self.sale_start:
            return False
        if self.sale_end and now > self.sale_end:
            return False
        return True

    def ensure_on_sale(self, now: datetime) -> None:
        if not self.is_active:
            raise TierNotOnSaleError(f'Ticket tier "{self.name}" is not active')
        if not self.is_on_sale(now):
            raise TierNotOnSaleError(f'Ticket tier "{self.name}" is outside its sale window')

    def ensure_deletable(self) -> None:
        if self.sold > 0:
            raise InventoryInUseError('Cannot delete a ticket tier that has sold tickets')
        if self.held > 0:
            raise InventoryInUseError('Cannot delete a ticket tier with active holds')
        if self.staff_reserved > 0:
            raise InventoryInUseError('Cannot delete a ticket tier with staff allocations')
