from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from src.service.inventory.domain.entity.hold_entity import Hold
from src.service.inventory.domain.enum.inventory_status import HoldStatus


class IHoldRepo(ABC):
    @abstractmethod
    async def create(self, *, hold: Hold) -> Hold:
        pass

    @abstractmethod
    async def get_by_id(self, *, hold_id: UUID) -> Optional[Hold]:
        pass

    @abstractmethod
    async def get_by_payment_ref(self, *, payment_ref: str) -> Optional[Hold]:
        """Indexed lookup for payment webhooks"""
        pass

    @abstractmethod
    async def transition(
        self,
        *,
        hold_id: UUID,
        from_status: HoldStatus,
        to_status: HoldStatus,
        at: datetime,
        not_expired_at: Optional[datetime] = None,
    ) -> bool:
        """
        Compare-and-set the hold status.

        With `not_expired_at`, the update also requires expires_at > not_expired_at
        so a hold cannot be confirmed after its window closed.
        """
        pass

    @abstractmethod
    async def list_expired(
        self,
        *,
        now: datetime,
        limit: int,
        tier_ids: Optional[List[UUID]] = None,
        seat_ids: Optional[List[UUID]] = None,
    ) -> List[Hold]:
        """ACTIVE holds past expires_at, optionally only those touching the given tiers/seats"""
        pass
