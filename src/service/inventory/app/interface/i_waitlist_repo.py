from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from src.service.inventory.domain.entity.waitlist_entry_entity import WaitlistEntry


class IWaitlistRepo(ABC):
    @abstractmethod
    async def create(self, *, entry: WaitlistEntry) -> WaitlistEntry:
        pass

    @abstractmethod
    async def get_by_id(self, *, entry_id: UUID) -> Optional[WaitlistEntry]:
        pass

    @abstractmethod
    async def get_oldest_active(self, *, tier_id: UUID) -> Optional[WaitlistEntry]:
        """FIFO head: ACTIVE entry with the smallest (joined_at, id)"""
        pass

    @abstractmethod
    async def mark_notified(self, *, entry_id: UUID, hold_id: UUID, at: datetime) -> bool:
        """Compare-and-set ACTIVE -> NOTIFIED, attaching the offer hold"""
        pass

    @abstractmethod
    async def count_active_ahead(self, *, entry: WaitlistEntry) -> int:
        """Number of ACTIVE entries for the same tier that joined before `entry`"""
        pass
