from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.service.inventory.domain.entity.ticket_entity import Ticket
from src.service.inventory.domain.enum.inventory_status import TicketStatus


class ITicketRepo(ABC):
    @abstractmethod
    async def create_many(self, *, tickets: List[Ticket]) -> List[Ticket]:
        pass

    @abstractmethod
    async def get_by_id(self, *, ticket_id: UUID) -> Optional[Ticket]:
        pass

    @abstractmethod
    async def get_by_code(self, *, code: str) -> Optional[Ticket]:
        pass

    @abstractmethod
    async def list_by_hold(self, *, hold_id: UUID) -> List[Ticket]:
        """Tickets issued for a hold, including later voided or transferred ones"""
        pass

    @abstractmethod
    async def transition(
        self, *, ticket: Ticket, from_status: TicketStatus
    ) -> bool:
        """Persist `ticket` (status and attendee fields) only if the stored status is `from_status`"""
        pass
