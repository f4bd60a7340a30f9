from datetime import datetime
from typing import Optional
from uuid import UUID

import attrs
from uuid_utils.compat import uuid7

from src.platform.exception.exceptions import DomainError
from src.service.inventory.domain.enum.inventory_status import WaitlistStatus


@attrs.define
class WaitlistEntry:
    id: UUID
    event_id: UUID
    tier_id: UUID
    actor_id: str
    quantity: int
    joined_at: datetime
    status: WaitlistStatus = WaitlistStatus.ACTIVE
    email: Optional[str] = None
    name: Optional[str] = None
    notified_at: Optional[datetime] = None
    hold_id: Optional[UUID] = None  # offer hold placed on promotion

    @classmethod
    def join(
        cls,
        *,
        event_id: UUID,
        tier_id: UUID,
        actor_id: str,
        quantity: int,
        now: datetime,
        email: Optional[str] = None,
        name: Optional[str] = None,
    ) -> 'WaitlistEntry':
        if quantity < 1:
            raise DomainError('Quantity must be at least 1', 400)
        return cls(
            id=uuid7(),
            event_id=event_id,
            tier_id=tier_id,
            actor_id=actor_id,
            quantity=quantity,
            email=email,
            name=name,
            joined_at=now,
        )

    def notify(self, *, hold_id: UUID, now: datetime) -> 'WaitlistEntry':
        if self.status != WaitlistStatus.ACTIVE:
            raise DomainError(f'Waitlist entry is {self.status}, cannot notify', 400)
        return attrs.evolve(self, status=WaitlistStatus.NOTIFIED, hold_id=hold_id, notified_at=now)
