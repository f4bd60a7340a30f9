from collections import Counter
from datetime import datetime, timedelta
from typing import List, Optional
from uuid import UUID

import attrs
from uuid_utils.compat import uuid7

from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.service.inventory.domain.enum.inventory_status import HoldStatus
from src.service.inventory.domain.enum.unit_kind import UnitKind
from src.service.inventory.domain.inventory_errors import HoldExpiredError, HoldNotActiveError
from src.service.inventory.domain.value_object.actor import Actor
from src.service.inventory.domain.value_object.sellable_unit import SeatRef, SeatUnit, TierUnit, Unit


@attrs.frozen
class HoldItem:
    kind: UnitKind
    tier_id: Optional[UUID] = None
    quantity: int = 1
    seat_id: Optional[UUID] = None
    seat_ref: Optional[SeatRef] = None

    @classmethod
    def from_unit(cls, unit: Unit) -> 'HoldItem':
        match unit:
            case TierUnit(tier_id=tier_id, quantity=quantity):
                return cls(kind=UnitKind.TIER, tier_id=tier_id, quantity=quantity)
            case SeatUnit(seat_id=seat_id, seat_ref=seat_ref):
                return cls(kind=UnitKind.SEAT, seat_id=seat_id, seat_ref=seat_ref)

    def to_unit(self) -> Unit:
        match self.kind:
            case UnitKind.TIER:
                assert self.tier_id is not None
                return TierUnit(tier_id=self.tier_id, quantity=self.quantity)
            case UnitKind.SEAT:
                assert self.seat_id is not None and self.seat_ref is not None
                return SeatUnit(seat_id=self.seat_id, seat_ref=self.seat_ref)


@attrs.define
class Hold:
    """
    Time-bounded claim on inventory, the only way units leave AVAILABLE.

    ACTIVE -> CONFIRMED (finalized into tickets)
    ACTIVE -> CANCELLED | EXPIRED (units released)
    """

    id: UUID
    event_id: UUID
    actor: Actor
    items: List[HoldItem]
    created_at: datetime
    expires_at: datetime
    status: HoldStatus = HoldStatus.ACTIVE
    payment_ref: Optional[str] = None
    confirmed_at: Optional[datetime] = None
    released_at: Optional[datetime] = None

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        event_id: UUID,
        actor: Actor,
        units: List[Unit],
        now: datetime,
        ttl_seconds: int,
        payment_ref: Optional[str] = None,
    ) -> 'Hold':
        if not units:
            raise DomainError('A hold needs at least one unit', 400)
        if ttl_seconds <= 0:
            raise DomainError('Hold TTL must be positive', 400)

        seat_ids = [unit.seat_id for unit in units if isinstance(unit, SeatUnit)]
        if len(seat_ids) != len(set(seat_ids)):
            raise DomainError('The same seat was requested twice', 400)

        # Merge repeated tier units so the tier counter moves once per tier
        tier_quantities: Counter[UUID] = Counter()
        for unit in units:
            if isinstance(unit, TierUnit):
                tier_quantities[unit.tier_id] += unit.quantity
        items = [HoldItem.from_unit(unit) for unit in units if isinstance(unit, SeatUnit)]
        items += [
            HoldItem(kind=UnitKind.TIER, tier_id=tier_id, quantity=quantity)
            for tier_id, quantity in tier_quantities.items()
        ]

        return cls(
            id=uuid7(),
            event_id=event_id,
            actor=actor,
            items=items,
            created_at=now,
            expires_at=now + timedelta(seconds=ttl_seconds),
            payment_ref=payment_ref,
        )

    @property
    def unit_count(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def tier_items(self) -> List[HoldItem]:
        return [item for item in self.items if item.kind == UnitKind.TIER]

    @property
    def seat_items(self) -> List[HoldItem]:
        return [item for item in self.items if item.kind == UnitKind.SEAT]

    def is_expired(self, now: datetime) -> bool:
        return self.status == HoldStatus.ACTIVE and self.expires_at <= now

    def ensure_confirmable(self, now: datetime) -> None:
        if self.status == HoldStatus.EXPIRED or self.is_expired(now):
            raise HoldExpiredError()
        if self.status != HoldStatus.ACTIVE:
            raise HoldNotActiveError(f'Hold is {self.status}, cannot confirm')

    def confirm(self, now: datetime) -> 'Hold':
        self.ensure_confirmable(now)
        return attrs.evolve(self, status=HoldStatus.CONFIRMED, confirmed_at=now)

    def release(self, *, reason: HoldStatus, now: datetime) -> 'Hold':
        if not reason.is_released:
            raise ValueError(f'{reason} is not a release status')
        if self.status != HoldStatus.ACTIVE:
            raise HoldNotActiveError(f'Hold is {self.status}, cannot release')
        return attrs.evolve(self, status=reason, released_at=now)
