"""
Inventory Store Interface

Durable record of sellable units. Every method that changes availability is a
single conditional UPDATE and reports success through its return value; callers
decide which error to raise and the surrounding unit of work decides whether
the whole transaction commits.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from src.service.inventory.domain.entity.seat_entity import Seat
from src.service.inventory.domain.entity.ticket_tier_entity import TicketTier
from src.service.inventory.domain.enum.inventory_status import SeatStatus
from src.service.inventory.domain.value_object.sellable_unit import SeatRef, Unit


class IInventoryStore(ABC):
    # ========== Tiers ==========

    @abstractmethod
    async def create_tier(self, *, tier: TicketTier) -> TicketTier:
        pass

    @abstractmethod
    async def get_tier(self, *, tier_id: UUID) -> Optional[TicketTier]:
        pass

    @abstractmethod
    async def delete_tier(self, *, tier_id: UUID) -> bool:
        """Delete only while sold, held and staff_reserved are all zero"""
        pass

    @abstractmethod
    async def get_available_count(self, *, tier_id: UUID, now: datetime) -> int:
        """quantity - sold - units in ACTIVE holds that have not expired at `now`"""
        pass

    @abstractmethod
    async def get_public_available_count(self, *, tier_id: UUID, now: datetime) -> int:
        """get_available_count minus units carved out for staff allocations"""
        pass

    @abstractmethod
    async def reserve_tier_units(self, *, tier_id: UUID, quantity: int) -> bool:
        """held += quantity, only if that many units are publicly unclaimed"""
        pass

    @abstractmethod
    async def release_tier_units(self, *, tier_id: UUID, quantity: int) -> bool:
        """held -= quantity (hold cancelled or expired)"""
        pass

    @abstractmethod
    async def carve_staff_units(self, *, tier_id: UUID, quantity: int) -> bool:
        """staff_reserved += quantity, only if that many units are publicly unclaimed"""
        pass

    @abstractmethod
    async def return_staff_units(self, *, tier_id: UUID, quantity: int) -> bool:
        """staff_reserved -= quantity (allocation shrunk or deactivated)"""
        pass

    @abstractmethod
    async def move_staff_units_to_hold(self, *, tier_id: UUID, quantity: int) -> bool:
        """staff_reserved -= quantity, held += quantity (staff sale in progress)"""
        pass

    # ========== Seats ==========

    @abstractmethod
    async def add_seats(self, *, seats: List[Seat]) -> None:
        pass

    @abstractmethod
    async def get_seat(self, *, seat_id: UUID) -> Optional[Seat]:
        pass

    @abstractmethod
    async def get_seat_by_ref(self, *, event_id: UUID, seat_ref: SeatRef) -> Optional[Seat]:
        pass

    @abstractmethod
    async def get_seat_status(
        self, *, event_id: UUID, seat_ref: SeatRef, now: datetime
    ) -> Optional[SeatStatus]:
        pass

    @abstractmethod
    async def list_seats(
        self, *, event_id: UUID, section_id: str, row_id: Optional[str] = None
    ) -> List[Seat]:
        """Seats of a section (optionally one row/table) in (row_index, seat_index, seat_id) order"""
        pass

    @abstractmethod
    async def find_available_seats(
        self,
        *,
        event_id: UUID,
        section_id: str,
        quantity: int,
        now: datetime,
        row_id: Optional[str] = None,
    ) -> List[Seat]:
        """Lowest `quantity` seats that read AVAILABLE at `now`, in section order"""
        pass

    @abstractmethod
    async def hold_seat(
        self, *, seat_id: UUID, hold_id: UUID, held_until: datetime, now: datetime
    ) -> bool:
        """AVAILABLE (or HELD past its window) -> HELD by `hold_id`"""
        pass

    @abstractmethod
    async def release_seat(self, *, seat_id: UUID, hold_id: UUID) -> bool:
        """HELD or RESERVED by `hold_id` -> AVAILABLE"""
        pass

    @abstractmethod
    async def count_claimed_chart_seats(self, *, event_id: UUID, chart_id: str, now: datetime) -> int:
        pass

    @abstractmethod
    async def delete_chart(self, *, event_id: UUID, chart_id: str) -> int:
        pass

    # ========== Sale ==========

    @abstractmethod
    async def commit_sale(self, *, unit: Unit, hold_id: UUID) -> None:
        """
        Make a held unit permanently sold.

        Tier: sold += n, held -= n. Seat: HELD by hold_id -> RESERVED.
        Raises OversellError when the conditional update matches no row.
        """
        pass

    @abstractmethod
    async def revert_sale(self, *, unit: Unit, hold_id: UUID) -> bool:
        """Undo commit_sale for a voided ticket: tier sold -= n, seat RESERVED -> AVAILABLE"""
        pass

    @abstractmethod
    async def return_sold_unit_to_staff(self, *, tier_id: UUID) -> bool:
        """sold -= 1, staff_reserved += 1 (voided staff-sold ticket goes back to the staff pool)"""
        pass
