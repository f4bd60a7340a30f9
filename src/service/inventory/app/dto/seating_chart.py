from typing import List, Optional
from uuid import UUID

import attrs

from src.service.inventory.domain.enum.inventory_status import SeatStatus
from src.service.inventory.domain.enum.unit_kind import ContainerType


@attrs.frozen
class ChartSeat:
    seat_id: str
    seat_number: Optional[str] = None
    blocked: bool = False
    price: Optional[int] = None  # overrides the section price

    @property
    def initial_status(self) -> SeatStatus:
        return SeatStatus.BLOCKED if self.blocked else SeatStatus.AVAILABLE


@attrs.frozen
class ChartContainer:
    """A row, or a table for table seating"""

    container_id: str
    seats: List[ChartSeat]
    container_type: ContainerType = ContainerType.ROW


@attrs.frozen
class ChartSection:
    section_id: str
    price: int
    containers: List[ChartContainer]
    tier_id: Optional[UUID] = None
