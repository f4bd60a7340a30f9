from typing import List, Optional
from uuid import UUID

import attrs

from src.service.inventory.domain.value_object.sellable_unit import SeatRef


@attrs.frozen
class AllocationRequest:
    """
    What a purchaser asked for, before the allocation policy turns it into units.

    - seats: explicit (section, row, seat) picks
    - section_id (+ row_id): "best available" inside that section/row/table
    - tier_id only: unassigned tier tickets
    """

    event_id: UUID
    quantity: int = 1
    tier_id: Optional[UUID] = None
    seats: List[SeatRef] = attrs.field(factory=list)
    section_id: Optional[str] = None
    row_id: Optional[str] = None

    @property
    def requested_units(self) -> int:
        return len(self.seats) if self.seats else self.quantity
