from datetime import datetime
from typing import Optional
from uuid import UUID

import attrs

from src.service.inventory.domain.enum.inventory_status import SeatStatus
from src.service.inventory.domain.enum.unit_kind import ContainerType
from src.service.inventory.domain.value_object.sellable_unit import SeatRef, SeatUnit


@attrs.define
class Seat:
    id: UUID
    event_id: UUID
    chart_id: str
    section_id: str
    row_id: str  # table id when container_type is TABLE
    seat_id: str
    row_index: int
    seat_index: int
    price: int
    status: SeatStatus = SeatStatus.AVAILABLE
    container_type: ContainerType = ContainerType.ROW
    seat_number: Optional[str] = None
    tier_id: Optional[UUID] = None
    hold_id: Optional[UUID] = None
    held_until: Optional[datetime] = None

    @property
    def ref(self) -> SeatRef:
        return SeatRef(section_id=self.section_id, row_id=self.row_id, seat_id=self.seat_id)

    @property
    def unit(self) -> SeatUnit:
        return SeatUnit(seat_id=self.id, seat_ref=self.ref)

    @property
    def label(self) -> str:
        return str(self.ref)

    def effective_status(self, now: datetime) -> SeatStatus:
        """A HELD seat whose hold window has passed reads AVAILABLE, whether or not it was swept"""
        if (
            self.status == SeatStatus.HELD
            and self.held_until is not None
            and self.held_until <= now
        ):
            return SeatStatus.AVAILABLE
        return self.status
