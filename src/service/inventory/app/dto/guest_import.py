from typing import List, Optional
from uuid import UUID

import attrs

from src.service.inventory.domain.value_object.sellable_unit import SeatRef


@attrs.frozen
class GuestImportRow:
    attendee_name: str
    tier_id: Optional[UUID] = None
    attendee_email: Optional[str] = None
    quantity: int = 1
    seat: Optional[SeatRef] = None
    section_id: Optional[str] = None


@attrs.frozen
class GuestImportRowResult:
    row_number: int
    attendee_name: str
    imported: bool
    ticket_codes: List[str] = attrs.field(factory=list)
    error: Optional[str] = None


@attrs.frozen
class GuestImportReport:
    rows: List[GuestImportRowResult]

    @property
    def imported_count(self) -> int:
        return sum(1 for row in self.rows if row.imported)

    @property
    def failed_count(self) -> int:
        return len(self.rows) - self.imported_count
