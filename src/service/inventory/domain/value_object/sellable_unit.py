from uuid import UUID

import attrs


@attrs.frozen(order=True)
class SeatRef:
    """(section, row, seat) address of a seat within an event; row_id holds the table id for tables"""

    section_id: str
    row_id: str
    seat_id: str

    def __str__(self) -> str:
        return f'{self.section_id}-{self.row_id}-{self.seat_id}'


@attrs.frozen
class TierUnit:
    tier_id: UUID
    quantity: int = attrs.field(default=1)

    @quantity.validator
    def _check_quantity(self, attribute: attrs.Attribute, value: int) -> None:
        if value < 1:
            raise ValueError('quantity must be at least 1')


@attrs.frozen
class SeatUnit:
    seat_id: UUID
    seat_ref: SeatRef


Unit = TierUnit | SeatUnit
