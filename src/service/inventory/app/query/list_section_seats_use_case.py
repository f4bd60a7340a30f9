"""
List Section Seats Use Case

Seat map of one section (optionally one row or table) in layout order, each
seat with its status as of now, plus per-status totals.
"""

from collections import Counter
from typing import List, Optional, Self
from uuid import UUID

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.clock.utc_clock import Clock
from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.inventory.domain.entity.seat_entity import Seat
from src.service.inventory.domain.enum.inventory_status import SeatStatus


@attrs.frozen
class SeatView:
    seat: Seat
    status: SeatStatus


@attrs.frozen
class SectionSeats:
    event_id: UUID
    section_id: str
    seats: List[SeatView]

    @property
    def totals(self) -> dict[str, int]:
        counts = Counter(view.status for view in self.seats)
        return {str(status): counts.get(status, 0) for status in SeatStatus}


class ListSectionSeatsUseCase:
    def __init__(self, *, uow_factory: UnitOfWorkFactory, clock: Clock) -> None:
        self.uow_factory = uow_factory
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
        clock: Clock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(uow_factory=uow_factory, clock=clock)

    @Logger.io
    async def list_seats(
        self, *, event_id: UUID, section_id: str, row_id: Optional[str] = None
    ) -> SectionSeats:
        now = self.clock()
        async with self.uow_factory() as uow:
            seats = await uow.inventory_store.list_seats(
                event_id=event_id, section_id=section_id, row_id=row_id
            )
        if not seats:
            raise NotFoundError(f'Section {section_id} not found')
        return SectionSeats(
            event_id=event_id,
            section_id=section_id,
            seats=[SeatView(seat=seat, status=seat.effective_status(now)) for seat in seats],
        )
