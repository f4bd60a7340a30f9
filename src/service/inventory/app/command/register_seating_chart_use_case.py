"""
Register Seating Chart Use Case

Snapshots a chart topology (sections -> rows or tables -> seats) into seat
rows. The chart itself is not stored, only the seats it produces.
"""

from typing import List, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from uuid_utils.compat import uuid7

from src.platform.config.di import Container
from src.platform.exception.exceptions import DomainError
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.dto.seating_chart import ChartSection
from src.service.inventory.domain.entity.seat_entity import Seat
from src.service.inventory.domain.inventory_errors import TierNotFoundError


class RegisterSeatingChartUseCase:
    def __init__(self, *, uow_factory: UnitOfWorkFactory) -> None:
        self.uow_factory = uow_factory
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
    ) -> Self:
        return cls(uow_factory=uow_factory)

    @staticmethod
    def _build_seats(*, event_id: UUID, chart_id: str, sections: List[ChartSection]) -> List[Seat]:
        seats: List[Seat] = []
        seen = set()
        for section in sections:
            if section.price < 0:
                raise DomainError(f'Section {section.section_id} price must not be negative', 400)
            for row_index, container in enumerate(section.containers):
                for seat_index, chart_seat in enumerate(container.seats):
                    key = (section.section_id, container.container_id, chart_seat.seat_id)
                    if key in seen:
                        raise DomainError(f'Duplicate seat {"-".join(key)} in chart', 400)
                    seen.add(key)
                    seats.append(
                        Seat(
                            id=uuid7(),
                            event_id=event_id,
                            chart_id=chart_id,
                            section_id=section.section_id,
                            row_id=container.container_id,
                            seat_id=chart_seat.seat_id,
                            seat_number=chart_seat.seat_number,
                            row_index=row_index,
                            seat_index=seat_index,
                            container_type=container.container_type,
                            price=section.price if chart_seat.price is None else chart_seat.price,
                            tier_id=section.tier_id,
                            status=chart_seat.initial_status,
                        )
                    )
        return seats

    @Logger.io
    async def register_chart(
        self, *, event_id: UUID, chart_id: str, sections: List[ChartSection]
    ) -> List[Seat]:
        seats = self._build_seats(event_id=event_id, chart_id=chart_id, sections=sections)
        if not seats:
            raise DomainError('Seating chart has no seats', 400)

        with self.tracer.start_as_current_span(
            'use_case.register_chart',
            attributes={'event.id': str(event_id), 'chart.id': chart_id, 'seats': len(seats)},
        ):
            async with self.uow_factory() as uow:
                for tier_id in {section.tier_id for section in sections if section.tier_id}:
                    if not await uow.inventory_store.get_tier(tier_id=tier_id):
                        raise TierNotFoundError(f'Ticket tier {tier_id} not found')
                await uow.inventory_store.add_seats(seats=seats)
                await uow.commit()

        Logger.base.info(f'🗺️ [CHART] Registered {chart_id} with {len(seats)} seats')
        return seats
