from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status

from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.command.create_tier_use_case import CreateTierUseCase
from src.service.inventory.app.command.delete_seating_chart_use_case import (
    DeleteSeatingChartUseCase,
)
from src.service.inventory.app.command.delete_tier_use_case import DeleteTierUseCase
from src.service.inventory.app.command.register_seating_chart_use_case import (
    RegisterSeatingChartUseCase,
)
from src.service.inventory.app.query.get_seat_status_use_case import GetSeatStatusUseCase
from src.service.inventory.app.query.get_tier_availability_use_case import (
    GetTierAvailabilityUseCase,
)
from src.service.inventory.app.query.list_section_seats_use_case import ListSectionSeatsUseCase
from src.service.inventory.domain.entity.ticket_tier_entity import TicketTier
from src.service.inventory.domain.value_object.sellable_unit import SeatRef
from src.service.inventory.driving_adapter.http_controller.schema.inventory_schema import (
    ChartRegisterRequest,
    ChartRegisterResponse,
    SeatResponse,
    SeatStatusResponse,
    SectionSeatsResponse,
    TierAvailabilityResponse,
    TierCreateRequest,
    TierResponse,
)


router = APIRouter()


def _tier_response(tier: TicketTier) -> TierResponse:
    return TierResponse(
        id=tier.id,
        event_id=tier.event_id,
        name=tier.name,
        description=tier.description,
        price=tier.price,
        quantity=tier.quantity,
        sold=tier.sold,
        held=tier.held,
        staff_reserved=tier.staff_reserved,
        is_active=tier.is_active,
        sale_start=tier.sale_start,
        sale_end=tier.sale_end,
    )


# ========== Tiers ==========


@router.post('/tier', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_tier(
    request: TierCreateRequest,
    use_case: CreateTierUseCase = Depends(CreateTierUseCase.depends),
) -> TierResponse:
    tier = await use_case.create_tier(
        event_id=request.event_id,
        name=request.name,
        price=request.price,
        quantity=request.quantity,
        description=request.description,
        sale_start=request.sale_start,
        sale_end=request.sale_end,
        is_active=request.is_active,
    )
    return _tier_response(tier)


@router.delete('/tier/{tier_id}', status_code=status.HTTP_204_NO_CONTENT)
@Logger.io
async def delete_tier(
    tier_id: UUID,
    use_case: DeleteTierUseCase = Depends(DeleteTierUseCase.depends),
) -> None:
    await use_case.delete_tier(tier_id=tier_id)


@router.get('/tier/{tier_id}/availability')
@Logger.io
async def get_tier_availability(
    tier_id: UUID,
    use_case: GetTierAvailabilityUseCase = Depends(GetTierAvailabilityUseCase.depends),
) -> TierAvailabilityResponse:
    availability = await use_case.get_availability(tier_id=tier_id)
    return TierAvailabilityResponse(
        tier_id=availability.tier.id,
        quantity=availability.tier.quantity,
        sold=availability.tier.sold,
        available=availability.available,
        public_available=availability.public_available,
        staff_reserved=availability.tier.staff_reserved,
    )


# ========== Seating charts ==========


@router.post('/chart', status_code=status.HTTP_201_CREATED)
@Logger.io
async def register_chart(
    request: ChartRegisterRequest,
    use_case: RegisterSeatingChartUseCase = Depends(RegisterSeatingChartUseCase.depends),
) -> ChartRegisterResponse:
    seats = await use_case.register_chart(
        event_id=request.event_id,
        chart_id=request.chart_id,
        sections=[section.to_dto() for section in request.sections],
    )
    return ChartRegisterResponse(
        event_id=request.event_id, chart_id=request.chart_id, seat_count=len(seats)
    )


@router.delete('/chart/{event_id}/{chart_id}', status_code=status.HTTP_204_NO_CONTENT)
@Logger.io
async def delete_chart(
    event_id: UUID,
    chart_id: str,
    use_case: DeleteSeatingChartUseCase = Depends(DeleteSeatingChartUseCase.depends),
) -> None:
    await use_case.delete_chart(event_id=event_id, chart_id=chart_id)


# ========== Seats ==========


@router.get('/event/{event_id}/seat')
@Logger.io
async def get_seat_status(
    event_id: UUID,
    section_id: str,
    row_id: str,
    seat_id: str,
    use_case: GetSeatStatusUseCase = Depends(GetSeatStatusUseCase.depends),
) -> SeatStatusResponse:
    seat_status = await use_case.get_seat_status(
        event_id=event_id,
        seat_ref=SeatRef(section_id=section_id, row_id=row_id, seat_id=seat_id),
    )
    return SeatStatusResponse(
        event_id=event_id,
        section_id=section_id,
        row_id=row_id,
        seat_id=seat_id,
        status=seat_status.value,
    )


@router.get('/event/{event_id}/section/{section_id}/seats')
@Logger.io
async def list_section_seats(
    event_id: UUID,
    section_id: str,
    row_id: Optional[str] = None,
    use_case: ListSectionSeatsUseCase = Depends(ListSectionSeatsUseCase.depends),
) -> SectionSeatsResponse:
    section = await use_case.list_seats(event_id=event_id, section_id=section_id, row_id=row_id)
    return SectionSeatsResponse(
        event_id=event_id,
        section_id=section_id,
        total=len(section.seats),
        totals=section.totals,
        seats=[
            SeatResponse(
                id=view.seat.id,
                section_id=view.seat.section_id,
                row_id=view.seat.row_id,
                seat_id=view.seat.seat_id,
                seat_number=view.seat.seat_number,
                container_type=view.seat.container_type.value,
                price=view.seat.price,
                status=view.status.value,
                tier_id=view.seat.tier_id,
            )
            for view in section.seats
        ],
    )
