from uuid import UUID

from fastapi import APIRouter, Depends, status
from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.command.cancel_hold_use_case import CancelHoldUseCase
from src.service.inventory.app.command.confirm_hold_use_case import ConfirmHoldUseCase
from src.service.inventory.app.command.create_hold_use_case import CreateHoldUseCase
from src.service.inventory.app.command.sweep_expired_holds_use_case import (
    SweepExpiredHoldsUseCase,
)
from src.service.inventory.app.dto.allocation_request import AllocationRequest
from src.service.inventory.app.query.get_hold_use_case import GetHoldUseCase
from src.service.inventory.driving_adapter.http_controller.schema.common_schema import (
    TicketResponse,
    require_actor,
)
from src.service.inventory.driving_adapter.http_controller.schema.hold_schema import (
    ConfirmResponse,
    HoldCancelRequest,
    HoldConfirmRequest,
    HoldCreateRequest,
    HoldResponse,
    SweepRequest,
    SweepResponse,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_hold(
    request: HoldCreateRequest,
    use_case: CreateHoldUseCase = Depends(CreateHoldUseCase.depends),
) -> HoldResponse:
    actor = require_actor(request.actor)
    with tracer.start_as_current_span('controller.create_hold') as span:
        span.set_attribute('event_id', str(request.event_id))
        span.set_attribute('actor.kind', str(actor.kind))

        hold = await use_case.create_hold(
            request=AllocationRequest(
                event_id=request.event_id,
                quantity=request.quantity,
                tier_id=request.tier_id,
                seats=[seat.to_value() for seat in request.seats],
                section_id=request.section_id,
                row_id=request.row_id,
            ),
            actor=actor,
            ttl_seconds=request.ttl_seconds,
            payment_ref=request.payment_ref,
        )
        span.set_attribute('hold.id', str(hold.id))
        return HoldResponse.from_entity(hold)


@router.post('/sweep')
@Logger.io
async def sweep_expired_holds(
    request: SweepRequest,
    use_case: SweepExpiredHoldsUseCase = Depends(SweepExpiredHoldsUseCase.depends),
) -> SweepResponse:
    return SweepResponse(expired=await use_case.sweep(limit=request.limit))


@router.get('/{hold_id}')
@Logger.io
async def get_hold(
    hold_id: UUID,
    use_case: GetHoldUseCase = Depends(GetHoldUseCase.depends),
) -> HoldResponse:
    view = await use_case.get_hold(hold_id=hold_id)
    return HoldResponse.from_entity(view.hold, status=view.status.value, tickets=view.tickets)


@router.post('/{hold_id}/confirm')
@Logger.io
async def confirm_hold(
    hold_id: UUID,
    request: HoldConfirmRequest,
    use_case: ConfirmHoldUseCase = Depends(ConfirmHoldUseCase.depends),
) -> ConfirmResponse:
    require_actor(request.actor)
    tickets = await use_case.confirm_hold(hold_id=hold_id, sale_context=request.to_value())
    return ConfirmResponse(
        hold_id=hold_id, tickets=[TicketResponse.from_entity(ticket) for ticket in tickets]
    )


@router.post('/{hold_id}/cancel')
@Logger.io
async def cancel_hold(
    hold_id: UUID,
    request: HoldCancelRequest,
    use_case: CancelHoldUseCase = Depends(CancelHoldUseCase.depends),
) -> HoldResponse:
    require_actor(request.actor)
    hold = await use_case.cancel_hold(hold_id=hold_id)
    return HoldResponse.from_entity(hold)
