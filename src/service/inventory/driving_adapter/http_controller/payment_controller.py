from fastapi import APIRouter, Depends

from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.command.payment_callback_use_case import (
    PaymentCallbackUseCase,
    PaymentOutcome,
)
from src.service.inventory.driving_adapter.http_controller.schema.common_schema import (
    TicketResponse,
)
from src.service.inventory.driving_adapter.http_controller.schema.hold_schema import (
    PaymentCallbackRequest,
    PaymentCallbackResponse,
)


router = APIRouter()


@router.post('/callback')
@Logger.io
async def payment_callback(
    request: PaymentCallbackRequest,
    use_case: PaymentCallbackUseCase = Depends(PaymentCallbackUseCase.depends),
) -> PaymentCallbackResponse:
    """Gateway webhook; safe to retry, both outcomes are idempotent"""
    result = await use_case.handle(
        payment_ref=request.payment_ref,
        outcome=PaymentOutcome(request.outcome),
        sale_context=request.to_value(),
    )
    return PaymentCallbackResponse(
        payment_ref=request.payment_ref,
        outcome=request.outcome,
        hold_status=result.hold.status.value if result.hold else None,
        tickets=[TicketResponse.from_entity(ticket) for ticket in result.tickets],
    )
