from uuid import UUID

from fastapi import APIRouter, Depends

from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.command.claim_ticket_use_case import ClaimTicketUseCase
from src.service.inventory.app.command.scan_ticket_use_case import ScanTicketUseCase
from src.service.inventory.app.command.transfer_ticket_use_case import TransferTicketUseCase
from src.service.inventory.app.command.void_ticket_use_case import VoidTicketUseCase
from src.service.inventory.driving_adapter.http_controller.schema.common_schema import (
    TicketResponse,
    require_actor,
)
from src.service.inventory.driving_adapter.http_controller.schema.ticket_schema import (
    TicketClaimRequest,
    TicketScanRequest,
    TicketTransferRequest,
    TicketVoidRequest,
)


router = APIRouter()


@router.post('/scan')
@Logger.io
async def scan_ticket(
    request: TicketScanRequest,
    use_case: ScanTicketUseCase = Depends(ScanTicketUseCase.depends),
) -> TicketResponse:
    require_actor(request.actor)
    return TicketResponse.from_entity(await use_case.scan_ticket(code=request.code))


@router.post('/claim')
@Logger.io
async def claim_ticket(
    request: TicketClaimRequest,
    use_case: ClaimTicketUseCase = Depends(ClaimTicketUseCase.depends),
) -> TicketResponse:
    actor = require_actor(request.actor)
    ticket = await use_case.claim_ticket(code=request.code, attendee_id=actor.id)
    return TicketResponse.from_entity(ticket)


@router.post('/{ticket_id}/void')
@Logger.io
async def void_ticket(
    ticket_id: UUID,
    request: TicketVoidRequest,
    use_case: VoidTicketUseCase = Depends(VoidTicketUseCase.depends),
) -> TicketResponse:
    require_actor(request.actor)
    return TicketResponse.from_entity(await use_case.void_ticket(ticket_id=ticket_id))


@router.post('/{ticket_id}/transfer')
@Logger.io
async def transfer_ticket(
    ticket_id: UUID,
    request: TicketTransferRequest,
    use_case: TransferTicketUseCase = Depends(TransferTicketUseCase.depends),
) -> TicketResponse:
    require_actor(request.actor)
    ticket = await use_case.transfer_ticket(
        ticket_id=ticket_id,
        recipient_name=request.recipient_name,
        recipient_email=request.recipient_email,
        recipient_id=request.recipient_id,
    )
    return TicketResponse.from_entity(ticket)
