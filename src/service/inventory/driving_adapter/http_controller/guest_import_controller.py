from fastapi import APIRouter, Depends

from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.command.import_guest_list_use_case import ImportGuestListUseCase
from src.service.inventory.app.dto.guest_import import GuestImportRow
from src.service.inventory.driving_adapter.http_controller.schema.common_schema import (
    require_actor,
)
from src.service.inventory.driving_adapter.http_controller.schema.guest_import_schema import (
    GuestImportRequest,
    GuestImportResponse,
    GuestImportRowResponse,
)


router = APIRouter()


@router.post('')
@Logger.io
async def import_guest_list(
    request: GuestImportRequest,
    use_case: ImportGuestListUseCase = Depends(ImportGuestListUseCase.depends),
) -> GuestImportResponse:
    """Per-row report: failed rows carry the reason, the rest are imported"""
    actor = require_actor(request.actor)
    report = await use_case.import_guests(
        event_id=request.event_id,
        import_id=actor.id,
        rows=[
            GuestImportRow(
                attendee_name=row.attendee_name,
                attendee_email=row.attendee_email,
                tier_id=row.tier_id,
                quantity=row.quantity,
                seat=row.seat.to_value() if row.seat else None,
                section_id=row.section_id,
            )
            for row in request.rows
        ],
    )
    return GuestImportResponse(
        imported=report.imported_count,
        failed=report.failed_count,
        rows=[
            GuestImportRowResponse(
                row_number=row.row_number,
                attendee_name=row.attendee_name,
                imported=row.imported,
                ticket_codes=row.ticket_codes,
                error=row.error,
            )
            for row in report.rows
        ],
    )
