from fastapi import APIRouter, Depends, status

from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.command.join_waitlist_use_case import JoinWaitlistUseCase
from src.service.inventory.app.command.promote_waitlist_use_case import PromoteWaitlistUseCase
from src.service.inventory.domain.entity.waitlist_entry_entity import WaitlistEntry
from src.service.inventory.driving_adapter.http_controller.schema.common_schema import (
    require_actor,
)
from src.service.inventory.driving_adapter.http_controller.schema.waitlist_schema import (
    WaitlistEntryResponse,
    WaitlistJoinRequest,
    WaitlistPromoteRequest,
    WaitlistPromoteResponse,
)


router = APIRouter()


def _entry_response(entry: WaitlistEntry, position: int | None = None) -> WaitlistEntryResponse:
    return WaitlistEntryResponse(
        id=entry.id,
        tier_id=entry.tier_id,
        quantity=entry.quantity,
        status=entry.status.value,
        position=position,
        joined_at=entry.joined_at,
        hold_id=entry.hold_id,
    )


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def join_waitlist(
    request: WaitlistJoinRequest,
    use_case: JoinWaitlistUseCase = Depends(JoinWaitlistUseCase.depends),
) -> WaitlistEntryResponse:
    actor = require_actor(request.actor)
    entry, ahead = await use_case.join_waitlist(
        tier_id=request.tier_id,
        actor_id=actor.id,
        quantity=request.quantity,
        email=request.email,
        name=request.name,
    )
    return _entry_response(entry, position=ahead + 1)


@router.post('/promote')
@Logger.io
async def promote_waitlist(
    request: WaitlistPromoteRequest,
    use_case: PromoteWaitlistUseCase = Depends(PromoteWaitlistUseCase.depends),
) -> WaitlistPromoteResponse:
    require_actor(request.actor)
    offer = await use_case.promote_next(tier_id=request.tier_id)
    if not offer:
        return WaitlistPromoteResponse(promoted=False)
    return WaitlistPromoteResponse(
        promoted=True,
        entry=_entry_response(offer.entry),
        hold_expires_at=offer.hold.expires_at,
    )
