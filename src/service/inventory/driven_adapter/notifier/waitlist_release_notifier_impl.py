from typing import Optional
from uuid import UUID

from src.platform.clock.utc_clock import Clock
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import ConflictError, CustomBaseError
from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.interface.i_inventory_release_notifier import (
    IInventoryReleaseNotifier,
)
from src.service.inventory.app.reservation_helper.waitlist_promoter import (
    WaitlistOffer,
    WaitlistPromoter,
)


# Per offer: a conflict means another release promoted the head first
MAX_PROMOTION_ATTEMPTS = 3


class WaitlistReleaseNotifierImpl(IInventoryReleaseNotifier):
    """
    Runs after the releasing transaction committed. Each promotion is its own
    transaction, so one failed offer does not undo the release or the others.
    A promotion that loses a race is retried against the new head of the queue.
    """

    def __init__(self, *, uow_factory: UnitOfWorkFactory, promoter: WaitlistPromoter, clock: Clock):
        self.uow_factory = uow_factory
        self.promoter = promoter
        self.clock = clock

    @Logger.io
    async def notify_released(self, *, tier_id: UUID, quantity: int) -> None:
        remaining = quantity
        while remaining > 0:
            offer = await self._promote_with_retry(tier_id=tier_id)
            if not offer:
                return

            Logger.base.info(
                f'📣 [WAITLIST] Entry {offer.entry.id} offered {offer.entry.quantity} '
                f'tickets (hold {offer.hold.id})'
            )
            remaining -= offer.entry.quantity

    async def _promote_with_retry(self, *, tier_id: UUID) -> Optional[WaitlistOffer]:
        for attempt in range(1, MAX_PROMOTION_ATTEMPTS + 1):
            try:
                async with self.uow_factory() as uow:
                    offer = await self.promoter.promote_next(
                        uow, tier_id=tier_id, now=self.clock()
                    )
                    if offer:
                        await uow.commit()
                    return offer
            except ConflictError as e:
                Logger.base.warning(
                    f'🔁 [WAITLIST] Promotion on tier {tier_id} lost a race '
                    f'(attempt {attempt}/{MAX_PROMOTION_ATTEMPTS}): {e.message}'
                )
            except CustomBaseError as e:
                Logger.base.warning(f'⚠️ [WAITLIST] Promotion on tier {tier_id} skipped: {e.message}')
                return None

        Logger.base.error(
            f'❌ [WAITLIST] Promotion on tier {tier_id} gave up after {MAX_PROMOTION_ATTEMPTS} conflicts'
        )
        return None
