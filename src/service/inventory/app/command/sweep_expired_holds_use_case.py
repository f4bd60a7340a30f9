"""
Sweep Expired Holds Use Case

Expiry is authoritative at read time; the sweep only makes storage catch up
so tier counters and seat rows stop carrying dead holds. Runs from the
background loop in the application lifespan and from POST /api/hold/sweep.
"""

from typing import Optional, Self

import anyio
from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from sqlalchemy.exc import SQLAlchemyError

from src.platform.clock.utc_clock import Clock
from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import CustomBaseError
from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.interface.i_inventory_release_notifier import (
    IInventoryReleaseNotifier,
)
from src.service.inventory.app.reservation_helper.hold_release_executor import (
    HoldReleaseExecutor,
)


class SweepExpiredHoldsUseCase:
    def __init__(
        self,
        *,
        uow_factory: UnitOfWorkFactory,
        release_executor: HoldReleaseExecutor,
        release_notifier: IInventoryReleaseNotifier,
        clock: Clock,
    ) -> None:
        self.uow_factory = uow_factory
        self.release_executor = release_executor
        self.release_notifier = release_notifier
        self.clock = clock
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
        release_executor: HoldReleaseExecutor = Depends(Provide[Container.release_executor]),
        release_notifier: IInventoryReleaseNotifier = Depends(
            Provide[Container.release_notifier]
        ),
        clock: Clock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(
            uow_factory=uow_factory,
            release_executor=release_executor,
            release_notifier=release_notifier,
            clock=clock,
        )

    @Logger.io
    async def sweep(self, *, limit: Optional[int] = None) -> int:
        """Returns how many holds were expired"""
        batch = limit or settings.HOLD_SWEEP_BATCH_SIZE
        with self.tracer.start_as_current_span('use_case.sweep_expired_holds'):
            result = await self.release_executor.expire_and_notify(
                uow_factory=self.uow_factory,
                notifier=self.release_notifier,
                now=self.clock(),
                limit=batch,
            )

        if result.holds_expired:
            Logger.base.info(f'🧹 [SWEEP] Expired {result.holds_expired} holds')
        return result.holds_expired

    async def run_forever(self, *, interval_seconds: float) -> None:
        """A failed round is logged and retried on the next tick; only cancellation stops the loop"""
        Logger.base.info(f'🧹 [SWEEP] Background sweeper every {interval_seconds}s')
        while True:
            await anyio.sleep(interval_seconds)
            try:
                await self.sweep()
            except CustomBaseError as e:
                Logger.base.warning(f'⚠️ [SWEEP] Sweep round failed: {e.message}')
            except SQLAlchemyError:
                Logger.base.exception('💥 [SWEEP] Sweep round failed on the database')
