"""
Production FastAPI Application

Inventory API plus the background hold sweeper.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import anyio
from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import create_app
from src.platform.config.core_setting import settings
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import TracingConfig
from src.service.inventory.app.command.sweep_expired_holds_use_case import (
    SweepExpiredHoldsUseCase,
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan: startup and shutdown."""
    Logger.base.info('🚀 [Inventory Service] Starting up...')

    # Setup OpenTelemetry tracing (no-op without an exporter)
    tracing = TracingConfig()
    tracing.setup()
    Logger.base.info('📊 [Inventory Service] OpenTelemetry tracing configured')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Inventory Service] Dependency injection wired')

    database = container.database()
    tracing.instrument_sqlalchemy(engine=database.engine)
    if settings.DB_AUTO_CREATE:
        await database.create_all()
    Logger.base.info('🗄️  [Inventory Service] Database engine ready + instrumented')

    async with anyio.create_task_group() as tg:
        if settings.HOLD_SWEEP_INTERVAL_SECONDS > 0:
            sweeper = SweepExpiredHoldsUseCase(
                uow_factory=container.unit_of_work.provider,
                release_executor=container.release_executor(),
                release_notifier=container.release_notifier(),
                clock=container.clock(),
            )
            tg.start_soon(
                lambda: sweeper.run_forever(interval_seconds=settings.HOLD_SWEEP_INTERVAL_SECONDS)
            )
        Logger.base.info('✅ [Inventory Service] Ready to serve requests')

        yield

        Logger.base.info('🛑 [Inventory Service] Shutting down...')
        tg.cancel_scope.cancel()

    await database.dispose()
    tracing.shutdown()
    container.unwire()

    Logger.base.info('👋 [Inventory Service] Shutdown complete')


app = create_app(lifespan=lifespan)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
