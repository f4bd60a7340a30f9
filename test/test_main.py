"""
Test-specific FastAPI Application

Same routers and wiring as production, without the background sweeper.
Uses shared app factory for common setup.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.platform.app_factory import create_app
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.logging.loguru_io import Logger


@asynccontextmanager
async def lifespan_for_tests(app: FastAPI) -> AsyncIterator[None]:
    """Minimal lifespan for testing: tables + dependency injection only."""
    Logger.base.info('🧪 [Test App] Starting up...')

    database = container.database()
    await database.create_all()
    Logger.base.info('🗄️  [Test App] Database tables created')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Test App] Dependency injection wired')

    yield

    Logger.base.info('🛑 [Test App] Shutting down...')
    await database.dispose()
    container.unwire()
    Logger.base.info('👋 [Test App] Shutdown complete')


app = create_app(
    lifespan=lifespan_for_tests,
    title_suffix=' (Test)',
    description='Test Application - no background sweeper',
    service_name='test-inventory-service',
)
