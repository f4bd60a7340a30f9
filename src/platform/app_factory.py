"""
Shared FastAPI App Factory

Provides common app setup for production and test environments.
"""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse, PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from src.platform.config.core_setting import settings
from src.platform.exception.exception_handlers import register_exception_handlers
from src.platform.observability.tracing import TracingConfig
from src.service.inventory.driving_adapter.http_controller.guest_import_controller import (
    router as guest_import_router,
)
from src.service.inventory.driving_adapter.http_controller.hold_controller import (
    router as hold_router,
)
from src.service.inventory.driving_adapter.http_controller.inventory_controller import (
    router as inventory_router,
)
from src.service.inventory.driving_adapter.http_controller.payment_controller import (
    router as payment_router,
)
from src.service.inventory.driving_adapter.http_controller.staff_controller import (
    router as staff_router,
)
from src.service.inventory.driving_adapter.http_controller.ticket_controller import (
    router as ticket_router,
)
from src.service.inventory.driving_adapter.http_controller.waitlist_controller import (
    router as waitlist_router,
)


def create_app(
    *,
    lifespan: Callable[[FastAPI], AbstractAsyncContextManager[Any]],
    title_suffix: str = '',
    description: str = 'Ticket inventory and reservation engine',
    service_name: str = 'inventory-service',
) -> FastAPI:
    """
    Create a configured FastAPI application.

    Args:
        lifespan: Async context manager for app lifespan (startup/shutdown)
        title_suffix: Optional suffix for app title (e.g., " (Test)")
        description: App description
        service_name: Service name for tracing

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title=f'{settings.PROJECT_NAME}{title_suffix}',
        description=description,
        version=settings.VERSION,
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
    )

    # Auto-instrument FastAPI (must be done before mounting routes)
    TracingConfig(service_name=service_name).instrument_fastapi(app=app)

    app.add_middleware(
        CORSMiddleware,  # type: ignore
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    register_exception_handlers(app)

    app.include_router(inventory_router, prefix='/api/inventory', tags=['inventory'])
    app.include_router(hold_router, prefix='/api/hold', tags=['hold'])
    app.include_router(payment_router, prefix='/api/payment', tags=['payment'])
    app.include_router(ticket_router, prefix='/api/ticket', tags=['ticket'])
    app.include_router(staff_router, prefix='/api/staff', tags=['staff'])
    app.include_router(guest_import_router, prefix='/api/guest_import', tags=['guest_import'])
    app.include_router(waitlist_router, prefix='/api/waitlist', tags=['waitlist'])

    _register_common_endpoints(app)

    return app


def _register_common_endpoints(app: FastAPI) -> None:
    """Register health and metrics endpoints."""

    @app.get('/health')
    async def health_check() -> dict[str, str]:
        """Health check endpoint for container orchestration."""
        return {'status': 'healthy', 'service': 'Ticket Inventory Engine'}

    @app.get('/metrics')
    async def get_metrics() -> PlainTextResponse:
        """Prometheus metrics endpoint."""
        return PlainTextResponse(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
