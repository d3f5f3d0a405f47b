"""
FastAPI app factory shared by `main.py` and the test client.

The caller owns the lifespan (DI wiring, schema creation), so tests can swap it
for one that points the container at an in-memory database.
"""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Any

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from src.platform.config.core_setting import settings
from src.platform.exception.exception_handlers import register_exception_handlers
from src.platform.observability.tracing import TracingConfig
from src.service.ticket_loyalty.driving_adapter.http_controller.event_controller import (
    discount_code_router,
    event_router,
)
from src.service.ticket_loyalty.driving_adapter.http_controller.loyalty_controller import (
    router as loyalty_router,
)
from src.service.ticket_loyalty.driving_adapter.http_controller.payment_controller import (
    router as payment_router,
)
from src.service.ticket_loyalty.driving_adapter.http_controller.ticket_controller import (
    router as ticket_router,
)


# (router, tag); mounted under /api/<tag>
API_ROUTERS: tuple[tuple[APIRouter, str], ...] = (
    (event_router, 'event'),
    (discount_code_router, 'discount_code'),
    (ticket_router, 'ticket'),
    (payment_router, 'payment'),
    (loyalty_router, 'loyalty'),
)


def create_app(
    *,
    lifespan: Callable[[FastAPI], AbstractAsyncContextManager[Any]],
    title_suffix: str = '',
) -> FastAPI:
    app = FastAPI(
        title=f'{settings.PROJECT_NAME}{title_suffix}',
        description='Event ticket booking with a redeemable loyalty points ledger',
        version=settings.VERSION,
        lifespan=lifespan,
    )

    # Instrument before routes are mounted
    TracingConfig(service_name=settings.OTEL_SERVICE_NAME).instrument_fastapi(app=app)

    app.add_middleware(
        CORSMiddleware,  # type: ignore
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )
    register_exception_handlers(app)

    for router, tag in API_ROUTERS:
        app.include_router(router, prefix=f'/api/{tag}', tags=[tag])

    @app.get('/health', include_in_schema=False)
    async def health_check() -> dict[str, str]:
        return {'status': 'healthy', 'service': settings.PROJECT_NAME, 'env': settings.DEPLOY_ENV}

    @app.get('/metrics', include_in_schema=False)
    async def get_metrics() -> PlainTextResponse:
        return PlainTextResponse(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    return app
