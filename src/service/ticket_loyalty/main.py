"""
Ticket Loyalty Service

    granian --interface asgi src.service.ticket_loyalty.main:app
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import create_app
from src.platform.config.core_setting import settings
from src.platform.config.di import cleanup, container, setup
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import TracingConfig
from src.service.ticket_loyalty.driven_adapter import model  # noqa: F401  (registers tables)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    Logger.base.info('🚀 [Ticket Loyalty] Starting up...')

    tracing = TracingConfig(service_name=settings.OTEL_SERVICE_NAME)
    tracing.setup()
    Logger.base.info('📊 [Ticket Loyalty] OpenTelemetry tracing configured')

    setup()
    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Ticket Loyalty] Dependency injection wired')

    database = container.database()
    await database.create_db_and_tables()
    tracing.instrument_sqlalchemy(engine=database.engine)
    Logger.base.info('🗄️  [Ticket Loyalty] Database ready + instrumented')

    yield

    Logger.base.info('🛑 [Ticket Loyalty] Shutting down...')
    await database.dispose()
    tracing.shutdown()
    container.unwire()
    cleanup()
    Logger.base.info('👋 [Ticket Loyalty] Shutdown complete')


app = create_app(lifespan=lifespan)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
