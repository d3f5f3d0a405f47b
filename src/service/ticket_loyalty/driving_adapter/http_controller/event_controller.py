from uuid import UUID

from fastapi import APIRouter, Depends, status
from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.ticket_loyalty.app.command.create_discount_code_use_case import (
    CreateDiscountCodeUseCase,
)
from src.service.ticket_loyalty.app.command.create_event_use_case import CreateEventUseCase
from src.service.ticket_loyalty.app.query.get_event_use_case import GetEventUseCase
from src.service.ticket_loyalty.driving_adapter.http_controller.schema.event_schema import (
    DiscountCodeCreateRequest,
    DiscountCodeResponse,
    EventCreateRequest,
    EventResponse,
)


event_router = APIRouter()
discount_code_router = APIRouter()
tracer = trace.get_tracer(__name__)


@event_router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_event(
    request: EventCreateRequest,
    use_case: CreateEventUseCase = Depends(CreateEventUseCase.depends),
) -> EventResponse:
    with tracer.start_as_current_span('controller.create_event'):
        event = await use_case.create(
            name=request.name,
            venue_name=request.venue_name,
            starts_at=request.starts_at,
            price_tiers=[(tier.name, tier.price, tier.stock) for tier in request.price_tiers],
        )
        return EventResponse.from_entity(event)


@event_router.get('/{event_id}')
@Logger.io
async def get_event(
    event_id: UUID,
    use_case: GetEventUseCase = Depends(GetEventUseCase.depends),
) -> EventResponse:
    event = await use_case.get(event_id=event_id)
    return EventResponse.from_entity(event)


@discount_code_router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_discount_code(
    request: DiscountCodeCreateRequest,
    use_case: CreateDiscountCodeUseCase = Depends(CreateDiscountCodeUseCase.depends),
) -> DiscountCodeResponse:
    discount_code = await use_case.create(
        code=request.code,
        discount_type=request.discount_type,
        value=request.value,
        valid_from=request.valid_from,
        valid_to=request.valid_to,
        event_id=request.event_id,
    )
    return DiscountCodeResponse.from_entity(discount_code)
