from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import Response
from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.ticket_loyalty.app.command.apply_promotion_use_case import ApplyPromotionUseCase
from src.service.ticket_loyalty.app.command.book_ticket_use_case import BookTicketUseCase
from src.service.ticket_loyalty.app.command.reserve_loyalty_points_use_case import (
    ReserveLoyaltyPointsUseCase,
)
from src.service.ticket_loyalty.app.command.rollback_loyalty_points_use_case import (
    RollbackLoyaltyPointsUseCase,
)
from src.service.ticket_loyalty.app.query.get_ticket_qr_code_use_case import (
    GetTicketQrCodeUseCase,
)
from src.service.ticket_loyalty.app.query.get_ticket_use_case import GetTicketUseCase
from src.service.ticket_loyalty.app.query.list_customer_tickets_use_case import (
    ListCustomerTicketsUseCase,
)
from src.service.ticket_loyalty.app.query.validate_ticket_use_case import ValidateTicketUseCase
from src.service.ticket_loyalty.driving_adapter.http_controller.auth.customer_identity import (
    get_current_customer_id,
)
from src.service.ticket_loyalty.driving_adapter.http_controller.schema.ticket_schema import (
    ApplyPromotionRequest,
    BookTicketResponse,
    PointsReservationResponse,
    ReservePointsRequest,
    TicketBookRequest,
    TicketListResponse,
    TicketResponse,
    TicketValidationResponse,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def book_ticket(
    request: TicketBookRequest,
    customer_id: UUID = Depends(get_current_customer_id),
    use_case: BookTicketUseCase = Depends(BookTicketUseCase.depends),
) -> BookTicketResponse:
    with tracer.start_as_current_span('controller.book_ticket') as span:
        span.set_attribute('customer.id', str(customer_id))
        span.set_attribute('event.id', str(request.event_id))

        result = await use_case.book(
            customer_id=customer_id,
            event_id=request.event_id,
            price_tier_id=request.price_tier_id,
            quantity=request.quantity,
            discount_code=request.discount_code,
            use_loyalty_points=request.use_loyalty_points,
            points_to_redeem=request.points_to_redeem,
        )

        span.set_attribute('ticket.id', str(result.ticket.id))
        return BookTicketResponse.from_result(result)


@router.get('/my_tickets')
@Logger.io
async def list_my_tickets(
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
    customer_id: UUID = Depends(get_current_customer_id),
    use_case: ListCustomerTicketsUseCase = Depends(ListCustomerTicketsUseCase.depends),
) -> TicketListResponse:
    ticket_page = await use_case.list(customer_id=customer_id, page=page, page_size=page_size)
    return TicketListResponse(
        items=[TicketResponse.from_entity(ticket) for ticket in ticket_page.items],
        total=ticket_page.total,
        page=ticket_page.page,
        page_size=ticket_page.page_size,
    )


@router.get('/validate/{ticket_code}')
@Logger.io
async def validate_ticket(
    ticket_code: str,
    use_case: ValidateTicketUseCase = Depends(ValidateTicketUseCase.depends),
) -> TicketValidationResponse:
    validation = await use_case.validate(ticket_code=ticket_code)
    ticket = validation.ticket
    return TicketValidationResponse(
        is_valid=validation.is_valid,
        message=validation.message,
        ticket_number=ticket.ticket_number if ticket else None,
        event_id=ticket.event_id if ticket else None,
        quantity=ticket.quantity if ticket else None,
    )


@router.get('/{ticket_id}')
@Logger.io
async def get_ticket(
    ticket_id: UUID,
    customer_id: UUID = Depends(get_current_customer_id),
    use_case: GetTicketUseCase = Depends(GetTicketUseCase.depends),
) -> TicketResponse:
    ticket = await use_case.get(ticket_id=ticket_id, customer_id=customer_id)
    return TicketResponse.from_entity(ticket)


@router.get('/{ticket_id}/qr_code', response_class=Response)
@Logger.io(truncate_content=True)
async def get_ticket_qr_code(
    ticket_id: UUID,
    customer_id: UUID = Depends(get_current_customer_id),
    use_case: GetTicketQrCodeUseCase = Depends(GetTicketQrCodeUseCase.depends),
) -> Response:
    png = await use_case.get(ticket_id=ticket_id, customer_id=customer_id)
    return Response(content=png, media_type='image/png')


@router.post('/{ticket_id}/promotion')
@Logger.io
async def apply_promotion(
    ticket_id: UUID,
    request: ApplyPromotionRequest,
    customer_id: UUID = Depends(get_current_customer_id),
    use_case: ApplyPromotionUseCase = Depends(ApplyPromotionUseCase.depends),
) -> TicketResponse:
    ticket = await use_case.apply(ticket_id=ticket_id, customer_id=customer_id, code=request.code)
    return TicketResponse.from_entity(ticket)


@router.post('/{ticket_id}/loyalty_points/reserve')
@Logger.io
async def reserve_loyalty_points(
    ticket_id: UUID,
    request: ReservePointsRequest,
    customer_id: UUID = Depends(get_current_customer_id),
    use_case: ReserveLoyaltyPointsUseCase = Depends(ReserveLoyaltyPointsUseCase.depends),
) -> PointsReservationResponse:
    result = await use_case.reserve(
        ticket_id=ticket_id, customer_id=customer_id, points=request.points
    )
    return PointsReservationResponse.from_result(result)


@router.post('/{ticket_id}/loyalty_points/rollback')
@Logger.io
async def rollback_loyalty_points(
    ticket_id: UUID,
    customer_id: UUID = Depends(get_current_customer_id),
    use_case: RollbackLoyaltyPointsUseCase = Depends(RollbackLoyaltyPointsUseCase.depends),
) -> PointsReservationResponse:
    result = await use_case.rollback(ticket_id=ticket_id, customer_id=customer_id)
    return PointsReservationResponse.from_result(result)
