from uuid import UUID

from fastapi import APIRouter, Depends, status
from opentelemetry import trace
import orjson

from src.platform.logging.loguru_io import Logger
from src.service.ticket_loyalty.app.command.award_loyalty_points_use_case import (
    AwardLoyaltyPointsUseCase,
)
from src.service.ticket_loyalty.app.command.confirm_payment_use_case import ConfirmPaymentUseCase
from src.service.ticket_loyalty.app.command.create_payment_session_use_case import (
    CreatePaymentSessionUseCase,
)
from src.service.ticket_loyalty.app.query.get_payment_status_use_case import GetPaymentStatusUseCase
from src.service.ticket_loyalty.domain.enum.payment_enum import PaymentSignal
from src.service.ticket_loyalty.driving_adapter.http_controller.auth.customer_identity import (
    get_current_customer_id,
)
from src.service.ticket_loyalty.driving_adapter.http_controller.schema.payment_schema import (
    PaymentSessionRequest,
    PaymentSessionResponse,
    PaymentStatusResponse,
    PaymentWebhookRequest,
    PaymentWebhookResponse,
)
from src.service.ticket_loyalty.driving_adapter.http_controller.schema.ticket_schema import (
    TicketResponse,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.post('/session', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_payment_session(
    request: PaymentSessionRequest,
    customer_id: UUID = Depends(get_current_customer_id),
    use_case: CreatePaymentSessionUseCase = Depends(CreatePaymentSessionUseCase.depends),
) -> PaymentSessionResponse:
    session = await use_case.create(ticket_id=request.ticket_id, customer_id=customer_id)
    return PaymentSessionResponse(
        session_id=session.session_id, ticket_id=session.ticket_id, amount=session.amount
    )


@router.post('/webhook')
@Logger.io
async def payment_webhook(
    request: PaymentWebhookRequest,
    use_case: ConfirmPaymentUseCase = Depends(ConfirmPaymentUseCase.depends),
) -> PaymentWebhookResponse:
    with tracer.start_as_current_span('controller.payment_webhook') as span:
        span.set_attribute('ticket.id', str(request.ticket_id))
        span.set_attribute('payment.status', request.status.value)
        Logger.base.info(
            f'📨 [WEBHOOK] {orjson.dumps(request.model_dump(mode="json")).decode()}'
        )

        if request.status == PaymentSignal.FAILED:
            # The points hold stays open until it expires or is rolled back
            Logger.base.warning(f'❌ [WEBHOOK] Payment failed for ticket {request.ticket_id}')
            return PaymentWebhookResponse(
                received=True, ticket_id=request.ticket_id, status=request.status, is_paid=False
            )

        ticket = await use_case.confirm(
            ticket_id=request.ticket_id, transaction_id=request.transaction_id
        )
        return PaymentWebhookResponse(
            received=True, ticket_id=ticket.id, status=request.status, is_paid=ticket.is_paid
        )


@router.post('/{ticket_id}/mark_paid')
@Logger.io
async def mark_ticket_paid(
    ticket_id: UUID,
    customer_id: UUID = Depends(get_current_customer_id),
    use_case: AwardLoyaltyPointsUseCase = Depends(AwardLoyaltyPointsUseCase.depends),
) -> TicketResponse:
    ticket = await use_case.award(ticket_id=ticket_id, customer_id=customer_id)
    return TicketResponse.from_entity(ticket)


@router.get('/{ticket_id}/status')
@Logger.io
async def get_payment_status(
    ticket_id: UUID,
    customer_id: UUID = Depends(get_current_customer_id),
    use_case: GetPaymentStatusUseCase = Depends(GetPaymentStatusUseCase.depends),
) -> PaymentStatusResponse:
    payment_status = await use_case.get(ticket_id=ticket_id, customer_id=customer_id)
    return PaymentStatusResponse.from_status(payment_status)
