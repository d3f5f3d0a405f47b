from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from src.service.ticket_loyalty.app.dto.payment_dto import TicketPaymentStatus
from src.service.ticket_loyalty.domain.enum.payment_enum import (
    PaymentMethod,
    PaymentSignal,
    PaymentStatus,
)


class PaymentSessionRequest(BaseModel):
    ticket_id: UUID


class PaymentSessionResponse(BaseModel):
    session_id: str
    ticket_id: UUID
    amount: Decimal


class PaymentWebhookRequest(BaseModel):
    ticket_id: UUID
    status: PaymentSignal
    transaction_id: Optional[str] = None

    model_config = {
        'json_schema_extra': {
            'example': {
                'ticket_id': '01936d8f-5e73-7c4e-a9c5-123456789abc',
                'status': 'succeeded',
                'transaction_id': 'PAY_MOCK_AB12CD34',
            }
        }
    }


class PaymentWebhookResponse(BaseModel):
    received: bool
    ticket_id: UUID
    status: PaymentSignal
    is_paid: bool


class PaymentStatusResponse(BaseModel):
    ticket_id: UUID
    is_paid: bool
    payment_status: PaymentStatus
    amount: Decimal
    has_qr_code: bool
    paid_at: Optional[datetime] = None
    payment_method: Optional[PaymentMethod] = None

    @classmethod
    def from_status(cls, payment_status: TicketPaymentStatus) -> 'PaymentStatusResponse':
        return cls(
            ticket_id=payment_status.ticket_id,
            is_paid=payment_status.is_paid,
            payment_status=payment_status.payment_status,
            amount=payment_status.amount,
            has_qr_code=payment_status.has_qr_code,
            paid_at=payment_status.paid_at,
            payment_method=payment_status.payment_method,
        )
