from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

import attrs

from src.service.ticket_loyalty.domain.enum.payment_enum import PaymentMethod, PaymentStatus


@attrs.frozen
class TicketPaymentStatus:
    ticket_id: UUID
    is_paid: bool
    payment_status: PaymentStatus
    amount: Decimal
    has_qr_code: bool
    paid_at: Optional[datetime] = None
    payment_method: Optional[PaymentMethod] = None
