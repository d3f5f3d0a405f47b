from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

import attrs
from uuid_utils.compat import uuid7

from src.service.ticket_loyalty.domain.enum.payment_enum import PaymentMethod, PaymentStatus


@attrs.define
class Payment:
    ticket_id: UUID
    customer_id: UUID
    amount: Decimal
    payment_method: PaymentMethod
    paid_at: datetime
    transaction_id: Optional[str] = None
    status: PaymentStatus = PaymentStatus.COMPLETED
    id: UUID = attrs.field(factory=uuid7)
