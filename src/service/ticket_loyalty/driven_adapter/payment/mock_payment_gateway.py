from decimal import Decimal
import random
import string
from uuid import UUID

from src.platform.logging.loguru_io import Logger
from src.service.ticket_loyalty.app.interface.i_payment_gateway import (
    IPaymentGateway,
    PaymentSession,
)


class MockPaymentGateway(IPaymentGateway):
    """Hands out PAY_MOCK_ session ids; success is reported back through the webhook"""

    @Logger.io
    async def create_session(self, *, ticket_id: UUID, amount: Decimal) -> PaymentSession:
        session_id = (
            f'PAY_MOCK_{"".join(random.choices(string.ascii_uppercase + string.digits, k=8))}'
        )
        return PaymentSession(session_id=session_id, ticket_id=ticket_id, amount=amount)
