from abc import ABC, abstractmethod
from decimal import Decimal
from uuid import UUID

import attrs


@attrs.frozen
class PaymentSession:
    session_id: str
    ticket_id: UUID
    amount: Decimal


class IPaymentGateway(ABC):
    @abstractmethod
    async def create_session(self, *, ticket_id: UUID, amount: Decimal) -> PaymentSession:
        pass
