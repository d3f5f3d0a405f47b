from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional
from uuid import UUID


class IEmailNotifier(ABC):
    @abstractmethod
    async def send_ticket_confirmation(
        self,
        *,
        customer_id: UUID,
        ticket_number: str,
        total_amount: Decimal,
        points_earned: int,
        points_redeemed: int,
        qr_code_png: Optional[bytes] = None,
    ) -> bool:
        pass
