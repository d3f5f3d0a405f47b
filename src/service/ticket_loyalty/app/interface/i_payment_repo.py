from abc import ABC, abstractmethod
from typing import List
from uuid import UUID

from src.service.ticket_loyalty.domain.entity.payment_entity import Payment


class IPaymentRepo(ABC):
    @abstractmethod
    async def create(self, *, payment: Payment) -> Payment:
        pass

    @abstractmethod
    async def list_by_ticket(self, *, ticket_id: UUID) -> List[Payment]:
        pass
