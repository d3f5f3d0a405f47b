from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.service.ticket_loyalty.domain.entity.ticket_entity import Ticket


class ITicketRepo(ABC):
    @abstractmethod
    async def create(self, *, ticket: Ticket) -> Ticket:
        pass

    @abstractmethod
    async def get_by_id(self, *, ticket_id: UUID) -> Optional[Ticket]:
        pass

    @abstractmethod
    async def get_by_code(self, *, ticket_code: str) -> Optional[Ticket]:
        pass

    @abstractmethod
    async def exists_with_code(self, *, ticket_code: str) -> bool:
        pass

    @abstractmethod
    async def exists_with_number(self, *, ticket_number: str) -> bool:
        pass

    @abstractmethod
    async def update(self, *, ticket: Ticket) -> Ticket:
        pass

    @abstractmethod
    async def set_qr_code_path(self, *, ticket_id: UUID, qr_code_path: str) -> None:
        """Writes qr_code_path only, other columns are left untouched"""
        pass

    @abstractmethod
    async def list_by_customer(
        self, *, customer_id: UUID, offset: int, limit: int
    ) -> List[Ticket]:
        """Newest purchase first"""
        pass

    @abstractmethod
    async def count_by_customer(self, *, customer_id: UUID) -> int:
        pass
