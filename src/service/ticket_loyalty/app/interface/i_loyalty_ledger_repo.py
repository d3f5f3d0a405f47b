from abc import ABC, abstractmethod
from typing import List
from uuid import UUID

from src.service.ticket_loyalty.domain.entity.loyalty_ledger_entry_entity import (
    LoyaltyLedgerEntry,
)


class ILoyaltyLedgerRepo(ABC):
    """Append-only store: there is deliberately no update or delete"""

    @abstractmethod
    async def append(self, *, entry: LoyaltyLedgerEntry) -> LoyaltyLedgerEntry:
        pass

    @abstractmethod
    async def sum_points(self, *, customer_id: UUID) -> int:
        pass

    @abstractmethod
    async def list_by_customer(self, *, customer_id: UUID) -> List[LoyaltyLedgerEntry]:
        """Newest entry first"""
        pass
