from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.service.ticket_loyalty.domain.entity.event_entity import Event, PriceTier


class IEventRepo(ABC):
    """Repository interface for events and their price tiers"""

    @abstractmethod
    async def create(self, *, event: Event) -> Event:
        pass

    @abstractmethod
    async def get_by_id(self, *, event_id: UUID) -> Optional[Event]:
        pass

    @abstractmethod
    async def get_price_tier(self, *, event_id: UUID, price_tier_id: UUID) -> Optional[PriceTier]:
        """Price tier scoped to its event; None when the pairing does not exist"""
        pass

    @abstractmethod
    async def decrement_stock(self, *, price_tier_id: UUID, quantity: int) -> bool:
        """
        Conditionally subtract quantity from remaining_stock.

        Returns:
            False when the tier no longer has enough stock (nothing is written)
        """
        pass
