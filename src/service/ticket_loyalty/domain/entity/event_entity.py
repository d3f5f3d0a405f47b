from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

import attrs
from uuid_utils.compat import uuid7

from src.platform.exception.exceptions import DomainError, InsufficientStockError, NotFoundError
from src.service.ticket_loyalty.domain.money import to_money


@attrs.define
class PriceTier:
    event_id: UUID
    name: str
    price: Decimal
    remaining_stock: int
    is_active: bool = True
    id: UUID = attrs.field(factory=uuid7)

    def ensure_bookable(self, *, quantity: int) -> None:
        if not self.is_active:
            raise NotFoundError('Price tier not found for this event')
        if self.remaining_stock < quantity:
            raise InsufficientStockError(
                f'Only {self.remaining_stock} tickets left in tier "{self.name}"'
            )


@attrs.define
class Event:
    name: str
    venue_name: str
    starts_at: datetime
    price_tiers: List[PriceTier] = attrs.field(factory=list)
    id: UUID = attrs.field(factory=uuid7)
    created_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        *,
        name: str,
        venue_name: str,
        starts_at: datetime,
        price_tiers: list[tuple[str, Decimal, int]],
        now: datetime,
    ) -> 'Event':
        if not name.strip():
            raise DomainError('Event name is required')
        if not price_tiers:
            raise DomainError('At least one price tier is required')

        tier_names = [tier_name.strip() for tier_name, _, _ in price_tiers]
        if len(set(tier_names)) != len(tier_names):
            raise DomainError('Price tier names must be unique within an event')

        event = cls(
            name=name.strip(),
            venue_name=venue_name.strip(),
            starts_at=starts_at,
            created_at=now,
        )
        for tier_name, price, stock in price_tiers:
            if price < 0:
                raise DomainError('Price cannot be negative')
            if stock < 0:
                raise DomainError('Stock cannot be negative')
            event.price_tiers.append(
                PriceTier(
                    event_id=event.id,
                    name=tier_name.strip(),
                    price=to_money(price),
                    remaining_stock=stock,
                )
            )
        return event
