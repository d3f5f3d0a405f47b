from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

import attrs
from uuid_utils.compat import uuid7

from src.platform.exception.exceptions import DomainError
from src.service.ticket_loyalty.domain.enum.discount_type import DiscountType
from src.service.ticket_loyalty.domain.money import ZERO, to_money


@attrs.define
class DiscountCode:
    code: str
    discount_type: DiscountType
    value: Decimal
    valid_from: datetime
    valid_to: datetime
    event_id: Optional[UUID] = None
    is_active: bool = True
    id: UUID = attrs.field(factory=uuid7)

    @classmethod
    def create(
        cls,
        *,
        code: str,
        discount_type: DiscountType,
        value: Decimal,
        valid_from: datetime,
        valid_to: datetime,
        event_id: Optional[UUID] = None,
    ) -> 'DiscountCode':
        code = code.strip().upper()
        if not code:
            raise DomainError('Discount code cannot be empty')
        if value <= 0:
            raise DomainError('Discount value must be positive')
        if discount_type == DiscountType.PERCENTAGE and value > 100:
            raise DomainError('Percentage discount cannot exceed 100')
        if valid_to <= valid_from:
            raise DomainError('valid_to must be later than valid_from')

        return cls(
            code=code,
            discount_type=discount_type,
            value=to_money(value),
            valid_from=valid_from,
            valid_to=valid_to,
            event_id=event_id,
        )

    def is_applicable(self, *, event_id: UUID, now: datetime) -> bool:
        if not self.is_active:
            return False
        if not (self.valid_from <= now <= self.valid_to):
            return False
        return self.event_id is None or self.event_id == event_id

    def evaluate(self, *, amount: Decimal, event_id: UUID, now: datetime) -> Decimal:
        """Discount this code grants on `amount`; 0 when the code does not apply."""
        if amount <= 0 or not self.is_applicable(event_id=event_id, now=now):
            return ZERO
        if self.discount_type == DiscountType.PERCENTAGE:
            return to_money(amount * self.value / 100)
        return to_money(min(self.value, amount))
