"""
Pricing resolution - pure domain logic, no infrastructure.

base = unit price x quantity
discount = evaluated discount code (0 when missing, inactive, expired or out of scope)
points = clamp(requested, 0, min(available balance, floor(base)))
total = max(0, base - discount - points)
"""

from datetime import datetime
from decimal import Decimal
import math
from typing import Optional
from uuid import UUID

import attrs

from src.platform.logging.loguru_io import Logger
from src.service.ticket_loyalty.domain.entity.discount_code_entity import DiscountCode
from src.service.ticket_loyalty.domain.loyalty_rules import discount_value
from src.service.ticket_loyalty.domain.money import ZERO, to_money


@attrs.frozen
class PricingResult:
    base_amount: Decimal
    discount_applied: Decimal
    points_to_reserve: int
    total_amount: Decimal

    @property
    def amount_before_points(self) -> Decimal:
        return to_money(max(ZERO, self.base_amount - self.discount_applied))


class PricingResolver:
    @staticmethod
    def points_to_reserve(
        *, base_amount: Decimal, requested_points: Optional[int], available_points: int
    ) -> int:
        ceiling = max(0, min(available_points, math.floor(base_amount)))
        if requested_points is None:
            return ceiling
        return min(max(requested_points, 0), ceiling)

    @staticmethod
    @Logger.io
    def resolve(
        *,
        unit_price: Decimal,
        quantity: int,
        event_id: UUID,
        now: datetime,
        discount_code: Optional[DiscountCode] = None,
        use_loyalty_points: bool = False,
        requested_points: Optional[int] = None,
        available_points: int = 0,
    ) -> PricingResult:
        base_amount = to_money(unit_price * quantity)

        discount = ZERO
        if discount_code is not None:
            discount = discount_code.evaluate(amount=base_amount, event_id=event_id, now=now)

        points = 0
        if use_loyalty_points:
            points = PricingResolver.points_to_reserve(
                base_amount=base_amount,
                requested_points=requested_points,
                available_points=available_points,
            )

        total_amount = max(ZERO, base_amount - discount - discount_value(points))
        return PricingResult(
            base_amount=base_amount,
            discount_applied=discount,
            points_to_reserve=points,
            total_amount=to_money(total_amount),
        )
