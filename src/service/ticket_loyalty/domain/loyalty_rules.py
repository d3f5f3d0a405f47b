"""
Loyalty point rules

Two earning formulas coexist on purpose, each bound to its own call site:

- estimated_points_for: 10% of a spend amount. Used for estimates shown before
  payment and by the manual award-only path.
- points_earned_on_confirmation: one point per 10 currency units. Used when a
  payment confirmation finalizes a ticket.

They agree on whole amounts and may differ by rounding otherwise.
"""

from decimal import Decimal
import math

from src.service.ticket_loyalty.domain.money import to_money


EARNING_RATE = Decimal('0.10')
CURRENCY_PER_POINT = Decimal('10')
POINT_VALUE = Decimal('1')  # 1 point = 1 currency unit


def estimated_points_for(amount: Decimal) -> int:
    if amount <= 0:
        return 0
    return math.floor(amount * EARNING_RATE)


def points_earned_on_confirmation(amount: Decimal) -> int:
    if amount <= 0:
        return 0
    return math.floor(amount / CURRENCY_PER_POINT)


def discount_value(points: int) -> Decimal:
    return to_money(max(points, 0) * POINT_VALUE)
