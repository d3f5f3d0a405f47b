from decimal import Decimal
from uuid import UUID

import attrs


@attrs.frozen
class LoyaltyBalance:
    customer_id: UUID
    balance: int
    available_balance: int
    available_discount_value: Decimal


@attrs.frozen
class PointsReservationResult:
    """Outcome of reserving or rolling back points on one ticket"""

    ticket_id: UUID
    points_reserved: int
    available_balance: int
    total_amount: Decimal
    rolled_back: bool = False
