from datetime import datetime
from decimal import Decimal
import math
from typing import Optional
from uuid import UUID

import attrs
from uuid_utils.compat import uuid7

from src.platform.exception.exceptions import DomainError, ForbiddenError
from src.platform.logging.loguru_io import Logger
from src.service.ticket_loyalty.domain.loyalty_rules import discount_value
from src.service.ticket_loyalty.domain.money import ZERO, to_money


@attrs.define
class Ticket:
    customer_id: UUID
    event_id: UUID
    price_tier_id: UUID
    ticket_number: str
    ticket_code: str
    quantity: int
    total_amount: Decimal
    purchased_at: datetime
    # total_amount before held loyalty points; total = max(0, this - held points)
    amount_before_points: Decimal
    discount_applied: Decimal = ZERO
    is_paid: bool = False
    points_earned: int = 0
    points_redeemed: int = 0
    qr_code_path: Optional[str] = None
    paid_at: Optional[datetime] = None
    id: UUID = attrs.field(factory=uuid7)

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        customer_id: UUID,
        event_id: UUID,
        price_tier_id: UUID,
        ticket_number: str,
        ticket_code: str,
        quantity: int,
        total_amount: Decimal,
        discount_applied: Decimal,
        purchased_at: datetime,
        amount_before_points: Optional[Decimal] = None,
    ) -> 'Ticket':
        if quantity < 1:
            raise DomainError('quantity must be at least 1')
        if total_amount < 0:
            raise DomainError('total amount cannot be negative')

        return cls(
            customer_id=customer_id,
            event_id=event_id,
            price_tier_id=price_tier_id,
            ticket_number=ticket_number,
            ticket_code=ticket_code,
            quantity=quantity,
            total_amount=to_money(total_amount),
            discount_applied=to_money(discount_applied),
            purchased_at=purchased_at,
            amount_before_points=to_money(
                total_amount if amount_before_points is None else amount_before_points
            ),
        )

    def ensure_owned_by(self, customer_id: UUID) -> None:
        if self.customer_id != customer_id:
            raise ForbiddenError('You can only access your own tickets')

    def ensure_unpaid(self) -> None:
        if self.is_paid:
            raise DomainError('Ticket is already paid')

    def apply_promotion(self, *, discount: Decimal) -> 'Ticket':
        self.ensure_unpaid()
        return attrs.evolve(
            self,
            total_amount=max(ZERO, to_money(self.total_amount - discount)),
            amount_before_points=max(ZERO, to_money(self.amount_before_points - discount)),
            discount_applied=to_money(self.discount_applied + discount),
        )

    @property
    def max_redeemable_points(self) -> int:
        return math.floor(self.amount_before_points)

    def reprice_for_points(self, *, points: int) -> 'Ticket':
        """Price the unpaid ticket for a new points hold (0 when the hold is released)"""
        self.ensure_unpaid()
        if points > self.max_redeemable_points:
            raise DomainError(
                f'At most {self.max_redeemable_points} points can be redeemed on this ticket'
            )
        return attrs.evolve(
            self,
            total_amount=max(ZERO, to_money(self.amount_before_points - discount_value(points))),
        )

    def mark_as_paid(
        self, *, paid_at: datetime, points_earned: int, points_redeemed: int
    ) -> 'Ticket':
        self.ensure_unpaid()
        return attrs.evolve(
            self,
            is_paid=True,
            paid_at=paid_at,
            points_earned=points_earned,
            points_redeemed=points_redeemed,
        )

    def award_points(self, *, points_earned: int) -> 'Ticket':
        return attrs.evolve(self, points_earned=points_earned)

    def attach_qr_code(self, *, qr_code_path: str) -> 'Ticket':
        return attrs.evolve(self, qr_code_path=qr_code_path)

    @property
    def qr_payload(self) -> str:
        return f'TICKET:{self.ticket_code}|EVENT:{self.event_id}|CUSTOMER:{self.customer_id}'

    @property
    def qr_file_name(self) -> str:
        return f'{self.ticket_code}.png'
