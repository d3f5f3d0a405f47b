from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel

from src.service.ticket_loyalty.domain.entity.loyalty_ledger_entry_entity import (
    LoyaltyLedgerEntry,
)
from src.service.ticket_loyalty.domain.enum.ledger_entry_type import LedgerEntryType


class LoyaltyBalanceResponse(BaseModel):
    customer_id: UUID
    balance: int
    available_balance: int
    available_discount_value: Decimal


class LoyaltyHistoryEntryResponse(BaseModel):
    id: UUID
    points: int
    entry_type: LedgerEntryType
    description: str
    created_at: datetime

    @classmethod
    def from_entity(cls, entry: LoyaltyLedgerEntry) -> 'LoyaltyHistoryEntryResponse':
        return cls(
            id=entry.id,
            points=entry.points,
            entry_type=entry.entry_type,
            description=entry.description,
            created_at=entry.created_at,
        )


class PointsEstimateResponse(BaseModel):
    amount: Decimal
    estimated_points: int


class DiscountValueResponse(BaseModel):
    points: int
    discount_value: Decimal
