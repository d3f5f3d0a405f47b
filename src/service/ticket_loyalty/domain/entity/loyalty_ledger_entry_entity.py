from datetime import datetime
from uuid import UUID

import attrs
from uuid_utils.compat import uuid7

from src.service.ticket_loyalty.domain.enum.ledger_entry_type import LedgerEntryType


@attrs.frozen
class LoyaltyLedgerEntry:
    """One signed point movement. Entries are append-only, never edited or deleted."""

    customer_id: UUID
    points: int
    description: str
    created_at: datetime
    id: UUID = attrs.field(factory=uuid7)

    @classmethod
    def earned(
        cls, *, customer_id: UUID, points: int, description: str, now: datetime
    ) -> 'LoyaltyLedgerEntry':
        return cls(customer_id=customer_id, points=points, description=description, created_at=now)

    @classmethod
    def redeemed(
        cls, *, customer_id: UUID, points: int, description: str, now: datetime
    ) -> 'LoyaltyLedgerEntry':
        return cls(
            customer_id=customer_id, points=-points, description=description, created_at=now
        )

    @property
    def entry_type(self) -> LedgerEntryType:
        return LedgerEntryType.EARNED if self.points > 0 else LedgerEntryType.REDEEMED
