from enum import StrEnum


class LedgerEntryType(StrEnum):
    """Derived from the sign of a ledger entry, never stored."""

    EARNED = 'earned'
    REDEEMED = 'redeemed'
