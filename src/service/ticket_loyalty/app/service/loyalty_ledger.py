"""
Loyalty Ledger

Append-only point ledger of a customer. Balance is the sum of all entries;
available balance additionally subtracts the points held by open reservations.
Must be used inside an entered unit of work.
"""

from typing import List
from uuid import UUID

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import DomainError, InsufficientBalanceError
from src.platform.logging.loguru_io import Logger
from src.service.ticket_loyalty.app.interface.i_clock import IClock
from src.service.ticket_loyalty.domain.entity.loyalty_ledger_entry_entity import (
    LoyaltyLedgerEntry,
)


class LoyaltyLedger:
    def __init__(self, *, uow: AbstractUnitOfWork, clock: IClock) -> None:
        self.uow = uow
        self.clock = clock

    async def balance(self, *, customer_id: UUID) -> int:
        return await self.uow.loyalty_ledger_repo.sum_points(customer_id=customer_id)

    async def held_points(self, *, customer_id: UUID) -> int:
        """Purge expired holds, then sum what the open ones still keep aside"""
        now = self.clock.now()
        await self.uow.point_reservation_repo.delete_expired(customer_id=customer_id, now=now)
        return await self.uow.point_reservation_repo.sum_open_points(
            customer_id=customer_id, now=now
        )

    async def available_balance(self, *, customer_id: UUID) -> int:
        balance = await self.balance(customer_id=customer_id)
        held = await self.held_points(customer_id=customer_id)
        return max(0, balance - held)

    @Logger.io
    async def earn(self, *, customer_id: UUID, points: int, description: str) -> LoyaltyLedgerEntry:
        if points <= 0:
            raise DomainError('Points to earn must be positive')
        entry = LoyaltyLedgerEntry.earned(
            customer_id=customer_id, points=points, description=description, now=self.clock.now()
        )
        return await self.uow.loyalty_ledger_repo.append(entry=entry)

    @Logger.io
    async def redeem(
        self, *, customer_id: UUID, points: int, description: str
    ) -> LoyaltyLedgerEntry:
        if points <= 0:
            raise DomainError('Points to redeem must be positive')
        # Checked against the ledger balance: the redeemed points are the ones held for this ticket
        if await self.balance(customer_id=customer_id) < points:
            raise InsufficientBalanceError()
        entry = LoyaltyLedgerEntry.redeemed(
            customer_id=customer_id, points=points, description=description, now=self.clock.now()
        )
        return await self.uow.loyalty_ledger_repo.append(entry=entry)

    async def history(self, *, customer_id: UUID) -> List[LoyaltyLedgerEntry]:
        return await self.uow.loyalty_ledger_repo.list_by_customer(customer_id=customer_id)
