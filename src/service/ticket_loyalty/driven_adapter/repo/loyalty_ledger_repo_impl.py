from typing import List
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.ticket_loyalty.app.interface.i_loyalty_ledger_repo import ILoyaltyLedgerRepo
from src.service.ticket_loyalty.domain.entity.loyalty_ledger_entry_entity import (
    LoyaltyLedgerEntry,
)
from src.service.ticket_loyalty.driven_adapter.model.loyalty_ledger_entry_model import (
    LoyaltyLedgerEntryModel,
)


class LoyaltyLedgerRepoImpl(ILoyaltyLedgerRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _to_entity(db_entry: LoyaltyLedgerEntryModel) -> LoyaltyLedgerEntry:
        return LoyaltyLedgerEntry(
            id=db_entry.id,
            customer_id=db_entry.customer_id,
            points=db_entry.points,
            description=db_entry.description,
            created_at=db_entry.created_at,
        )

    @Logger.io
    async def append(self, *, entry: LoyaltyLedgerEntry) -> LoyaltyLedgerEntry:
        self.session.add(
            LoyaltyLedgerEntryModel(
                id=entry.id,
                customer_id=entry.customer_id,
                points=entry.points,
                description=entry.description,
                created_at=entry.created_at,
            )
        )
        await self.session.flush()
        return entry

    @Logger.io
    async def sum_points(self, *, customer_id: UUID) -> int:
        result = await self.session.execute(
            select(func.coalesce(func.sum(LoyaltyLedgerEntryModel.points), 0)).where(
                LoyaltyLedgerEntryModel.customer_id == customer_id
            )
        )
        return int(result.scalar_one())

    @Logger.io
    async def list_by_customer(self, *, customer_id: UUID) -> List[LoyaltyLedgerEntry]:
        result = await self.session.execute(
            select(LoyaltyLedgerEntryModel)
            .where(LoyaltyLedgerEntryModel.customer_id == customer_id)
            .order_by(LoyaltyLedgerEntryModel.created_at.desc(), LoyaltyLedgerEntryModel.id.desc())
        )
        return [LoyaltyLedgerRepoImpl._to_entity(db_entry) for db_entry in result.scalars().all()]
