from datetime import datetime
from uuid import UUID

from sqlalchemy import Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.column_types import UtcDateTime
from src.platform.database.db_setting import Base


class LoyaltyLedgerEntryModel(Base):
    __tablename__ = 'loyalty_ledger_entry'

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    customer_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    points: Mapped[int] = mapped_column(Integer, nullable=False)  # signed
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(UtcDateTime, nullable=False)

    __table_args__ = (
        Index('ix_loyalty_ledger_entry_customer_created', 'customer_id', 'created_at'),
    )
