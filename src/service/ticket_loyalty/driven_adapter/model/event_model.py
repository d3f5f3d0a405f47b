from datetime import datetime
from decimal import Decimal
from typing import List
from uuid import UUID

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Integer, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.platform.database.column_types import UtcDateTime
from src.platform.database.db_setting import Base


class EventModel(Base):
    __tablename__ = 'event'

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)  # UUID7
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    venue_name: Mapped[str] = mapped_column(String(200), nullable=False)
    starts_at: Mapped[datetime] = mapped_column(UtcDateTime, nullable=False)
    created_at: Mapped[datetime] = mapped_column(UtcDateTime, nullable=False)

    price_tiers: Mapped[List['PriceTierModel']] = relationship(
        'PriceTierModel',
        back_populates='event',
        cascade='all, delete-orphan',
        lazy='selectin',
        order_by='PriceTierModel.price',
    )


class PriceTierModel(Base):
    __tablename__ = 'price_tier'

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    event_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey('event.id', ondelete='CASCADE'), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    remaining_stock: Mapped[int] = mapped_column(Integer, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    event: Mapped['EventModel'] = relationship('EventModel', back_populates='price_tiers')

    __table_args__ = (
        CheckConstraint('remaining_stock >= 0', name='ck_price_tier_remaining_stock'),
    )
