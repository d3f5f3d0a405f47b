from typing import Optional
from uuid import UUID

from sqlalchemy import select, update as sql_update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.ticket_loyalty.app.interface.i_event_repo import IEventRepo
from src.service.ticket_loyalty.domain.entity.event_entity import Event, PriceTier
from src.service.ticket_loyalty.driven_adapter.model.event_model import EventModel, PriceTierModel


class EventRepoImpl(IEventRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _to_price_tier(db_tier: PriceTierModel) -> PriceTier:
        return PriceTier(
            id=db_tier.id,
            event_id=db_tier.event_id,
            name=db_tier.name,
            price=db_tier.price,
            remaining_stock=db_tier.remaining_stock,
            is_active=db_tier.is_active,
        )

    @staticmethod
    def _to_entity(db_event: EventModel) -> Event:
        return Event(
            id=db_event.id,
            name=db_event.name,
            venue_name=db_event.venue_name,
            starts_at=db_event.starts_at,
            created_at=db_event.created_at,
            price_tiers=[EventRepoImpl._to_price_tier(tier) for tier in db_event.price_tiers],
        )

    @Logger.io
    async def create(self, *, event: Event) -> Event:
        db_event = EventModel(
            id=event.id,
            name=event.name,
            venue_name=event.venue_name,
            starts_at=event.starts_at,
            created_at=event.created_at,
            price_tiers=[
                PriceTierModel(
                    id=tier.id,
                    name=tier.name,
                    price=tier.price,
                    remaining_stock=tier.remaining_stock,
                    is_active=tier.is_active,
                )
                for tier in event.price_tiers
            ],
        )
        self.session.add(db_event)
        await self.session.flush()
        return event

    @Logger.io
    async def get_by_id(self, *, event_id: UUID) -> Optional[Event]:
        result = await self.session.execute(select(EventModel).where(EventModel.id == event_id))
        db_event = result.scalar_one_or_none()
        if not db_event:
            return None
        return EventRepoImpl._to_entity(db_event)

    @Logger.io
    async def get_price_tier(
        self, *, event_id: UUID, price_tier_id: UUID
    ) -> Optional[PriceTier]:
        result = await self.session.execute(
            select(PriceTierModel).where(
                PriceTierModel.id == price_tier_id,
                PriceTierModel.event_id == event_id,
            )
        )
        db_tier = result.scalar_one_or_none()
        if not db_tier:
            return None
        return EventRepoImpl._to_price_tier(db_tier)

    @Logger.io
    async def decrement_stock(self, *, price_tier_id: UUID, quantity: int) -> bool:
        # Guarded in SQL so concurrent bookings cannot oversell
        stmt = (
            sql_update(PriceTierModel)
            .where(
                PriceTierModel.id == price_tier_id,
                PriceTierModel.remaining_stock >= quantity,
            )
            .values(remaining_stock=PriceTierModel.remaining_stock - quantity)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1  # pyright: ignore[reportAttributeAccessIssue]
