from datetime import datetime
from decimal import Decimal
from typing import List, Self, Tuple

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.service.ticket_loyalty.app.interface.i_clock import IClock
from src.service.ticket_loyalty.domain.entity.event_entity import Event


class CreateEventUseCase:
    def __init__(self, *, uow: AbstractUnitOfWork, clock: IClock) -> None:
        self.uow = uow
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
        clock: IClock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(uow=uow, clock=clock)

    @Logger.io
    async def create(
        self,
        *,
        name: str,
        venue_name: str,
        starts_at: datetime,
        price_tiers: List[Tuple[str, Decimal, int]],
    ) -> Event:
        """
        Args:
            price_tiers: (name, price, stock) per tier
        """
        event = Event.create(
            name=name,
            venue_name=venue_name,
            starts_at=starts_at,
            price_tiers=price_tiers,
            now=self.clock.now(),
        )
        async with self.uow:
            await self.uow.event_repo.create(event=event)
            await self.uow.commit()
        return event
