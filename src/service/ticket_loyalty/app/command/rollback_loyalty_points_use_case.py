from datetime import timedelta
from typing import Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.ticket_loyalty.app.dto.loyalty_dto import PointsReservationResult
from src.service.ticket_loyalty.app.interface.i_clock import IClock
from src.service.ticket_loyalty.app.service.loyalty_ledger import LoyaltyLedger
from src.service.ticket_loyalty.app.service.reservation_store import ReservationStore


class RollbackLoyaltyPointsUseCase:
    """Release the points held for an unpaid ticket and restore its price before points"""

    def __init__(self, *, uow: AbstractUnitOfWork, clock: IClock, point_hold: timedelta) -> None:
        self.uow = uow
        self.clock = clock
        self.point_hold = point_hold

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
        clock: IClock = Depends(Provide[Container.clock]),
        settings: Settings = Depends(Provide[Container.config_service]),
    ) -> Self:
        return cls(
            uow=uow,
            clock=clock,
            point_hold=timedelta(minutes=settings.POINT_RESERVATION_HOLD_MINUTES),
        )

    @Logger.io
    async def rollback(self, *, ticket_id: UUID, customer_id: UUID) -> PointsReservationResult:
        async with self.uow:
            ticket = await self.uow.ticket_repo.get_by_id(ticket_id=ticket_id)
            if not ticket:
                raise NotFoundError('Ticket not found')
            ticket.ensure_owned_by(customer_id)

            ledger = LoyaltyLedger(uow=self.uow, clock=self.clock)
            store = ReservationStore(
                uow=self.uow, clock=self.clock, ledger=ledger, hold=self.point_hold
            )
            rolled_back = await store.rollback(ticket_id=ticket.id)
            if not ticket.is_paid:
                # Released points no longer discount the ticket
                ticket = ticket.reprice_for_points(points=0)
                await self.uow.ticket_repo.update(ticket=ticket)
            available = await ledger.available_balance(customer_id=customer_id)
            await self.uow.commit()

        return PointsReservationResult(
            ticket_id=ticket.id,
            points_reserved=0,
            available_balance=available,
            total_amount=ticket.total_amount,
            rolled_back=rolled_back,
        )
