from datetime import timedelta
from typing import Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.ticket_loyalty_metrics import metrics
from src.service.ticket_loyalty.app.dto.loyalty_dto import PointsReservationResult
from src.service.ticket_loyalty.app.interface.i_clock import IClock
from src.service.ticket_loyalty.app.service.loyalty_ledger import LoyaltyLedger
from src.service.ticket_loyalty.app.service.reservation_store import ReservationStore


class ReserveLoyaltyPointsUseCase:
    """
    Hold points on an unpaid ticket, replacing any hold it already has.

    The ticket is repriced in the same unit of work so that every held point
    is one currency unit off `amount_before_points`.
    """

    def __init__(self, *, uow: AbstractUnitOfWork, clock: IClock, point_hold: timedelta) -> None:
        self.uow = uow
        self.clock = clock
        self.point_hold = point_hold
        self.tracer = trace.get_tracer(__name__)

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
    async def reserve(
        self, *, ticket_id: UUID, customer_id: UUID, points: int
    ) -> PointsReservationResult:
        with self.tracer.start_as_current_span(
            'use_case.reserve_loyalty_points',
            attributes={'ticket.id': str(ticket_id), 'loyalty.points': points},
        ):
            async with self.uow:
                ticket = await self.uow.ticket_repo.get_by_id(ticket_id=ticket_id)
                if not ticket:
                    raise NotFoundError('Ticket not found')
                ticket.ensure_owned_by(customer_id)
                repriced = ticket.reprice_for_points(points=points)

                ledger = LoyaltyLedger(uow=self.uow, clock=self.clock)
                store = ReservationStore(
                    uow=self.uow, clock=self.clock, ledger=ledger, hold=self.point_hold
                )
                reservation = await store.reserve(
                    ticket_id=ticket.id, customer_id=customer_id, points=points
                )
                await self.uow.ticket_repo.update(ticket=repriced)
                available = await ledger.available_balance(customer_id=customer_id)
                await self.uow.commit()

            metrics.record_points(movement='reserved', points=reservation.reserved_points)
            return PointsReservationResult(
                ticket_id=ticket.id,
                points_reserved=reservation.reserved_points,
                available_balance=available,
                total_amount=repriced.total_amount,
            )
