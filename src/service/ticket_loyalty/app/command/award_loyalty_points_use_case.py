from typing import Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.ticket_loyalty_metrics import metrics
from src.service.ticket_loyalty.app.interface.i_clock import IClock
from src.service.ticket_loyalty.app.service.loyalty_ledger import LoyaltyLedger
from src.service.ticket_loyalty.domain.entity.payment_entity import Payment
from src.service.ticket_loyalty.domain.entity.ticket_entity import Ticket
from src.service.ticket_loyalty.domain.enum.payment_enum import PaymentMethod
from src.service.ticket_loyalty.domain.loyalty_rules import estimated_points_for


class AwardLoyaltyPointsUseCase:
    """
    Manual "mark paid" path: award the estimated points of a ticket without a gateway.

    Idempotent: a ticket that already earned points is returned unchanged.
    """

    def __init__(self, *, uow: AbstractUnitOfWork, clock: IClock) -> None:
        self.uow = uow
        self.clock = clock
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
        clock: IClock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(uow=uow, clock=clock)

    @Logger.io
    async def award(self, *, ticket_id: UUID, customer_id: UUID) -> Ticket:
        with self.tracer.start_as_current_span(
            'use_case.award_loyalty_points',
            attributes={'ticket.id': str(ticket_id)},
        ):
            async with self.uow:
                ticket = await self.uow.ticket_repo.get_by_id(ticket_id=ticket_id)
                if not ticket:
                    raise NotFoundError('Ticket not found')
                ticket.ensure_owned_by(customer_id)
                if ticket.points_earned > 0:
                    return ticket

                now = self.clock.now()
                points = estimated_points_for(ticket.total_amount)
                if points > 0:
                    await LoyaltyLedger(uow=self.uow, clock=self.clock).earn(
                        customer_id=ticket.customer_id,
                        points=points,
                        description=f'Earned from ticket purchase #{ticket.ticket_number}',
                    )

                if ticket.is_paid:
                    updated = ticket.award_points(points_earned=points)
                else:
                    updated = ticket.mark_as_paid(
                        paid_at=now,
                        points_earned=points,
                        points_redeemed=ticket.points_redeemed,
                    )
                    await self.uow.payment_repo.create(
                        payment=Payment(
                            ticket_id=updated.id,
                            customer_id=updated.customer_id,
                            amount=updated.total_amount,
                            payment_method=PaymentMethod.MANUAL,
                            paid_at=now,
                        )
                    )

                await self.uow.ticket_repo.update(ticket=updated)
                await self.uow.commit()

            metrics.record_points(movement='earned', points=points)
            return updated
