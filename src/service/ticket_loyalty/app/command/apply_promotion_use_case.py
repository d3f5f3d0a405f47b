from typing import Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ConflictError, InvalidDiscountError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.ticket_loyalty.app.interface.i_clock import IClock
from src.service.ticket_loyalty.domain.entity.ticket_entity import Ticket


class ApplyPromotionUseCase:
    """
    Apply a discount code to an already booked, unpaid ticket.

    Unlike booking, an unusable code is rejected here instead of pricing as zero.
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
    async def apply(self, *, ticket_id: UUID, customer_id: UUID, code: str) -> Ticket:
        with self.tracer.start_as_current_span(
            'use_case.apply_promotion',
            attributes={'ticket.id': str(ticket_id)},
        ):
            async with self.uow:
                ticket = await self.uow.ticket_repo.get_by_id(ticket_id=ticket_id)
                if not ticket:
                    raise NotFoundError('Ticket not found')
                ticket.ensure_owned_by(customer_id)
                ticket.ensure_unpaid()
                if ticket.discount_applied > 0:
                    raise ConflictError('A discount has already been applied to this ticket')

                discount_code = await self.uow.discount_code_repo.get_by_code(code=code)
                if discount_code is None:
                    raise InvalidDiscountError()
                discount = discount_code.evaluate(
                    amount=ticket.amount_before_points,
                    event_id=ticket.event_id,
                    now=self.clock.now(),
                )
                if discount <= 0:
                    raise InvalidDiscountError()

                updated = ticket.apply_promotion(discount=discount)
                await self.uow.ticket_repo.update(ticket=updated)
                await self.uow.commit()

            return updated
