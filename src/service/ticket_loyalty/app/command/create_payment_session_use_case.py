from typing import Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.ticket_loyalty.app.interface.i_payment_gateway import (
    IPaymentGateway,
    PaymentSession,
)


class CreatePaymentSessionUseCase:
    """Open a gateway payment session for the final total of an unpaid ticket"""

    def __init__(self, *, uow: AbstractUnitOfWork, payment_gateway: IPaymentGateway) -> None:
        self.uow = uow
        self.payment_gateway = payment_gateway
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
        payment_gateway: IPaymentGateway = Depends(Provide[Container.payment_gateway]),
    ) -> Self:
        return cls(uow=uow, payment_gateway=payment_gateway)

    @Logger.io
    async def create(self, *, ticket_id: UUID, customer_id: UUID) -> PaymentSession:
        with self.tracer.start_as_current_span(
            'use_case.create_payment_session',
            attributes={'ticket.id': str(ticket_id)},
        ):
            async with self.uow:
                ticket = await self.uow.ticket_repo.get_by_id(ticket_id=ticket_id)
            if not ticket:
                raise NotFoundError('Ticket not found')
            ticket.ensure_owned_by(customer_id)
            ticket.ensure_unpaid()

            return await self.payment_gateway.create_session(
                ticket_id=ticket.id, amount=ticket.total_amount
            )
