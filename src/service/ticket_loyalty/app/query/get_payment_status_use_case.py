from typing import Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.ticket_loyalty.app.dto.payment_dto import TicketPaymentStatus
from src.service.ticket_loyalty.domain.enum.payment_enum import PaymentStatus


class GetPaymentStatusUseCase:
    """Payment state of one ticket, for its owner; pending until a payment is recorded"""

    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    @inject
    def depends(
        cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])
    ) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def get(self, *, ticket_id: UUID, customer_id: UUID) -> TicketPaymentStatus:
        async with self.uow:
            ticket = await self.uow.ticket_repo.get_by_id(ticket_id=ticket_id)
            if not ticket:
                raise NotFoundError('Ticket not found')
            ticket.ensure_owned_by(customer_id)
            payments = await self.uow.payment_repo.list_by_ticket(ticket_id=ticket_id)

        payment = payments[0] if payments else None
        return TicketPaymentStatus(
            ticket_id=ticket.id,
            is_paid=ticket.is_paid,
            payment_status=payment.status if payment else PaymentStatus.PENDING,
            amount=ticket.total_amount,
            has_qr_code=ticket.qr_code_path is not None,
            paid_at=payment.paid_at if payment else None,
            payment_method=payment.payment_method if payment else None,
        )
