from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.service.ticket_loyalty.app.dto.ticket_dto import TicketValidation


class ValidateTicketUseCase:
    """Gate check: a ticket code admits entry only once the ticket is paid"""

    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    @inject
    def depends(
        cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])
    ) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def validate(self, *, ticket_code: str) -> TicketValidation:
        async with self.uow:
            ticket = await self.uow.ticket_repo.get_by_code(ticket_code=ticket_code.strip().upper())

        if not ticket:
            return TicketValidation(is_valid=False, message='Ticket not found')
        if not ticket.is_paid:
            return TicketValidation(is_valid=False, message='Ticket is not paid', ticket=ticket)
        return TicketValidation(is_valid=True, message='Ticket is valid', ticket=ticket)
