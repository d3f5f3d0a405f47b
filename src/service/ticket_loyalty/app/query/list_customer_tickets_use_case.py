from typing import Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.service.ticket_loyalty.app.dto.ticket_dto import TicketPage


class ListCustomerTicketsUseCase:
    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    @inject
    def depends(
        cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])
    ) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def list(self, *, customer_id: UUID, page: int = 1, page_size: int = 20) -> TicketPage:
        if page < 1 or page_size < 1:
            raise DomainError('page and page_size must be positive')

        async with self.uow:
            items = await self.uow.ticket_repo.list_by_customer(
                customer_id=customer_id, offset=(page - 1) * page_size, limit=page_size
            )
            total = await self.uow.ticket_repo.count_by_customer(customer_id=customer_id)

        return TicketPage(items=items, total=total, page=page, page_size=page_size)
