from datetime import datetime
from decimal import Decimal
from typing import Optional, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ConflictError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.ticket_loyalty.domain.entity.discount_code_entity import DiscountCode
from src.service.ticket_loyalty.domain.enum.discount_type import DiscountType


class CreateDiscountCodeUseCase:
    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    @inject
    def depends(
        cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])
    ) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def create(
        self,
        *,
        code: str,
        discount_type: DiscountType,
        value: Decimal,
        valid_from: datetime,
        valid_to: datetime,
        event_id: Optional[UUID] = None,
    ) -> DiscountCode:
        discount_code = DiscountCode.create(
            code=code,
            discount_type=discount_type,
            value=value,
            valid_from=valid_from,
            valid_to=valid_to,
            event_id=event_id,
        )
        async with self.uow:
            if await self.uow.discount_code_repo.get_by_code(code=discount_code.code):
                raise ConflictError(f'Discount code {discount_code.code} already exists')
            if event_id is not None and not await self.uow.event_repo.get_by_id(event_id=event_id):
                raise NotFoundError('Event not found')

            await self.uow.discount_code_repo.create(discount_code=discount_code)
            await self.uow.commit()
        return discount_code
