from typing import Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.service.ticket_loyalty.app.dto.loyalty_dto import LoyaltyBalance
from src.service.ticket_loyalty.app.interface.i_clock import IClock
from src.service.ticket_loyalty.app.service.loyalty_ledger import LoyaltyLedger
from src.service.ticket_loyalty.domain.loyalty_rules import discount_value


class GetLoyaltyBalanceUseCase:
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
    async def get(self, *, customer_id: UUID) -> LoyaltyBalance:
        async with self.uow:
            ledger = LoyaltyLedger(uow=self.uow, clock=self.clock)
            balance = await ledger.balance(customer_id=customer_id)
            available = await ledger.available_balance(customer_id=customer_id)
            # available_balance purges expired holds
            await self.uow.commit()

        return LoyaltyBalance(
            customer_id=customer_id,
            balance=balance,
            available_balance=available,
            available_discount_value=discount_value(available),
        )
