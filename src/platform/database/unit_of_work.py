"""
Unit of Work Pattern - one database session shared by every repository

Architecture:
- UoW owns the session lifecycle (opened on enter, closed on exit)
- UoW owns commit/rollback; leaving the block without commit rolls back
- Repositories receive the shared session from the UoW
- Use cases coordinate several repositories through one UoW
"""

from __future__ import annotations

import abc
from contextlib import AbstractAsyncContextManager
from typing import TYPE_CHECKING, Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession


if TYPE_CHECKING:
    from src.service.ticket_loyalty.app.interface.i_discount_code_repo import IDiscountCodeRepo
    from src.service.ticket_loyalty.app.interface.i_event_repo import IEventRepo
    from src.service.ticket_loyalty.app.interface.i_loyalty_ledger_repo import (
        ILoyaltyLedgerRepo,
    )
    from src.service.ticket_loyalty.app.interface.i_payment_repo import IPaymentRepo
    from src.service.ticket_loyalty.app.interface.i_point_reservation_repo import (
        IPointReservationRepo,
    )
    from src.service.ticket_loyalty.app.interface.i_ticket_repo import ITicketRepo


class AbstractUnitOfWork(abc.ABC):
    """
    Usage:
        async with uow:
            ticket = await uow.ticket_repo.create(ticket=...)
            await uow.commit()
    """

    event_repo: IEventRepo
    ticket_repo: ITicketRepo
    discount_code_repo: IDiscountCodeRepo
    loyalty_ledger_repo: ILoyaltyLedgerRepo
    point_reservation_repo: IPointReservationRepo
    payment_repo: IPaymentRepo

    async def __aenter__(self) -> AbstractUnitOfWork:
        return self

    async def __aexit__(self, *args) -> None:
        await self.rollback()

    async def commit(self) -> None:
        await self._commit()

    @abc.abstractmethod
    async def _commit(self) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def rollback(self) -> None:
        raise NotImplementedError


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    """
    SQLAlchemy implementation of Unit of Work

    A fresh session is opened on every `async with`, so one UoW instance can run
    several consecutive transactions (e.g. booking, then attaching the QR code).
    """

    def __init__(
        self, session_factory: Callable[[], AbstractAsyncContextManager[AsyncSession]]
    ) -> None:
        self.session_factory = session_factory
        self.session: Optional[AsyncSession] = None
        self._session_cm: Optional[AbstractAsyncContextManager[AsyncSession]] = None

    async def __aenter__(self) -> SqlAlchemyUnitOfWork:
        from src.service.ticket_loyalty.driven_adapter.repo.discount_code_repo_impl import (
            DiscountCodeRepoImpl,
        )
        from src.service.ticket_loyalty.driven_adapter.repo.event_repo_impl import EventRepoImpl
        from src.service.ticket_loyalty.driven_adapter.repo.loyalty_ledger_repo_impl import (
            LoyaltyLedgerRepoImpl,
        )
        from src.service.ticket_loyalty.driven_adapter.repo.payment_repo_impl import (
            PaymentRepoImpl,
        )
        from src.service.ticket_loyalty.driven_adapter.repo.point_reservation_repo_impl import (
            PointReservationRepoImpl,
        )
        from src.service.ticket_loyalty.driven_adapter.repo.ticket_repo_impl import TicketRepoImpl

        self._session_cm = self.session_factory()
        self.session = await self._session_cm.__aenter__()

        # Create repositories with shared session
        self.event_repo = EventRepoImpl(session=self.session)
        self.ticket_repo = TicketRepoImpl(session=self.session)
        self.discount_code_repo = DiscountCodeRepoImpl(session=self.session)
        self.loyalty_ledger_repo = LoyaltyLedgerRepoImpl(session=self.session)
        self.point_reservation_repo = PointReservationRepoImpl(session=self.session)
        self.payment_repo = PaymentRepoImpl(session=self.session)

        await super().__aenter__()
        return self

    async def __aexit__(self, *args) -> None:
        try:
            await super().__aexit__(*args)
        finally:
            if self._session_cm is not None:
                await self._session_cm.__aexit__(*args)
            self._session_cm = None
            self.session = None

    async def _commit(self) -> None:
        # pyrefly: ignore  # missing-attribute
        await self.session.commit()

    async def rollback(self) -> None:
        if self.session is not None:
            await self.session.rollback()
