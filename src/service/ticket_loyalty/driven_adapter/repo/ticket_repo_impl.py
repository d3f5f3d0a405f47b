from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, select, update as sql_update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.ticket_loyalty.app.interface.i_ticket_repo import ITicketRepo
from src.service.ticket_loyalty.domain.entity.ticket_entity import Ticket
from src.service.ticket_loyalty.driven_adapter.model.ticket_model import TicketModel


class TicketRepoImpl(ITicketRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _to_entity(db_ticket: TicketModel) -> Ticket:
        return Ticket(
            id=db_ticket.id,
            customer_id=db_ticket.customer_id,
            event_id=db_ticket.event_id,
            price_tier_id=db_ticket.price_tier_id,
            ticket_number=db_ticket.ticket_number,
            ticket_code=db_ticket.ticket_code,
            quantity=db_ticket.quantity,
            total_amount=db_ticket.total_amount,
            amount_before_points=db_ticket.amount_before_points,
            discount_applied=db_ticket.discount_applied,
            is_paid=db_ticket.is_paid,
            points_earned=db_ticket.points_earned,
            points_redeemed=db_ticket.points_redeemed,
            qr_code_path=db_ticket.qr_code_path,
            purchased_at=db_ticket.purchased_at,
            paid_at=db_ticket.paid_at,
        )

    @Logger.io
    async def create(self, *, ticket: Ticket) -> Ticket:
        db_ticket = TicketModel(
            id=ticket.id,
            customer_id=ticket.customer_id,
            event_id=ticket.event_id,
            price_tier_id=ticket.price_tier_id,
            ticket_number=ticket.ticket_number,
            ticket_code=ticket.ticket_code,
            quantity=ticket.quantity,
            total_amount=ticket.total_amount,
            amount_before_points=ticket.amount_before_points,
            discount_applied=ticket.discount_applied,
            is_paid=ticket.is_paid,
            points_earned=ticket.points_earned,
            points_redeemed=ticket.points_redeemed,
            qr_code_path=ticket.qr_code_path,
            purchased_at=ticket.purchased_at,
            paid_at=ticket.paid_at,
        )
        self.session.add(db_ticket)
        await self.session.flush()
        return ticket

    @Logger.io
    async def get_by_id(self, *, ticket_id: UUID) -> Optional[Ticket]:
        result = await self.session.execute(select(TicketModel).where(TicketModel.id == ticket_id))
        db_ticket = result.scalar_one_or_none()
        return TicketRepoImpl._to_entity(db_ticket) if db_ticket else None

    @Logger.io
    async def get_by_code(self, *, ticket_code: str) -> Optional[Ticket]:
        result = await self.session.execute(
            select(TicketModel).where(TicketModel.ticket_code == ticket_code)
        )
        db_ticket = result.scalar_one_or_none()
        return TicketRepoImpl._to_entity(db_ticket) if db_ticket else None

    async def exists_with_code(self, *, ticket_code: str) -> bool:
        result = await self.session.execute(
            select(TicketModel.id).where(TicketModel.ticket_code == ticket_code)
        )
        return result.first() is not None

    async def exists_with_number(self, *, ticket_number: str) -> bool:
        result = await self.session.execute(
            select(TicketModel.id).where(TicketModel.ticket_number == ticket_number)
        )
        return result.first() is not None

    @Logger.io
    async def update(self, *, ticket: Ticket) -> Ticket:
        # Identity fields (customer, event, tier, number, code) are never rewritten
        stmt = (
            sql_update(TicketModel)
            .where(TicketModel.id == ticket.id)
            .values(
                total_amount=ticket.total_amount,
                amount_before_points=ticket.amount_before_points,
                discount_applied=ticket.discount_applied,
                is_paid=ticket.is_paid,
                points_earned=ticket.points_earned,
                points_redeemed=ticket.points_redeemed,
                qr_code_path=ticket.qr_code_path,
                paid_at=ticket.paid_at,
            )
        )
        result = await self.session.execute(stmt)
        if result.rowcount != 1:  # pyright: ignore[reportAttributeAccessIssue]
            raise NotFoundError('Ticket not found')
        return ticket

    @Logger.io
    async def set_qr_code_path(self, *, ticket_id: UUID, qr_code_path: str) -> None:
        await self.session.execute(
            sql_update(TicketModel)
            .where(TicketModel.id == ticket_id)
            .values(qr_code_path=qr_code_path)
        )

    @Logger.io
    async def list_by_customer(
        self, *, customer_id: UUID, offset: int, limit: int
    ) -> List[Ticket]:
        result = await self.session.execute(
            select(TicketModel)
            .where(TicketModel.customer_id == customer_id)
            .order_by(TicketModel.purchased_at.desc(), TicketModel.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return [TicketRepoImpl._to_entity(db_ticket) for db_ticket in result.scalars().all()]

    async def count_by_customer(self, *, customer_id: UUID) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(TicketModel).where(
                TicketModel.customer_id == customer_id
            )
        )
        return result.scalar_one()
