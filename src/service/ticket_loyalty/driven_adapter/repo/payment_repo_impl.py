from typing import List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.ticket_loyalty.app.interface.i_payment_repo import IPaymentRepo
from src.service.ticket_loyalty.domain.entity.payment_entity import Payment
from src.service.ticket_loyalty.domain.enum.payment_enum import PaymentMethod, PaymentStatus
from src.service.ticket_loyalty.driven_adapter.model.payment_model import PaymentModel


class PaymentRepoImpl(IPaymentRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def create(self, *, payment: Payment) -> Payment:
        self.session.add(
            PaymentModel(
                id=payment.id,
                ticket_id=payment.ticket_id,
                customer_id=payment.customer_id,
                amount=payment.amount,
                payment_method=payment.payment_method.value,
                status=payment.status.value,
                transaction_id=payment.transaction_id,
                paid_at=payment.paid_at,
            )
        )
        await self.session.flush()
        return payment

    @Logger.io
    async def list_by_ticket(self, *, ticket_id: UUID) -> List[Payment]:
        result = await self.session.execute(
            select(PaymentModel)
            .where(PaymentModel.ticket_id == ticket_id)
            .order_by(PaymentModel.paid_at)
        )
        return [
            Payment(
                id=db_payment.id,
                ticket_id=db_payment.ticket_id,
                customer_id=db_payment.customer_id,
                amount=db_payment.amount,
                payment_method=PaymentMethod(db_payment.payment_method),
                status=PaymentStatus(db_payment.status),
                transaction_id=db_payment.transaction_id,
                paid_at=db_payment.paid_at,
            )
            for db_payment in result.scalars().all()
        ]
