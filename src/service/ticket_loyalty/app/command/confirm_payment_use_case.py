from datetime import timedelta
from typing import Optional, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import (
    CustomBaseError,
    NotFoundError,
    TransactionFailureError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.ticket_loyalty_metrics import metrics
from src.service.ticket_loyalty.app.interface.i_clock import IClock
from src.service.ticket_loyalty.app.interface.i_email_notifier import IEmailNotifier
from src.service.ticket_loyalty.app.interface.i_file_storage import IFileStorage
from src.service.ticket_loyalty.app.interface.i_qr_code_generator import IQrCodeGenerator
from src.service.ticket_loyalty.app.service.loyalty_ledger import LoyaltyLedger
from src.service.ticket_loyalty.app.service.reservation_store import ReservationStore
from src.service.ticket_loyalty.app.service.ticket_qr_code_service import TicketQrCodeService
from src.service.ticket_loyalty.domain.entity.payment_entity import Payment
from src.service.ticket_loyalty.domain.entity.ticket_entity import Ticket
from src.service.ticket_loyalty.domain.enum.payment_enum import PaymentMethod
from src.service.ticket_loyalty.domain.loyalty_rules import points_earned_on_confirmation


class ConfirmPaymentUseCase:
    """
    Finalize a ticket after the payment gateway reported success.

    In one unit of work:
    1. Confirm the ticket's open point reservation and redeem its points
    2. Earn points on the post-discount total
    3. Mark the ticket paid and record the payment

    A ticket that is already paid is returned unchanged, so a repeated
    webhook never awards points twice.
    """

    def __init__(
        self,
        *,
        uow: AbstractUnitOfWork,
        clock: IClock,
        email_notifier: IEmailNotifier,
        qr_code_generator: IQrCodeGenerator,
        file_storage: IFileStorage,
        point_hold: timedelta,
    ) -> None:
        self.uow = uow
        self.clock = clock
        self.email_notifier = email_notifier
        self.qr_code_service = TicketQrCodeService(
            qr_code_generator=qr_code_generator, file_storage=file_storage
        )
        self.point_hold = point_hold
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
        clock: IClock = Depends(Provide[Container.clock]),
        email_notifier: IEmailNotifier = Depends(Provide[Container.email_notifier]),
        qr_code_generator: IQrCodeGenerator = Depends(Provide[Container.qr_code_generator]),
        file_storage: IFileStorage = Depends(Provide[Container.file_storage]),
        settings: Settings = Depends(Provide[Container.config_service]),
    ) -> Self:
        return cls(
            uow=uow,
            clock=clock,
            email_notifier=email_notifier,
            qr_code_generator=qr_code_generator,
            file_storage=file_storage,
            point_hold=timedelta(minutes=settings.POINT_RESERVATION_HOLD_MINUTES),
        )

    @Logger.io
    async def confirm(
        self,
        *,
        ticket_id: UUID,
        transaction_id: Optional[str] = None,
        payment_method: PaymentMethod = PaymentMethod.CARD,
    ) -> Ticket:
        """
        Raises:
            NotFoundError: ticket does not exist
            InsufficientBalanceError: the held points are no longer in the ledger
            TransactionFailureError: any other failure; nothing was written
        """
        with self.tracer.start_as_current_span(
            'use_case.confirm_payment',
            attributes={'ticket.id': str(ticket_id)},
        ):
            try:
                ticket, newly_paid = await self._confirm_in_transaction(
                    ticket_id=ticket_id,
                    transaction_id=transaction_id,
                    payment_method=payment_method,
                )
            except CustomBaseError:
                metrics.record_confirmation(result='failed')
                raise
            except Exception as e:
                metrics.record_confirmation(result='failed')
                raise TransactionFailureError(
                    'Payment confirmation failed and was rolled back, it can be retried'
                ) from e

            if not newly_paid:
                metrics.record_confirmation(result='already_paid')
                return ticket

            metrics.record_confirmation(result='confirmed')
            metrics.record_points(movement='earned', points=ticket.points_earned)
            metrics.record_points(movement='redeemed', points=ticket.points_redeemed)
            Logger.base.info(
                f'💳 [PAYMENT] {ticket.ticket_number} paid: '
                f'+{ticket.points_earned} / -{ticket.points_redeemed} points'
            )

            await self._notify(ticket=ticket)
            return ticket

    async def _confirm_in_transaction(
        self,
        *,
        ticket_id: UUID,
        transaction_id: Optional[str],
        payment_method: PaymentMethod,
    ) -> tuple[Ticket, bool]:
        async with self.uow:
            ticket = await self.uow.ticket_repo.get_by_id(ticket_id=ticket_id)
            if not ticket:
                raise NotFoundError('Ticket not found')

            if ticket.is_paid:
                Logger.base.info(f'🔁 [PAYMENT] {ticket.ticket_number} is already paid, skipping')
                return ticket, False

            now = self.clock.now()
            ledger = LoyaltyLedger(uow=self.uow, clock=self.clock)
            store = ReservationStore(
                uow=self.uow, clock=self.clock, ledger=ledger, hold=self.point_hold
            )

            points_earned = points_earned_on_confirmation(ticket.total_amount)
            points_redeemed = 0

            reservation = await store.confirm(ticket_id=ticket.id)
            if reservation:
                await ledger.redeem(
                    customer_id=ticket.customer_id,
                    points=reservation.reserved_points,
                    description=f'Redeemed for ticket purchase #{ticket.ticket_number}',
                )
                points_redeemed = reservation.reserved_points

            if points_earned > 0:
                await ledger.earn(
                    customer_id=ticket.customer_id,
                    points=points_earned,
                    description=f'Earned from ticket purchase #{ticket.ticket_number}',
                )

            paid_ticket = ticket.mark_as_paid(
                paid_at=now, points_earned=points_earned, points_redeemed=points_redeemed
            )
            await self.uow.ticket_repo.update(ticket=paid_ticket)
            await self.uow.payment_repo.create(
                payment=Payment(
                    ticket_id=paid_ticket.id,
                    customer_id=paid_ticket.customer_id,
                    amount=paid_ticket.total_amount,
                    payment_method=payment_method,
                    paid_at=now,
                    transaction_id=transaction_id,
                )
            )
            await self.uow.commit()

        return paid_ticket, True

    async def _notify(self, *, ticket: Ticket) -> None:
        try:
            qr_code_png = await self.qr_code_service.load(ticket=ticket)
            if qr_code_png is None:
                path, qr_code_png = await self.qr_code_service.render_and_store(ticket=ticket)
                async with self.uow:
                    await self.uow.ticket_repo.set_qr_code_path(
                        ticket_id=ticket.id, qr_code_path=path
                    )
                    await self.uow.commit()

            await self.email_notifier.send_ticket_confirmation(
                customer_id=ticket.customer_id,
                ticket_number=ticket.ticket_number,
                total_amount=ticket.total_amount,
                points_earned=ticket.points_earned,
                points_redeemed=ticket.points_redeemed,
                qr_code_png=qr_code_png,
            )
        except Exception as e:
            Logger.base.warning(
                f'⚠️ [PAYMENT] Confirmation email for {ticket.ticket_number} not sent: {e}'
            )
