"""
Unit tests for ConfirmPaymentUseCase

Test Coverage:
1. Points earned on the post-discount total, reservation redeemed
2. Idempotency for tickets that are already paid
3. Unexpected failures surface as TransactionFailureError
4. Notification is best-effort
"""

from datetime import timedelta
from decimal import Decimal
from unittest.mock import AsyncMock
import uuid

import pytest

from src.platform.exception.exceptions import (
    InsufficientBalanceError,
    NotFoundError,
    TransactionFailureError,
)
from src.service.ticket_loyalty.app.command.confirm_payment_use_case import (
    ConfirmPaymentUseCase,
)
from src.service.ticket_loyalty.domain.entity.point_reservation_entity import PointReservation
from src.service.ticket_loyalty.domain.entity.ticket_entity import Ticket
from src.service.ticket_loyalty.domain.enum.payment_enum import PaymentMethod


pytestmark = pytest.mark.unit


class TestConfirmPaymentUseCase:
    @pytest.fixture(autouse=True)
    def _setup(self, fake_uow, clock, email_notifier, qr_code_generator, file_storage):
        self.uow = fake_uow
        self.clock = clock
        self.email_notifier = email_notifier
        self.file_storage = file_storage
        self.ticket = Ticket.create(
            customer_id=uuid.uuid4(),
            event_id=uuid.uuid4(),
            price_tier_id=uuid.uuid4(),
            ticket_number='TKT202603011200000001',
            ticket_code='ABCD1234',
            quantity=1,
            total_amount=Decimal('100'),
            discount_applied=Decimal('0'),
            purchased_at=clock.now(),
        )
        self.uow.ticket_repo.get_by_id.return_value = self.ticket

        self.use_case = ConfirmPaymentUseCase(
            uow=fake_uow,
            clock=clock,
            email_notifier=email_notifier,
            qr_code_generator=qr_code_generator,
            file_storage=file_storage,
            point_hold=timedelta(minutes=30),
        )

    def _ledger_points(self) -> list[int]:
        return [
            call.kwargs['entry'].points
            for call in self.uow.loyalty_ledger_repo.append.await_args_list
        ]

    # ==================== Success ====================

    @pytest.mark.asyncio
    async def test_confirm_earns_one_point_per_ten_spent(self):
        # When
        ticket = await self.use_case.confirm(ticket_id=self.ticket.id, transaction_id='txn_1')

        # Then: ticket paid, 10 points earned, nothing redeemed
        assert ticket.is_paid is True
        assert ticket.paid_at == self.clock.now()
        assert ticket.points_earned == 10
        assert ticket.points_redeemed == 0
        assert self._ledger_points() == [10]
        entry = self.uow.loyalty_ledger_repo.append.await_args.kwargs['entry']
        assert entry.description == 'Earned from ticket purchase #TKT202603011200000001'

        # And: payment recorded
        payment = self.uow.payment_repo.create.await_args.kwargs['payment']
        assert payment.amount == Decimal('100.00')
        assert payment.transaction_id == 'txn_1'
        assert payment.payment_method == PaymentMethod.CARD
        assert self.uow.commit_count >= 1

    @pytest.mark.asyncio
    async def test_confirm_redeems_the_open_reservation(self):
        # Given: 30 points held for the ticket, 50 in the ledger
        reservation = PointReservation.open(
            ticket_id=self.ticket.id,
            customer_id=self.ticket.customer_id,
            points=30,
            now=self.clock.now(),
            hold=timedelta(minutes=30),
        )
        self.uow.point_reservation_repo.get_unconfirmed_by_ticket.return_value = reservation
        self.uow.loyalty_ledger_repo.sum_points.return_value = 50

        # When
        ticket = await self.use_case.confirm(ticket_id=self.ticket.id)

        # Then: reservation confirmed, points redeemed, then earned on the total
        confirmed = self.uow.point_reservation_repo.update.await_args.kwargs['reservation']
        assert confirmed.is_confirmed is True
        assert self._ledger_points() == [-30, 10]
        assert ticket.points_redeemed == 30
        assert ticket.points_earned == 10

    @pytest.mark.asyncio
    async def test_expired_reservation_is_not_redeemed(self):
        reservation = PointReservation.open(
            ticket_id=self.ticket.id,
            customer_id=self.ticket.customer_id,
            points=30,
            now=self.clock.now() - timedelta(hours=1),
            hold=timedelta(minutes=30),
        )
        self.uow.point_reservation_repo.get_unconfirmed_by_ticket.return_value = reservation

        ticket = await self.use_case.confirm(ticket_id=self.ticket.id)

        assert ticket.points_redeemed == 0
        assert self._ledger_points() == [10]

    @pytest.mark.asyncio
    async def test_confirmation_email_carries_the_qr_code(self):
        ticket = await self.use_case.confirm(ticket_id=self.ticket.id)

        assert len(self.email_notifier.sent_emails) == 1
        email = self.email_notifier.sent_emails[0]
        assert email['customer_id'] == ticket.customer_id
        assert email['subject'] == 'Ticket Confirmed - #TKT202603011200000001'
        assert email['has_qr_code'] is True
        self.uow.ticket_repo.set_qr_code_path.assert_awaited_once_with(
            ticket_id=ticket.id, qr_code_path='/memory/qr_codes/ABCD1234.png'
        )

    # ==================== Idempotency ====================

    @pytest.mark.asyncio
    async def test_already_paid_ticket_is_returned_unchanged(self):
        paid = self.ticket.mark_as_paid(
            paid_at=self.clock.now(), points_earned=10, points_redeemed=0
        )
        self.uow.ticket_repo.get_by_id.return_value = paid

        ticket = await self.use_case.confirm(ticket_id=self.ticket.id)

        assert ticket is paid
        self.uow.loyalty_ledger_repo.append.assert_not_called()
        self.uow.payment_repo.create.assert_not_called()
        self.uow.ticket_repo.update.assert_not_called()
        assert self.email_notifier.sent_emails == []

    # ==================== Failures ====================

    @pytest.mark.asyncio
    async def test_missing_ticket_is_not_found(self):
        self.uow.ticket_repo.get_by_id.return_value = None

        with pytest.raises(NotFoundError):
            await self.use_case.confirm(ticket_id=uuid.uuid4())

    @pytest.mark.asyncio
    async def test_held_points_missing_from_ledger_fails_the_confirmation(self):
        reservation = PointReservation.open(
            ticket_id=self.ticket.id,
            customer_id=self.ticket.customer_id,
            points=30,
            now=self.clock.now(),
            hold=timedelta(minutes=30),
        )
        self.uow.point_reservation_repo.get_unconfirmed_by_ticket.return_value = reservation
        self.uow.loyalty_ledger_repo.sum_points.return_value = 10

        with pytest.raises(InsufficientBalanceError):
            await self.use_case.confirm(ticket_id=self.ticket.id)

        assert self.uow.commit_count == 0

    @pytest.mark.asyncio
    async def test_unexpected_error_becomes_transaction_failure(self):
        self.uow.ticket_repo.update.side_effect = RuntimeError('connection reset')

        with pytest.raises(TransactionFailureError) as exc_info:
            await self.use_case.confirm(ticket_id=self.ticket.id)

        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert self.uow.commit_count == 0
        assert self.uow.rollback_count >= 1

    @pytest.mark.asyncio
    async def test_email_failure_does_not_undo_the_payment(self):
        failing_notifier = AsyncMock()
        failing_notifier.send_ticket_confirmation.side_effect = RuntimeError('smtp down')
        self.use_case.email_notifier = failing_notifier

        ticket = await self.use_case.confirm(ticket_id=self.ticket.id)

        assert ticket.is_paid is True
        failing_notifier.send_ticket_confirmation.assert_awaited_once()
