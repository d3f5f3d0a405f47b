"""
Integration tests for the loyalty ledger and point reservations

Test Coverage:
1. Balance is the sum of ledger entries; available balance subtracts open holds
2. One open reservation per ticket, renewed in place
3. Holds cannot exceed the available balance
4. Lazy expiry releases held points
5. Rollback deletes the hold
6. Holding, changing or releasing points reprices the unpaid ticket
"""

from datetime import timedelta
from decimal import Decimal
import uuid

import pytest
import pytest_asyncio

from src.platform.exception.exceptions import (
    DomainError,
    ForbiddenError,
    InsufficientBalanceError,
)
from src.service.ticket_loyalty.app.command.book_ticket_use_case import BookTicketUseCase
from src.service.ticket_loyalty.app.command.confirm_payment_use_case import (
    ConfirmPaymentUseCase,
)
from src.service.ticket_loyalty.app.command.reserve_loyalty_points_use_case import (
    ReserveLoyaltyPointsUseCase,
)
from src.service.ticket_loyalty.app.command.rollback_loyalty_points_use_case import (
    RollbackLoyaltyPointsUseCase,
)
from src.service.ticket_loyalty.app.query.get_loyalty_balance_use_case import (
    GetLoyaltyBalanceUseCase,
)
from src.service.ticket_loyalty.app.query.list_loyalty_history_use_case import (
    ListLoyaltyHistoryUseCase,
)
from src.service.ticket_loyalty.app.service.loyalty_ledger import LoyaltyLedger
from src.service.ticket_loyalty.app.service.reservation_store import ReservationStore
from src.service.ticket_loyalty.domain.enum.ledger_entry_type import LedgerEntryType


pytestmark = pytest.mark.integration

HOLD = timedelta(minutes=30)


@pytest.fixture
def book_use_case(uow_factory, clock, ticket_code_generator, qr_code_generator, file_storage):
    return BookTicketUseCase(
        uow=uow_factory(),
        clock=clock,
        ticket_code_generator=ticket_code_generator,
        qr_code_generator=qr_code_generator,
        file_storage=file_storage,
        point_hold=HOLD,
        max_tickets_per_booking=10,
    )


@pytest_asyncio.fixture
async def unpaid_ticket(seed_event, book_use_case, customer_id):
    event = await seed_event()
    result = await book_use_case.book(
        customer_id=customer_id,
        event_id=event.id,
        price_tier_id=event.price_tiers[0].id,
        quantity=1,
    )
    return result.ticket


class TestLoyaltyLedger:
    @pytest.mark.asyncio
    async def test_balance_is_sum_of_entries(self, uow_factory, clock, customer_id, seed_points):
        # Given
        await seed_points(customer_id, 50)

        # When
        async with uow_factory() as uow:
            ledger = LoyaltyLedger(uow=uow, clock=clock)
            await ledger.earn(customer_id=customer_id, points=20, description='Bonus')
            await ledger.redeem(customer_id=customer_id, points=15, description='Redeemed')
            await uow.commit()

        # Then
        async with uow_factory() as uow:
            assert await LoyaltyLedger(uow=uow, clock=clock).balance(customer_id=customer_id) == 55

    @pytest.mark.asyncio
    async def test_unknown_customer_has_zero_balance(self, uow_factory, clock):
        async with uow_factory() as uow:
            ledger = LoyaltyLedger(uow=uow, clock=clock)
            assert await ledger.balance(customer_id=uuid.uuid4()) == 0
            assert await ledger.available_balance(customer_id=uuid.uuid4()) == 0

    @pytest.mark.asyncio
    async def test_redeem_more_than_balance_writes_nothing(
        self, uow_factory, clock, customer_id, seed_points
    ):
        await seed_points(customer_id, 10)

        async with uow_factory() as uow:
            with pytest.raises(InsufficientBalanceError):
                await LoyaltyLedger(uow=uow, clock=clock).redeem(
                    customer_id=customer_id, points=11, description='Too much'
                )

        async with uow_factory() as uow:
            assert await LoyaltyLedger(uow=uow, clock=clock).balance(customer_id=customer_id) == 10

    @pytest.mark.asyncio
    async def test_non_positive_amounts_are_rejected(self, uow_factory, clock, customer_id):
        async with uow_factory() as uow:
            ledger = LoyaltyLedger(uow=uow, clock=clock)
            with pytest.raises(DomainError):
                await ledger.earn(customer_id=customer_id, points=0, description='Nothing')
            with pytest.raises(DomainError):
                await ledger.redeem(customer_id=customer_id, points=-1, description='Nothing')

    @pytest.mark.asyncio
    async def test_history_is_newest_first(self, uow_factory, clock, customer_id, seed_points):
        await seed_points(customer_id, 50)
        clock.advance(minutes=5)
        async with uow_factory() as uow:
            await LoyaltyLedger(uow=uow, clock=clock).redeem(
                customer_id=customer_id, points=20, description='Redeemed'
            )
            await uow.commit()

        history = await ListLoyaltyHistoryUseCase(uow=uow_factory(), clock=clock).list(
            customer_id=customer_id
        )

        assert [entry.points for entry in history] == [-20, 50]
        assert [entry.entry_type for entry in history] == [
            LedgerEntryType.REDEEMED,
            LedgerEntryType.EARNED,
        ]


class TestPointReservations:
    @pytest.mark.asyncio
    async def test_hold_reduces_available_until_it_expires(
        self, uow_factory, clock, customer_id, seed_points, unpaid_ticket
    ):
        # Given: balance 50
        await seed_points(customer_id, 50)

        # When: 30 points are held for the ticket
        result = await ReserveLoyaltyPointsUseCase(
            uow=uow_factory(), clock=clock, point_hold=HOLD
        ).reserve(ticket_id=unpaid_ticket.id, customer_id=customer_id, points=30)

        # Then: 20 left to spend, ledger untouched
        assert result.points_reserved == 30
        assert result.available_balance == 20
        balance = await GetLoyaltyBalanceUseCase(uow=uow_factory(), clock=clock).get(
            customer_id=customer_id
        )
        assert balance.balance == 50
        assert balance.available_balance == 20
        assert balance.available_discount_value == Decimal('20.00')

        # When: the hold window passes
        clock.advance(minutes=31)

        # Then: everything is available again and the expired hold is purged
        balance = await GetLoyaltyBalanceUseCase(uow=uow_factory(), clock=clock).get(
            customer_id=customer_id
        )
        assert balance.available_balance == 50
        async with uow_factory() as uow:
            assert (
                await uow.point_reservation_repo.get_unconfirmed_by_ticket(
                    ticket_id=unpaid_ticket.id
                )
                is None
            )

    @pytest.mark.asyncio
    async def test_reserving_again_renews_the_same_hold(
        self, uow_factory, clock, customer_id, seed_points, unpaid_ticket
    ):
        await seed_points(customer_id, 50)
        use_case = ReserveLoyaltyPointsUseCase(uow=uow_factory(), clock=clock, point_hold=HOLD)

        await use_case.reserve(ticket_id=unpaid_ticket.id, customer_id=customer_id, points=30)
        clock.advance(minutes=10)
        # Own hold counts back: 50 - 30 + 30 = 50 reservable
        result = await use_case.reserve(
            ticket_id=unpaid_ticket.id, customer_id=customer_id, points=45
        )

        assert result.points_reserved == 45
        assert result.available_balance == 5
        async with uow_factory() as uow:
            reservation = await uow.point_reservation_repo.get_unconfirmed_by_ticket(
                ticket_id=unpaid_ticket.id
            )
            assert reservation.reserved_points == 45
            assert reservation.expires_at == clock.now() + HOLD
            assert await uow.point_reservation_repo.sum_open_points(
                customer_id=customer_id, now=clock.now()
            ) == 45

    @pytest.mark.asyncio
    async def test_holds_cannot_exceed_available_balance(
        self, uow_factory, clock, customer_id, seed_points, seed_event, book_use_case
    ):
        # Given: balance 50, two unpaid tickets
        await seed_points(customer_id, 50)
        event = await seed_event()
        tier_id = event.price_tiers[0].id
        first = await book_use_case.book(
            customer_id=customer_id, event_id=event.id, price_tier_id=tier_id, quantity=1
        )
        second = await book_use_case.book(
            customer_id=customer_id, event_id=event.id, price_tier_id=tier_id, quantity=1
        )
        use_case = ReserveLoyaltyPointsUseCase(uow=uow_factory(), clock=clock, point_hold=HOLD)
        await use_case.reserve(ticket_id=first.ticket.id, customer_id=customer_id, points=30)

        # When / Then: 30 is more than the remaining 20
        with pytest.raises(InsufficientBalanceError):
            await use_case.reserve(
                ticket_id=second.ticket.id, customer_id=customer_id, points=30
            )

        result = await use_case.reserve(
            ticket_id=second.ticket.id, customer_id=customer_id, points=20
        )
        assert result.available_balance == 0

    @pytest.mark.asyncio
    async def test_rollback_releases_the_hold(
        self, uow_factory, clock, customer_id, seed_points, unpaid_ticket
    ):
        await seed_points(customer_id, 50)
        await ReserveLoyaltyPointsUseCase(
            uow=uow_factory(), clock=clock, point_hold=HOLD
        ).reserve(ticket_id=unpaid_ticket.id, customer_id=customer_id, points=30)
        rollback = RollbackLoyaltyPointsUseCase(uow=uow_factory(), clock=clock, point_hold=HOLD)

        result = await rollback.rollback(ticket_id=unpaid_ticket.id, customer_id=customer_id)

        assert result.rolled_back is True
        assert result.available_balance == 50
        again = await rollback.rollback(ticket_id=unpaid_ticket.id, customer_id=customer_id)
        assert again.rolled_back is False

    @pytest.mark.asyncio
    async def test_only_the_owner_can_hold_points_for_a_ticket(
        self, uow_factory, clock, seed_points, unpaid_ticket
    ):
        stranger = uuid.uuid4()
        await seed_points(stranger, 50)

        with pytest.raises(ForbiddenError):
            await ReserveLoyaltyPointsUseCase(
                uow=uow_factory(), clock=clock, point_hold=HOLD
            ).reserve(ticket_id=unpaid_ticket.id, customer_id=stranger, points=10)

    @pytest.mark.asyncio
    async def test_confirmed_hold_is_no_longer_open(
        self, uow_factory, clock, customer_id, seed_points, unpaid_ticket
    ):
        await seed_points(customer_id, 50)
        async with uow_factory() as uow:
            ledger = LoyaltyLedger(uow=uow, clock=clock)
            store = ReservationStore(uow=uow, clock=clock, ledger=ledger, hold=HOLD)
            await store.reserve(ticket_id=unpaid_ticket.id, customer_id=customer_id, points=30)

            confirmed = await store.confirm(ticket_id=unpaid_ticket.id)

            assert confirmed.is_confirmed is True
            assert await store.get_open(ticket_id=unpaid_ticket.id) is None
            assert await store.confirm(ticket_id=unpaid_ticket.id) is None
            assert await store.rollback(ticket_id=unpaid_ticket.id) is False


@pytest.fixture
def confirm_use_case(uow_factory, clock, email_notifier, qr_code_generator, file_storage):
    return ConfirmPaymentUseCase(
        uow=uow_factory(),
        clock=clock,
        email_notifier=email_notifier,
        qr_code_generator=qr_code_generator,
        file_storage=file_storage,
        point_hold=HOLD,
    )


@pytest_asyncio.fixture
async def ticket_with_points(seed_event, seed_points, book_use_case, customer_id):
    # 1 x 100 with 30 of 50 points held: total 70
    await seed_points(customer_id, 50)
    event = await seed_event()
    result = await book_use_case.book(
        customer_id=customer_id,
        event_id=event.id,
        price_tier_id=event.price_tiers[0].id,
        quantity=1,
        use_loyalty_points=True,
        points_to_redeem=30,
    )
    assert result.ticket.total_amount == Decimal('70.00')
    return result.ticket


class TestTicketRepricing:
    @pytest.mark.asyncio
    async def test_rollback_restores_the_price_before_points(
        self, uow_factory, clock, customer_id, ticket_with_points, confirm_use_case
    ):
        # When: the held points are released
        result = await RollbackLoyaltyPointsUseCase(
            uow=uow_factory(), clock=clock, point_hold=HOLD
        ).rollback(ticket_id=ticket_with_points.id, customer_id=customer_id)

        # Then: the ticket costs its full price again
        assert result.rolled_back is True
        assert result.total_amount == Decimal('100.00')
        async with uow_factory() as uow:
            stored = await uow.ticket_repo.get_by_id(ticket_id=ticket_with_points.id)
        assert stored.total_amount == Decimal('100.00')

        # When: it is paid
        paid = await confirm_use_case.confirm(ticket_id=ticket_with_points.id)

        # Then: nothing redeemed, full price charged
        assert paid.points_redeemed == 0
        assert paid.total_amount == Decimal('100.00')
        balance = await GetLoyaltyBalanceUseCase(uow=uow_factory(), clock=clock).get(
            customer_id=customer_id
        )
        assert balance.balance == 50 + 10

    @pytest.mark.parametrize(
        'points,expected_total',
        [
            (1, Decimal('99.00')),
            (45, Decimal('55.00')),
        ],
    )
    @pytest.mark.asyncio
    async def test_changing_the_hold_reprices_the_ticket(
        self,
        uow_factory,
        clock,
        customer_id,
        ticket_with_points,
        confirm_use_case,
        points,
        expected_total,
    ):
        # When: the hold is replaced with a different amount
        result = await ReserveLoyaltyPointsUseCase(
            uow=uow_factory(), clock=clock, point_hold=HOLD
        ).reserve(ticket_id=ticket_with_points.id, customer_id=customer_id, points=points)

        # Then
        assert result.points_reserved == points
        assert result.total_amount == expected_total

        paid = await confirm_use_case.confirm(ticket_id=ticket_with_points.id)

        assert paid.points_redeemed == points
        assert paid.total_amount == expected_total
        assert paid.total_amount + paid.points_redeemed == Decimal('100.00')

    @pytest.mark.asyncio
    async def test_cannot_hold_more_points_than_the_ticket_costs(
        self, uow_factory, clock, customer_id, seed_points, ticket_with_points
    ):
        # Given: plenty of points
        await seed_points(customer_id, 500)

        # When / Then
        with pytest.raises(DomainError, match='At most 100 points'):
            await ReserveLoyaltyPointsUseCase(
                uow=uow_factory(), clock=clock, point_hold=HOLD
            ).reserve(ticket_id=ticket_with_points.id, customer_id=customer_id, points=101)

        # The original hold and price stay in place
        async with uow_factory() as uow:
            stored = await uow.ticket_repo.get_by_id(ticket_id=ticket_with_points.id)
            reservation = await uow.point_reservation_repo.get_unconfirmed_by_ticket(
                ticket_id=ticket_with_points.id
            )
        assert stored.total_amount == Decimal('70.00')
        assert reservation.reserved_points == 30
