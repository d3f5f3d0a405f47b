from datetime import datetime, timedelta
import time
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
    DomainError,
    InsufficientBalanceError,
    InsufficientStockError,
    NotFoundError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.ticket_loyalty_metrics import metrics
from src.service.ticket_loyalty.app.dto.booking_result import BookingResult
from src.service.ticket_loyalty.app.interface.i_clock import IClock
from src.service.ticket_loyalty.app.interface.i_file_storage import IFileStorage
from src.service.ticket_loyalty.app.interface.i_qr_code_generator import IQrCodeGenerator
from src.service.ticket_loyalty.app.interface.i_ticket_code_generator import (
    ITicketCodeGenerator,
)
from src.service.ticket_loyalty.app.service.loyalty_ledger import LoyaltyLedger
from src.service.ticket_loyalty.app.service.reservation_store import ReservationStore
from src.service.ticket_loyalty.app.service.ticket_qr_code_service import TicketQrCodeService
from src.service.ticket_loyalty.domain.entity.ticket_entity import Ticket
from src.service.ticket_loyalty.domain.pricing_resolver import PricingResolver


class BookTicketUseCase:
    """
    Book tickets of one price tier against its remaining stock.

    Flow (one unit of work):
    1. Load the tier scoped to the event, fail fast on inactive tier / low stock
    2. Resolve price: discount code, then loyalty points redemption
    3. Conditionally decrement stock (oversell guard)
    4. Insert the unpaid ticket
    5. Hold the redeemed points in a reservation until payment is confirmed

    After commit, the QR image is rendered and attached best-effort.
    """

    def __init__(
        self,
        *,
        uow: AbstractUnitOfWork,
        clock: IClock,
        ticket_code_generator: ITicketCodeGenerator,
        qr_code_generator: IQrCodeGenerator,
        file_storage: IFileStorage,
        point_hold: timedelta,
        max_tickets_per_booking: int,
        ticket_code_max_attempts: int = 5,
    ) -> None:
        self.uow = uow
        self.clock = clock
        self.ticket_code_generator = ticket_code_generator
        self.qr_code_service = TicketQrCodeService(
            qr_code_generator=qr_code_generator, file_storage=file_storage
        )
        self.point_hold = point_hold
        self.max_tickets_per_booking = max_tickets_per_booking
        self.ticket_code_max_attempts = ticket_code_max_attempts
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
        clock: IClock = Depends(Provide[Container.clock]),
        ticket_code_generator: ITicketCodeGenerator = Depends(
            Provide[Container.ticket_code_generator]
        ),
        qr_code_generator: IQrCodeGenerator = Depends(Provide[Container.qr_code_generator]),
        file_storage: IFileStorage = Depends(Provide[Container.file_storage]),
        settings: Settings = Depends(Provide[Container.config_service]),
    ) -> Self:
        return cls(
            uow=uow,
            clock=clock,
            ticket_code_generator=ticket_code_generator,
            qr_code_generator=qr_code_generator,
            file_storage=file_storage,
            point_hold=timedelta(minutes=settings.POINT_RESERVATION_HOLD_MINUTES),
            max_tickets_per_booking=settings.MAX_TICKETS_PER_BOOKING,
            ticket_code_max_attempts=settings.TICKET_CODE_MAX_ATTEMPTS,
        )

    @Logger.io
    async def book(
        self,
        *,
        customer_id: UUID,
        event_id: UUID,
        price_tier_id: UUID,
        quantity: int,
        discount_code: Optional[str] = None,
        use_loyalty_points: bool = False,
        points_to_redeem: Optional[int] = None,
    ) -> BookingResult:
        """
        Raises:
            DomainError: quantity out of range
            NotFoundError: tier missing, inactive or not part of the event
            InsufficientStockError: not enough tickets left
            InsufficientBalanceError: points hold could not be placed
        """
        with self.tracer.start_as_current_span(
            'use_case.book_ticket',
            attributes={
                'event.id': str(event_id),
                'price_tier.id': str(price_tier_id),
                'booking.quantity': quantity,
            },
        ):
            started = time.perf_counter()
            if quantity < 1 or quantity > self.max_tickets_per_booking:
                raise DomainError(
                    f'Quantity must be between 1 and {self.max_tickets_per_booking}'
                )

            try:
                result = await self._book_in_transaction(
                    customer_id=customer_id,
                    event_id=event_id,
                    price_tier_id=price_tier_id,
                    quantity=quantity,
                    discount_code=discount_code,
                    use_loyalty_points=use_loyalty_points,
                    points_to_redeem=points_to_redeem,
                )
            except CustomBaseError as e:
                metrics.record_booking(result=self._result_label(e))
                raise

            metrics.record_booking(
                result='success', quantity=quantity, duration=time.perf_counter() - started
            )
            metrics.record_points(movement='reserved', points=result.points_reserved)
            Logger.base.info(
                f'🎫 [BOOKING] {result.ticket.ticket_number} booked by {customer_id}: '
                f'{quantity} x tier {price_tier_id}, total {result.ticket.total_amount}, '
                f'{result.points_reserved} points held'
            )

            ticket = await self._attach_qr_code(ticket=result.ticket)
            return BookingResult(
                ticket=ticket,
                base_amount=result.base_amount,
                points_reserved=result.points_reserved,
            )

    async def _book_in_transaction(
        self,
        *,
        customer_id: UUID,
        event_id: UUID,
        price_tier_id: UUID,
        quantity: int,
        discount_code: Optional[str],
        use_loyalty_points: bool,
        points_to_redeem: Optional[int],
    ) -> BookingResult:
        async with self.uow:
            tier = await self.uow.event_repo.get_price_tier(
                event_id=event_id, price_tier_id=price_tier_id
            )
            if tier is None:
                raise NotFoundError('Price tier not found for this event')
            tier.ensure_bookable(quantity=quantity)

            now = self.clock.now()
            code = None
            if discount_code:
                # Unknown codes price as no discount
                code = await self.uow.discount_code_repo.get_by_code(code=discount_code)

            ledger = LoyaltyLedger(uow=self.uow, clock=self.clock)
            available_points = 0
            if use_loyalty_points:
                available_points = await ledger.available_balance(customer_id=customer_id)

            pricing = PricingResolver.resolve(
                unit_price=tier.price,
                quantity=quantity,
                event_id=event_id,
                now=now,
                discount_code=code,
                use_loyalty_points=use_loyalty_points,
                requested_points=points_to_redeem,
                available_points=available_points,
            )

            if not await self.uow.event_repo.decrement_stock(
                price_tier_id=tier.id, quantity=quantity
            ):
                raise InsufficientStockError()

            ticket = Ticket.create(
                customer_id=customer_id,
                event_id=event_id,
                price_tier_id=tier.id,
                ticket_number=await self._unique_ticket_number(now=now),
                ticket_code=await self._unique_ticket_code(),
                quantity=quantity,
                total_amount=pricing.total_amount,
                discount_applied=pricing.discount_applied,
                amount_before_points=pricing.amount_before_points,
                purchased_at=now,
            )
            await self.uow.ticket_repo.create(ticket=ticket)

            if pricing.points_to_reserve > 0:
                store = ReservationStore(
                    uow=self.uow, clock=self.clock, ledger=ledger, hold=self.point_hold
                )
                await store.reserve(
                    ticket_id=ticket.id,
                    customer_id=customer_id,
                    points=pricing.points_to_reserve,
                )

            await self.uow.commit()

        return BookingResult(
            ticket=ticket,
            base_amount=pricing.base_amount,
            points_reserved=pricing.points_to_reserve,
        )

    async def _unique_ticket_number(self, *, now: datetime) -> str:
        for _ in range(self.ticket_code_max_attempts):
            number = self.ticket_code_generator.ticket_number(now=now)
            if not await self.uow.ticket_repo.exists_with_number(ticket_number=number):
                return number
        raise DomainError(
            'Could not generate a unique ticket number, please try again', status_code=503
        )

    async def _unique_ticket_code(self) -> str:
        for _ in range(self.ticket_code_max_attempts):
            code = self.ticket_code_generator.ticket_code()
            if not await self.uow.ticket_repo.exists_with_code(ticket_code=code):
                return code
        raise DomainError(
            'Could not generate a unique ticket code, please try again', status_code=503
        )

    async def _attach_qr_code(self, *, ticket: Ticket) -> Ticket:
        try:
            path, _ = await self.qr_code_service.render_and_store(ticket=ticket)
            async with self.uow:
                await self.uow.ticket_repo.set_qr_code_path(ticket_id=ticket.id, qr_code_path=path)
                await self.uow.commit()
        except Exception as e:
            Logger.base.warning(
                f'⚠️ [BOOKING] QR code for {ticket.ticket_number} not stored: {e}'
            )
            return ticket
        return ticket.attach_qr_code(qr_code_path=path)

    @staticmethod
    def _result_label(error: CustomBaseError) -> str:
        if isinstance(error, InsufficientStockError):
            return 'insufficient_stock'
        if isinstance(error, InsufficientBalanceError):
            return 'insufficient_balance'
        if isinstance(error, NotFoundError):
            return 'not_found'
        return 'rejected'
