"""
Reservation Store

At most one unconfirmed point reservation per ticket (unique ticket_id).
Expiry is lazy: expired rows are ignored on read and purged when a balance is computed.

    None --reserve--> Open --confirm--> Confirmed
                       |
                       +--rollback / expiry--> (deleted)
"""

from datetime import timedelta
from typing import Optional
from uuid import UUID

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import DomainError, InsufficientBalanceError
from src.platform.logging.loguru_io import Logger
from src.service.ticket_loyalty.app.interface.i_clock import IClock
from src.service.ticket_loyalty.app.service.loyalty_ledger import LoyaltyLedger
from src.service.ticket_loyalty.domain.entity.point_reservation_entity import PointReservation


class ReservationStore:
    def __init__(
        self,
        *,
        uow: AbstractUnitOfWork,
        clock: IClock,
        ledger: LoyaltyLedger,
        hold: timedelta,
    ) -> None:
        self.uow = uow
        self.clock = clock
        self.ledger = ledger
        self.hold = hold

    @Logger.io
    async def reserve(self, *, ticket_id: UUID, customer_id: UUID, points: int) -> PointReservation:
        if points <= 0:
            raise DomainError('Points to reserve must be positive')

        balance = await self.ledger.balance(customer_id=customer_id)
        held = await self.ledger.held_points(customer_id=customer_id)
        now = self.clock.now()

        existing = await self.uow.point_reservation_repo.get_unconfirmed_by_ticket(
            ticket_id=ticket_id
        )
        # The ticket's own hold is the one being replaced
        own_hold = existing.reserved_points if existing and existing.is_open(now) else 0
        if points > max(0, balance - held + own_hold):
            raise InsufficientBalanceError()

        if existing:
            return await self.uow.point_reservation_repo.update(
                reservation=existing.renew(points=points, now=now, hold=self.hold)
            )
        return await self.uow.point_reservation_repo.create(
            reservation=PointReservation.open(
                ticket_id=ticket_id,
                customer_id=customer_id,
                points=points,
                now=now,
                hold=self.hold,
            )
        )

    async def get_open(self, *, ticket_id: UUID) -> Optional[PointReservation]:
        reservation = await self.uow.point_reservation_repo.get_unconfirmed_by_ticket(
            ticket_id=ticket_id
        )
        if reservation and reservation.is_open(self.clock.now()):
            return reservation
        return None

    @Logger.io
    async def confirm(self, *, ticket_id: UUID) -> Optional[PointReservation]:
        reservation = await self.get_open(ticket_id=ticket_id)
        if reservation is None:
            return None
        return await self.uow.point_reservation_repo.update(reservation=reservation.confirm())

    @Logger.io
    async def rollback(self, *, ticket_id: UUID) -> bool:
        reservation = await self.uow.point_reservation_repo.get_unconfirmed_by_ticket(
            ticket_id=ticket_id
        )
        if reservation is None:
            return False
        await self.uow.point_reservation_repo.delete(reservation_id=reservation.id)
        return True

    async def purge_expired(self, *, customer_id: UUID) -> int:
        return await self.uow.point_reservation_repo.delete_expired(
            customer_id=customer_id, now=self.clock.now()
        )
