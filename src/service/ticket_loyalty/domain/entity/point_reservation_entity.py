from datetime import datetime, timedelta
from uuid import UUID

import attrs
from uuid_utils.compat import uuid7


@attrs.define
class PointReservation:
    """
    Temporary hold of loyalty points for one unpaid ticket.

    States:
        open       is_confirmed=False and expires_at > now
        expired    is_confirmed=False and expires_at <= now (purged lazily)
        confirmed  is_confirmed=True (terminal)
    Rolled back and purged reservations are deleted rather than flagged.
    """

    ticket_id: UUID
    customer_id: UUID
    reserved_points: int
    reserved_at: datetime
    expires_at: datetime
    is_confirmed: bool = False
    id: UUID = attrs.field(factory=uuid7)

    @classmethod
    def open(
        cls,
        *,
        ticket_id: UUID,
        customer_id: UUID,
        points: int,
        now: datetime,
        hold: timedelta,
    ) -> 'PointReservation':
        return cls(
            ticket_id=ticket_id,
            customer_id=customer_id,
            reserved_points=points,
            reserved_at=now,
            expires_at=now + hold,
        )

    def is_open(self, now: datetime) -> bool:
        return not self.is_confirmed and self.expires_at > now

    def renew(self, *, points: int, now: datetime, hold: timedelta) -> 'PointReservation':
        return attrs.evolve(self, reserved_points=points, reserved_at=now, expires_at=now + hold)

    def confirm(self) -> 'PointReservation':
        return attrs.evolve(self, is_confirmed=True)
