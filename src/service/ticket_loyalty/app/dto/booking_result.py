from decimal import Decimal

import attrs

from src.service.ticket_loyalty.domain.entity.ticket_entity import Ticket


@attrs.frozen
class BookingResult:
    ticket: Ticket
    base_amount: Decimal
    points_reserved: int
