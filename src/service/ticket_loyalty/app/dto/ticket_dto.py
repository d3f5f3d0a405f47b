from typing import List, Optional

import attrs

from src.service.ticket_loyalty.domain.entity.ticket_entity import Ticket


@attrs.frozen
class TicketPage:
    items: List[Ticket]
    total: int
    page: int
    page_size: int


@attrs.frozen
class TicketValidation:
    is_valid: bool
    message: str
    ticket: Optional[Ticket] = None
