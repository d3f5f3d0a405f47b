"""
Ticket number and code generation

Randomness comes from the random tail of a UUIDv7 (62 bits), so no generator
state is shared between requests.
"""

from datetime import datetime
import string

from uuid_utils.compat import uuid7

from src.service.ticket_loyalty.app.interface.i_ticket_code_generator import (
    ITicketCodeGenerator,
)


CODE_ALPHABET = string.ascii_uppercase + string.digits
CODE_LENGTH = 8
_RANDOM_BITS_MASK = (1 << 62) - 1


def _random_int() -> int:
    return uuid7().int & _RANDOM_BITS_MASK


class TicketCodeGeneratorImpl(ITicketCodeGenerator):
    def ticket_number(self, *, now: datetime) -> str:
        return f'TKT{now:%Y%m%d%H%M%S}{_random_int() % 10000:04d}'

    def ticket_code(self) -> str:
        value = _random_int()
        chars = []
        for _ in range(CODE_LENGTH):
            value, index = divmod(value, len(CODE_ALPHABET))
            chars.append(CODE_ALPHABET[index])
        return ''.join(chars)
