from decimal import ROUND_HALF_UP, Decimal


CENT = Decimal('0.01')
ZERO = Decimal('0.00')


def to_money(value: Decimal | int | str) -> Decimal:
    """Quantize any amount to two decimal places."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
