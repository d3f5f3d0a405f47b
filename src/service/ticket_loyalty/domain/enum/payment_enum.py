from enum import StrEnum


class PaymentMethod(StrEnum):
    CARD = 'card'
    MANUAL = 'manual'


class PaymentStatus(StrEnum):
    PENDING = 'pending'
    COMPLETED = 'completed'


class PaymentSignal(StrEnum):
    """Outcome reported by the payment gateway webhook"""

    SUCCEEDED = 'succeeded'
    FAILED = 'failed'
