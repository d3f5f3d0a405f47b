"""
Database Models

Import all models here to ensure they are registered with SQLAlchemy
"""

from src.service.ticket_loyalty.driven_adapter.model.discount_code_model import (
    DiscountCodeModel,
)
from src.service.ticket_loyalty.driven_adapter.model.event_model import EventModel, PriceTierModel
from src.service.ticket_loyalty.driven_adapter.model.loyalty_ledger_entry_model import (
    LoyaltyLedgerEntryModel,
)
from src.service.ticket_loyalty.driven_adapter.model.payment_model import PaymentModel
from src.service.ticket_loyalty.driven_adapter.model.point_reservation_model import (
    PointReservationModel,
)
from src.service.ticket_loyalty.driven_adapter.model.ticket_model import TicketModel

__all__ = [
    'DiscountCodeModel',
    'EventModel',
    'LoyaltyLedgerEntryModel',
    'PaymentModel',
    'PointReservationModel',
    'PriceTierModel',
    'TicketModel',
]
