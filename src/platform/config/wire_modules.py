"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.ticket_loyalty.app.command import (
    apply_promotion_use_case,
    award_loyalty_points_use_case,
    book_ticket_use_case,
    confirm_payment_use_case,
    create_discount_code_use_case,
    create_event_use_case,
    create_payment_session_use_case,
    reserve_loyalty_points_use_case,
    rollback_loyalty_points_use_case,
)
from src.service.ticket_loyalty.app.query import (
    get_event_use_case,
    get_loyalty_balance_use_case,
    get_payment_status_use_case,
    get_ticket_qr_code_use_case,
    get_ticket_use_case,
    list_customer_tickets_use_case,
    list_loyalty_history_use_case,
    validate_ticket_use_case,
)


WIRE_MODULES: list[ModuleType] = [
    book_ticket_use_case,
    confirm_payment_use_case,
    award_loyalty_points_use_case,
    reserve_loyalty_points_use_case,
    rollback_loyalty_points_use_case,
    apply_promotion_use_case,
    create_event_use_case,
    create_discount_code_use_case,
    create_payment_session_use_case,
    get_event_use_case,
    get_payment_status_use_case,
    get_ticket_use_case,
    list_customer_tickets_use_case,
    validate_ticket_use_case,
    get_ticket_qr_code_use_case,
    get_loyalty_balance_use_case,
    list_loyalty_history_use_case,
]
