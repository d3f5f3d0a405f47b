"""Mock email notifier: logs the message instead of sending it."""

from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from src.platform.logging.loguru_io import Logger
from src.service.ticket_loyalty.app.interface.i_email_notifier import IEmailNotifier


class MockEmailNotifier(IEmailNotifier):
    def __init__(self) -> None:
        self.sent_emails: List[dict] = []  # kept for tests

    @Logger.io
    async def send_ticket_confirmation(
        self,
        *,
        customer_id: UUID,
        ticket_number: str,
        total_amount: Decimal,
        points_earned: int,
        points_redeemed: int,
        qr_code_png: Optional[bytes] = None,
    ) -> bool:
        subject = f'Ticket Confirmed - #{ticket_number}'
        body = '\n'.join(
            [
                'Your payment has been received and your ticket is confirmed.',
                f'Ticket: #{ticket_number}',
                f'Total paid: {total_amount:.2f}',
                f'Loyalty points earned: {points_earned}',
                f'Loyalty points redeemed: {points_redeemed}',
            ]
        )
        self.sent_emails.append(
            {
                'customer_id': customer_id,
                'subject': subject,
                'body': body,
                'has_qr_code': qr_code_png is not None,
            }
        )
        Logger.base.info(f'📧 [MOCK-EMAIL] to customer {customer_id}: {subject}')
        return True
