from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from src.service.ticket_loyalty.app.dto.booking_result import BookingResult
from src.service.ticket_loyalty.app.dto.loyalty_dto import PointsReservationResult
from src.service.ticket_loyalty.domain.entity.ticket_entity import Ticket


class TicketBookRequest(BaseModel):
    event_id: UUID
    price_tier_id: UUID
    quantity: int = Field(ge=1)
    discount_code: Optional[str] = None
    use_loyalty_points: bool = False
    # Omitted redeems nothing; an explicit null redeems as many as allowed
    points_to_redeem: Optional[int] = Field(default=0, ge=0)

    model_config = {
        'json_schema_extra': {
            'example': {
                'event_id': '01936d8f-5e73-7c4e-a9c5-123456789abc',
                'price_tier_id': '01936d8f-5e73-7c4e-a9c5-123456789abd',
                'quantity': 2,
                'discount_code': '10OFF',
                'use_loyalty_points': True,
                'points_to_redeem': 30,
            }
        }
    }


class TicketResponse(BaseModel):
    id: UUID
    customer_id: UUID
    event_id: UUID
    price_tier_id: UUID
    ticket_number: str
    ticket_code: str
    quantity: int
    total_amount: Decimal
    discount_applied: Decimal
    is_paid: bool
    points_earned: int
    points_redeemed: int
    has_qr_code: bool
    purchased_at: datetime
    paid_at: Optional[datetime] = None

    @classmethod
    def fields_from(cls, ticket: Ticket) -> dict:
        return {
            'id': ticket.id,
            'customer_id': ticket.customer_id,
            'event_id': ticket.event_id,
            'price_tier_id': ticket.price_tier_id,
            'ticket_number': ticket.ticket_number,
            'ticket_code': ticket.ticket_code,
            'quantity': ticket.quantity,
            'total_amount': ticket.total_amount,
            'discount_applied': ticket.discount_applied,
            'is_paid': ticket.is_paid,
            'points_earned': ticket.points_earned,
            'points_redeemed': ticket.points_redeemed,
            'has_qr_code': ticket.qr_code_path is not None,
            'purchased_at': ticket.purchased_at,
            'paid_at': ticket.paid_at,
        }

    @classmethod
    def from_entity(cls, ticket: Ticket) -> 'TicketResponse':
        return cls(**cls.fields_from(ticket))


class BookTicketResponse(TicketResponse):
    base_amount: Decimal
    points_reserved: int

    @classmethod
    def from_result(cls, result: BookingResult) -> 'BookTicketResponse':
        return cls(
            **cls.fields_from(result.ticket),
            base_amount=result.base_amount,
            points_reserved=result.points_reserved,
        )


class TicketListResponse(BaseModel):
    items: List[TicketResponse]
    total: int
    page: int
    page_size: int


class TicketValidationResponse(BaseModel):
    is_valid: bool
    message: str
    ticket_number: Optional[str] = None
    event_id: Optional[UUID] = None
    quantity: Optional[int] = None


class ApplyPromotionRequest(BaseModel):
    code: str = Field(min_length=1)

    model_config = {'json_schema_extra': {'example': {'code': '10OFF'}}}


class ReservePointsRequest(BaseModel):
    points: int = Field(gt=0)

    model_config = {'json_schema_extra': {'example': {'points': 30}}}


class PointsReservationResponse(BaseModel):
    ticket_id: UUID
    points_reserved: int
    available_balance: int
    total_amount: Decimal
    rolled_back: bool

    @classmethod
    def from_result(cls, result: PointsReservationResult) -> 'PointsReservationResponse':
        return cls(
            ticket_id=result.ticket_id,
            points_reserved=result.points_reserved,
            available_balance=result.available_balance,
            total_amount=result.total_amount,
            rolled_back=result.rolled_back,
        )
