from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import AwareDatetime, BaseModel, Field

from src.service.ticket_loyalty.domain.entity.discount_code_entity import DiscountCode
from src.service.ticket_loyalty.domain.entity.event_entity import Event
from src.service.ticket_loyalty.domain.enum.discount_type import DiscountType


class PriceTierInput(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    price: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    stock: int = Field(ge=0)


class EventCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    venue_name: str = Field(min_length=1, max_length=255)
    starts_at: AwareDatetime
    price_tiers: List[PriceTierInput] = Field(min_length=1)

    model_config = {
        'json_schema_extra': {
            'example': {
                'name': 'Summer Jazz Night',
                'venue_name': 'Riverside Hall',
                'starts_at': '2026-07-01T19:30:00Z',
                'price_tiers': [
                    {'name': 'VIP', 'price': '250.00', 'stock': 50},
                    {'name': 'General', 'price': '100.00', 'stock': 500},
                ],
            }
        }
    }


class PriceTierResponse(BaseModel):
    id: UUID
    name: str
    price: Decimal
    remaining_stock: int
    is_active: bool


class EventResponse(BaseModel):
    id: UUID
    name: str
    venue_name: str
    starts_at: datetime
    created_at: Optional[datetime] = None
    price_tiers: List[PriceTierResponse]

    @classmethod
    def from_entity(cls, event: Event) -> 'EventResponse':
        return cls(
            id=event.id,
            name=event.name,
            venue_name=event.venue_name,
            starts_at=event.starts_at,
            created_at=event.created_at,
            price_tiers=[
                PriceTierResponse(
                    id=tier.id,
                    name=tier.name,
                    price=tier.price,
                    remaining_stock=tier.remaining_stock,
                    is_active=tier.is_active,
                )
                for tier in event.price_tiers
            ],
        )


class DiscountCodeCreateRequest(BaseModel):
    code: str = Field(min_length=1, max_length=50)
    discount_type: DiscountType
    value: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    valid_from: AwareDatetime
    valid_to: AwareDatetime
    event_id: Optional[UUID] = None

    model_config = {
        'json_schema_extra': {
            'example': {
                'code': '10OFF',
                'discount_type': 'percentage',
                'value': '10',
                'valid_from': '2026-01-01T00:00:00Z',
                'valid_to': '2026-12-31T23:59:59Z',
                'event_id': None,
            }
        }
    }


class DiscountCodeResponse(BaseModel):
    id: UUID
    code: str
    discount_type: DiscountType
    value: Decimal
    valid_from: datetime
    valid_to: datetime
    event_id: Optional[UUID] = None
    is_active: bool

    @classmethod
    def from_entity(cls, discount_code: DiscountCode) -> 'DiscountCodeResponse':
        return cls(
            id=discount_code.id,
            code=discount_code.code,
            discount_type=discount_code.discount_type,
            value=discount_code.value,
            valid_from=discount_code.valid_from,
            valid_to=discount_code.valid_to,
            event_id=discount_code.event_id,
            is_active=discount_code.is_active,
        )
