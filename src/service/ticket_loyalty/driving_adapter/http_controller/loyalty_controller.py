from decimal import Decimal
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from src.platform.logging.loguru_io import Logger
from src.service.ticket_loyalty.app.query.get_loyalty_balance_use_case import (
    GetLoyaltyBalanceUseCase,
)
from src.service.ticket_loyalty.app.query.list_loyalty_history_use_case import (
    ListLoyaltyHistoryUseCase,
)
from src.service.ticket_loyalty.domain.loyalty_rules import discount_value, estimated_points_for
from src.service.ticket_loyalty.domain.money import to_money
from src.service.ticket_loyalty.driving_adapter.http_controller.auth.customer_identity import (
    get_current_customer_id,
)
from src.service.ticket_loyalty.driving_adapter.http_controller.schema.loyalty_schema import (
    DiscountValueResponse,
    LoyaltyBalanceResponse,
    LoyaltyHistoryEntryResponse,
    PointsEstimateResponse,
)


router = APIRouter()


@router.get('/balance')
@Logger.io
async def get_loyalty_balance(
    customer_id: UUID = Depends(get_current_customer_id),
    use_case: GetLoyaltyBalanceUseCase = Depends(GetLoyaltyBalanceUseCase.depends),
) -> LoyaltyBalanceResponse:
    balance = await use_case.get(customer_id=customer_id)
    return LoyaltyBalanceResponse(
        customer_id=balance.customer_id,
        balance=balance.balance,
        available_balance=balance.available_balance,
        available_discount_value=balance.available_discount_value,
    )


@router.get('/history')
@Logger.io
async def list_loyalty_history(
    customer_id: UUID = Depends(get_current_customer_id),
    use_case: ListLoyaltyHistoryUseCase = Depends(ListLoyaltyHistoryUseCase.depends),
) -> List[LoyaltyHistoryEntryResponse]:
    entries = await use_case.list(customer_id=customer_id)
    return [LoyaltyHistoryEntryResponse.from_entity(entry) for entry in entries]


@router.get('/estimate')
async def estimate_points(amount: Decimal = Query(ge=0)) -> PointsEstimateResponse:
    return PointsEstimateResponse(
        amount=to_money(amount), estimated_points=estimated_points_for(amount)
    )


@router.get('/discount')
async def get_discount_value(points: int = Query(ge=0)) -> DiscountValueResponse:
    return DiscountValueResponse(points=points, discount_value=discount_value(points))
