from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.ticket_loyalty.app.interface.i_discount_code_repo import IDiscountCodeRepo
from src.service.ticket_loyalty.domain.entity.discount_code_entity import DiscountCode
from src.service.ticket_loyalty.domain.enum.discount_type import DiscountType
from src.service.ticket_loyalty.driven_adapter.model.discount_code_model import (
    DiscountCodeModel,
)


class DiscountCodeRepoImpl(IDiscountCodeRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _to_entity(db_code: DiscountCodeModel) -> DiscountCode:
        return DiscountCode(
            id=db_code.id,
            code=db_code.code,
            discount_type=DiscountType(db_code.discount_type),
            value=db_code.value,
            valid_from=db_code.valid_from,
            valid_to=db_code.valid_to,
            event_id=db_code.event_id,
            is_active=db_code.is_active,
        )

    @Logger.io
    async def get_by_code(self, *, code: str) -> Optional[DiscountCode]:
        # Codes are stored upper-cased
        result = await self.session.execute(
            select(DiscountCodeModel).where(DiscountCodeModel.code == code.strip().upper())
        )
        db_code = result.scalar_one_or_none()
        return DiscountCodeRepoImpl._to_entity(db_code) if db_code else None

    @Logger.io
    async def create(self, *, discount_code: DiscountCode) -> DiscountCode:
        self.session.add(
            DiscountCodeModel(
                id=discount_code.id,
                code=discount_code.code,
                discount_type=discount_code.discount_type.value,
                value=discount_code.value,
                valid_from=discount_code.valid_from,
                valid_to=discount_code.valid_to,
                event_id=discount_code.event_id,
                is_active=discount_code.is_active,
            )
        )
        await self.session.flush()
        return discount_code
