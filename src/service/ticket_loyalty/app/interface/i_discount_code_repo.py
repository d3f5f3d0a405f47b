from abc import ABC, abstractmethod
from typing import Optional

from src.service.ticket_loyalty.domain.entity.discount_code_entity import DiscountCode


class IDiscountCodeRepo(ABC):
    @abstractmethod
    async def get_by_code(self, *, code: str) -> Optional[DiscountCode]:
        """Case-insensitive lookup"""
        pass

    @abstractmethod
    async def create(self, *, discount_code: DiscountCode) -> DiscountCode:
        pass
