from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from src.service.ticket_loyalty.domain.entity.point_reservation_entity import PointReservation


class IPointReservationRepo(ABC):
    @abstractmethod
    async def get_unconfirmed_by_ticket(self, *, ticket_id: UUID) -> Optional[PointReservation]:
        """Unconfirmed reservation of the ticket, expired or not"""
        pass

    @abstractmethod
    async def create(self, *, reservation: PointReservation) -> PointReservation:
        pass

    @abstractmethod
    async def update(self, *, reservation: PointReservation) -> PointReservation:
        pass

    @abstractmethod
    async def delete(self, *, reservation_id: UUID) -> None:
        pass

    @abstractmethod
    async def delete_expired(self, *, customer_id: UUID, now: datetime) -> int:
        """Delete unconfirmed reservations with expires_at <= now, return how many"""
        pass

    @abstractmethod
    async def sum_open_points(self, *, customer_id: UUID, now: datetime) -> int:
        """Points held by unconfirmed reservations with expires_at > now"""
        pass
