from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import delete as sql_delete, func, select, update as sql_update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.ticket_loyalty.app.interface.i_point_reservation_repo import (
    IPointReservationRepo,
)
from src.service.ticket_loyalty.domain.entity.point_reservation_entity import PointReservation
from src.service.ticket_loyalty.driven_adapter.model.point_reservation_model import (
    PointReservationModel,
)


class PointReservationRepoImpl(IPointReservationRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _to_entity(db_reservation: PointReservationModel) -> PointReservation:
        return PointReservation(
            id=db_reservation.id,
            ticket_id=db_reservation.ticket_id,
            customer_id=db_reservation.customer_id,
            reserved_points=db_reservation.reserved_points,
            reserved_at=db_reservation.reserved_at,
            expires_at=db_reservation.expires_at,
            is_confirmed=db_reservation.is_confirmed,
        )

    @Logger.io
    async def get_unconfirmed_by_ticket(self, *, ticket_id: UUID) -> Optional[PointReservation]:
        result = await self.session.execute(
            select(PointReservationModel).where(
                PointReservationModel.ticket_id == ticket_id,
                PointReservationModel.is_confirmed.is_(False),
            )
        )
        db_reservation = result.scalar_one_or_none()
        return PointReservationRepoImpl._to_entity(db_reservation) if db_reservation else None

    @Logger.io
    async def create(self, *, reservation: PointReservation) -> PointReservation:
        self.session.add(
            PointReservationModel(
                id=reservation.id,
                ticket_id=reservation.ticket_id,
                customer_id=reservation.customer_id,
                reserved_points=reservation.reserved_points,
                reserved_at=reservation.reserved_at,
                expires_at=reservation.expires_at,
                is_confirmed=reservation.is_confirmed,
            )
        )
        await self.session.flush()
        return reservation

    @Logger.io
    async def update(self, *, reservation: PointReservation) -> PointReservation:
        await self.session.execute(
            sql_update(PointReservationModel)
            .where(PointReservationModel.id == reservation.id)
            .values(
                reserved_points=reservation.reserved_points,
                reserved_at=reservation.reserved_at,
                expires_at=reservation.expires_at,
                is_confirmed=reservation.is_confirmed,
            )
        )
        return reservation

    @Logger.io
    async def delete(self, *, reservation_id: UUID) -> None:
        await self.session.execute(
            sql_delete(PointReservationModel).where(PointReservationModel.id == reservation_id)
        )

    @Logger.io
    async def delete_expired(self, *, customer_id: UUID, now: datetime) -> int:
        result = await self.session.execute(
            sql_delete(PointReservationModel)
            .where(
                PointReservationModel.customer_id == customer_id,
                PointReservationModel.is_confirmed.is_(False),
                PointReservationModel.expires_at <= now,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount  # pyright: ignore[reportAttributeAccessIssue]

    @Logger.io
    async def sum_open_points(self, *, customer_id: UUID, now: datetime) -> int:
        result = await self.session.execute(
            select(func.coalesce(func.sum(PointReservationModel.reserved_points), 0)).where(
                PointReservationModel.customer_id == customer_id,
                PointReservationModel.is_confirmed.is_(False),
                PointReservationModel.expires_at > now,
            )
        )
        return int(result.scalar_one())
