from datetime import datetime
from uuid import UUID

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Integer, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.column_types import UtcDateTime
from src.platform.database.db_setting import Base


class PointReservationModel(Base):
    __tablename__ = 'point_reservation'

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    # One reservation row per ticket: re-reserving renews the row in place
    ticket_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey('ticket.id', ondelete='CASCADE'), unique=True, nullable=False
    )
    customer_id: Mapped[UUID] = mapped_column(Uuid, nullable=False, index=True)
    reserved_points: Mapped[int] = mapped_column(Integer, nullable=False)
    reserved_at: Mapped[datetime] = mapped_column(UtcDateTime, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(UtcDateTime, nullable=False)
    is_confirmed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    __table_args__ = (
        CheckConstraint('reserved_points > 0', name='ck_point_reservation_reserved_points'),
    )
