from typing import Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.ticket_loyalty.app.interface.i_file_storage import IFileStorage
from src.service.ticket_loyalty.app.interface.i_qr_code_generator import IQrCodeGenerator
from src.service.ticket_loyalty.app.service.ticket_qr_code_service import TicketQrCodeService


class GetTicketQrCodeUseCase:
    """Return the stored QR PNG of a ticket, rendering and storing it when missing"""

    def __init__(
        self,
        *,
        uow: AbstractUnitOfWork,
        qr_code_generator: IQrCodeGenerator,
        file_storage: IFileStorage,
    ) -> None:
        self.uow = uow
        self.qr_code_service = TicketQrCodeService(
            qr_code_generator=qr_code_generator, file_storage=file_storage
        )

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
        qr_code_generator: IQrCodeGenerator = Depends(Provide[Container.qr_code_generator]),
        file_storage: IFileStorage = Depends(Provide[Container.file_storage]),
    ) -> Self:
        return cls(uow=uow, qr_code_generator=qr_code_generator, file_storage=file_storage)

    @Logger.io(truncate_content=True)
    async def get(self, *, ticket_id: UUID, customer_id: UUID) -> bytes:
        async with self.uow:
            ticket = await self.uow.ticket_repo.get_by_id(ticket_id=ticket_id)
            if not ticket:
                raise NotFoundError('Ticket not found')
            ticket.ensure_owned_by(customer_id)

            png = await self.qr_code_service.load(ticket=ticket)
            if png is None:
                path, png = await self.qr_code_service.render_and_store(ticket=ticket)
                await self.uow.ticket_repo.set_qr_code_path(ticket_id=ticket.id, qr_code_path=path)
                await self.uow.commit()

        return png
