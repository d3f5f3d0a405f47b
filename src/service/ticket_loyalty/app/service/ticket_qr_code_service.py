from typing import Optional, Tuple

from src.platform.logging.loguru_io import Logger
from src.service.ticket_loyalty.app.interface.i_file_storage import IFileStorage
from src.service.ticket_loyalty.app.interface.i_qr_code_generator import IQrCodeGenerator
from src.service.ticket_loyalty.domain.entity.ticket_entity import Ticket


class TicketQrCodeService:
    """Renders a ticket's QR image and keeps it in file storage"""

    def __init__(self, *, qr_code_generator: IQrCodeGenerator, file_storage: IFileStorage) -> None:
        self.qr_code_generator = qr_code_generator
        self.file_storage = file_storage

    @Logger.io(truncate_content=True)
    async def render_and_store(self, *, ticket: Ticket) -> Tuple[str, bytes]:
        png = self.qr_code_generator.generate(payload=ticket.qr_payload)
        path = await self.file_storage.save(data=png, name=ticket.qr_file_name)
        return path, png

    async def load(self, *, ticket: Ticket) -> Optional[bytes]:
        if not ticket.qr_code_path:
            return None
        return await self.file_storage.get(path=ticket.qr_code_path)
