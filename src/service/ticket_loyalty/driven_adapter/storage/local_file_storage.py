from pathlib import Path
from typing import Optional

import anyio

from src.platform.logging.loguru_io import Logger
from src.service.ticket_loyalty.app.interface.i_file_storage import IFileStorage


class LocalFileStorage(IFileStorage):
    """Stores files flat under one base directory"""

    def __init__(self, *, base_dir: Path) -> None:
        self.base_dir = anyio.Path(base_dir)

    @Logger.io(truncate_content=True)
    async def save(self, *, data: bytes, name: str) -> str:
        await self.base_dir.mkdir(parents=True, exist_ok=True)
        target = self.base_dir / Path(name).name
        await target.write_bytes(data)
        return str(target)

    @Logger.io(truncate_content=True)
    async def get(self, *, path: str) -> Optional[bytes]:
        target = anyio.Path(path)
        if not await target.is_file():
            return None
        return await target.read_bytes()
