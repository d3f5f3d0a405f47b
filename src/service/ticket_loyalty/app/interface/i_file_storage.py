from abc import ABC, abstractmethod
from typing import Optional


class IFileStorage(ABC):
    @abstractmethod
    async def save(self, *, data: bytes, name: str) -> str:
        """Persist data and return the path it can be read back from"""
        pass

    @abstractmethod
    async def get(self, *, path: str) -> Optional[bytes]:
        pass
