from abc import ABC, abstractmethod


class IQrCodeGenerator(ABC):
    @abstractmethod
    def generate(self, *, payload: str) -> bytes:
        """Render payload into PNG image bytes"""
        pass
