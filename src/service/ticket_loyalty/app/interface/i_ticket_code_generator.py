from abc import ABC, abstractmethod
from datetime import datetime


class ITicketCodeGenerator(ABC):
    @abstractmethod
    def ticket_number(self, *, now: datetime) -> str:
        """Human readable ticket number, e.g. TKT202501101030001234"""
        pass

    @abstractmethod
    def ticket_code(self) -> str:
        """Short code printed on the ticket and encoded in its QR image"""
        pass
