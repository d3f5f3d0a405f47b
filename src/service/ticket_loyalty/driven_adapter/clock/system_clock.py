from datetime import datetime, timezone

from src.service.ticket_loyalty.app.interface.i_clock import IClock


class SystemClock(IClock):
    def now(self) -> datetime:
        return datetime.now(timezone.utc)
