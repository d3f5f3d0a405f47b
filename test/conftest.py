"""
Test Configuration and Fixtures

This module provides:
- Environment setup before application modules are imported
- Fakes for the collaborator ports (clock, code generator, QR, storage, email)
- A unit of work double backed by AsyncMock repositories (unit tests)
- An isolated in-memory SQLite database per test (integration tests)
- A FastAPI TestClient with the DI container pointed at the test doubles

Architecture:
- Unit tests (*_unit_test.py): no database, repositories are AsyncMock
- Integration tests (*_integration_test.py): real repositories on aiosqlite
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# Settings are read at import time
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///:memory:'
    os.environ['QR_CODE_STORAGE_DIR'] = str(Path(__file__).parent / 'test_storage' / 'qr_codes')
    os.environ.setdefault('DEBUG', 'false')


_early_setup_test_environment()

from collections.abc import AsyncGenerator, Callable, Generator  # noqa: E402
from contextlib import asynccontextmanager  # noqa: E402
from datetime import datetime, timedelta, timezone  # noqa: E402
from decimal import Decimal  # noqa: E402
from typing import Any, Optional  # noqa: E402
from unittest.mock import AsyncMock  # noqa: E402
import uuid  # noqa: E402

from dependency_injector import providers  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402

from src.platform.app_factory import create_app  # noqa: E402
from src.platform.config.di import container  # noqa: E402
from src.platform.config.wire_modules import WIRE_MODULES  # noqa: E402
from src.platform.database.db_setting import Database  # noqa: E402
from src.platform.database.unit_of_work import (  # noqa: E402
    AbstractUnitOfWork,
    SqlAlchemyUnitOfWork,
)
from src.service.ticket_loyalty.app.interface.i_clock import IClock  # noqa: E402
from src.service.ticket_loyalty.app.interface.i_file_storage import IFileStorage  # noqa: E402
from src.service.ticket_loyalty.app.interface.i_qr_code_generator import (  # noqa: E402
    IQrCodeGenerator,
)
from src.service.ticket_loyalty.app.interface.i_ticket_code_generator import (  # noqa: E402
    ITicketCodeGenerator,
)
from src.service.ticket_loyalty.driven_adapter import model  # noqa: E402, F401
from src.service.ticket_loyalty.driven_adapter.notification.mock_email_notifier import (  # noqa: E402
    MockEmailNotifier,
)
from src.service.ticket_loyalty.domain.entity.event_entity import Event  # noqa: E402
from src.service.ticket_loyalty.domain.entity.loyalty_ledger_entry_entity import (  # noqa: E402
    LoyaltyLedgerEntry,
)


TEST_NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)
SQLITE_MEMORY_URL = 'sqlite+aiosqlite:///:memory:'


# =============================================================================
# Collaborator fakes
# =============================================================================
class FakeClock(IClock):
    def __init__(self, now: datetime = TEST_NOW) -> None:
        self.current = now

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> None:
        self.current = self.current + timedelta(**kwargs)


class SequentialTicketCodeGenerator(ITicketCodeGenerator):
    """Predictable codes; a queued list of codes is handed out first"""

    def __init__(self) -> None:
        self.counter = 0
        self.queued_codes: list[str] = []

    def ticket_number(self, *, now: datetime) -> str:
        self.counter += 1
        return f'TKT{now:%Y%m%d%H%M%S}{self.counter:04d}'

    def ticket_code(self) -> str:
        if self.queued_codes:
            return self.queued_codes.pop(0)
        self.counter += 1
        return f'CODE{self.counter:04d}'


class FakeQrCodeGenerator(IQrCodeGenerator):
    def generate(self, *, payload: str) -> bytes:
        return b'PNG:' + payload.encode()


class InMemoryFileStorage(IFileStorage):
    def __init__(self) -> None:
        self.files: dict[str, bytes] = {}
        self.fail_on_save = False

    async def save(self, *, data: bytes, name: str) -> str:
        if self.fail_on_save:
            raise OSError('disk full')
        path = f'/memory/qr_codes/{name}'
        self.files[path] = data
        return path

    async def get(self, *, path: str) -> Optional[bytes]:
        return self.files.get(path)


class FakeUnitOfWork(AbstractUnitOfWork):
    """Unit of work with AsyncMock repositories; records commit / rollback"""

    def __init__(self) -> None:
        self.event_repo = AsyncMock()
        self.ticket_repo = AsyncMock()
        self.discount_code_repo = AsyncMock()
        self.loyalty_ledger_repo = AsyncMock()
        self.point_reservation_repo = AsyncMock()
        self.payment_repo = AsyncMock()

        # Writes echo the entity back, like the SQLAlchemy repositories
        self.ticket_repo.create.side_effect = lambda *, ticket: ticket
        self.ticket_repo.update.side_effect = lambda *, ticket: ticket
        self.ticket_repo.exists_with_code.return_value = False
        self.ticket_repo.exists_with_number.return_value = False
        self.discount_code_repo.get_by_code.return_value = None
        self.loyalty_ledger_repo.append.side_effect = lambda *, entry: entry
        self.loyalty_ledger_repo.sum_points.return_value = 0
        self.point_reservation_repo.get_unconfirmed_by_ticket.return_value = None
        self.point_reservation_repo.create.side_effect = lambda *, reservation: reservation
        self.point_reservation_repo.update.side_effect = lambda *, reservation: reservation
        self.point_reservation_repo.delete_expired.return_value = 0
        self.point_reservation_repo.sum_open_points.return_value = 0
        self.payment_repo.create.side_effect = lambda *, payment: payment

        self.commit_count = 0
        self.rollback_count = 0

    async def _commit(self) -> None:
        self.commit_count += 1

    async def rollback(self) -> None:
        self.rollback_count += 1


# =============================================================================
# Fixtures: fakes
# =============================================================================
@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def ticket_code_generator() -> SequentialTicketCodeGenerator:
    return SequentialTicketCodeGenerator()


@pytest.fixture
def qr_code_generator() -> FakeQrCodeGenerator:
    return FakeQrCodeGenerator()


@pytest.fixture
def file_storage() -> InMemoryFileStorage:
    return InMemoryFileStorage()


@pytest.fixture
def email_notifier() -> MockEmailNotifier:
    return MockEmailNotifier()


@pytest.fixture
def fake_uow() -> FakeUnitOfWork:
    return FakeUnitOfWork()


# =============================================================================
# Fixtures: database (integration)
# =============================================================================
@pytest_asyncio.fixture
async def database() -> AsyncGenerator[Database, None]:
    """Fresh in-memory database per test"""
    db = Database(db_url=SQLITE_MEMORY_URL)
    await db.create_db_and_tables()
    yield db
    await db.dispose()


@pytest.fixture
def uow_factory(database: Database) -> Callable[[], SqlAlchemyUnitOfWork]:
    return lambda: SqlAlchemyUnitOfWork(session_factory=database.session)


@pytest.fixture
def seed_event(
    uow_factory: Callable[[], SqlAlchemyUnitOfWork], clock: FakeClock
) -> Callable[..., Any]:
    """Insert an event; tiers default to one 'General' tier of price 100 and stock 5"""

    async def _seed(
        price_tiers: Optional[list[tuple[str, Decimal, int]]] = None,
    ) -> Event:
        event = Event.create(
            name='Summer Jazz Night',
            venue_name='Riverside Hall',
            starts_at=clock.now() + timedelta(days=30),
            price_tiers=price_tiers or [('General', Decimal('100'), 5)],
            now=clock.now(),
        )
        async with uow_factory() as uow:
            await uow.event_repo.create(event=event)
            await uow.commit()
        return event

    return _seed


@pytest.fixture
def seed_points(
    uow_factory: Callable[[], SqlAlchemyUnitOfWork], clock: FakeClock
) -> Callable[..., Any]:
    """Credit a customer directly through the ledger repository"""

    async def _seed(customer_id: uuid.UUID, points: int) -> None:
        async with uow_factory() as uow:
            await uow.loyalty_ledger_repo.append(
                entry=LoyaltyLedgerEntry.earned(
                    customer_id=customer_id,
                    points=points,
                    description='Welcome bonus',
                    now=clock.now(),
                )
            )
            await uow.commit()

    return _seed


@pytest.fixture
def customer_id() -> uuid.UUID:
    return uuid.uuid4()


# =============================================================================
# Fixtures: HTTP
# =============================================================================
@pytest.fixture
def client(
    clock: FakeClock,
    ticket_code_generator: SequentialTicketCodeGenerator,
    qr_code_generator: FakeQrCodeGenerator,
    file_storage: InMemoryFileStorage,
    email_notifier: MockEmailNotifier,
) -> Generator[TestClient, None, None]:
    """TestClient on a fresh in-memory database with collaborators replaced by fakes"""

    @asynccontextmanager
    async def test_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        container.wire(modules=WIRE_MODULES)
        await container.database().create_db_and_tables()
        yield
        await container.database().dispose()
        container.unwire()

    container.database.override(providers.Singleton(Database, db_url=SQLITE_MEMORY_URL))
    container.clock.override(providers.Object(clock))
    container.ticket_code_generator.override(providers.Object(ticket_code_generator))
    container.qr_code_generator.override(providers.Object(qr_code_generator))
    container.file_storage.override(providers.Object(file_storage))
    container.email_notifier.override(providers.Object(email_notifier))

    app = create_app(lifespan=test_lifespan, title_suffix=' (Test)')
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        container.reset_override()
        container.reset_singletons()
