"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from pathlib import Path

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.database.db_setting import Database
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from src.service.ticket_loyalty.driven_adapter.clock.system_clock import SystemClock
from src.service.ticket_loyalty.driven_adapter.code_generator.ticket_code_generator_impl import (
    TicketCodeGeneratorImpl,
)
from src.service.ticket_loyalty.driven_adapter.notification.mock_email_notifier import (
    MockEmailNotifier,
)
from src.service.ticket_loyalty.driven_adapter.payment.mock_payment_gateway import (
    MockPaymentGateway,
)
from src.service.ticket_loyalty.driven_adapter.qr_code.qr_code_generator_impl import (
    QrCodeGeneratorImpl,
)
from src.service.ticket_loyalty.driven_adapter.storage.local_file_storage import LocalFileStorage


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Database (uses AsyncEngineManager with settings from config_service)
    database = providers.Singleton(Database)

    # Unit of work: one per use case instance, a fresh session per `async with`
    unit_of_work = providers.Factory(
        SqlAlchemyUnitOfWork, session_factory=database.provided.session
    )

    # Collaborators (stateless)
    clock = providers.Singleton(SystemClock)
    ticket_code_generator = providers.Singleton(TicketCodeGeneratorImpl)
    qr_code_generator = providers.Singleton(QrCodeGeneratorImpl)
    file_storage = providers.Singleton(
        LocalFileStorage,
        base_dir=providers.Callable(Path, config_service.provided.QR_CODE_STORAGE_DIR),
    )
    email_notifier = providers.Singleton(MockEmailNotifier)
    payment_gateway = providers.Singleton(MockPaymentGateway)


container = Container()


def setup() -> None:
    container.config_service()


def cleanup() -> None:
    container.reset_singletons()
