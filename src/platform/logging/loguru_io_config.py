"""
Loguru configuration shared by Logger.io and Logger.base

Every record carries the service context (service name, deploy env, pid) and,
inside a Logger.io call chain, the call target and the chain start time.
Standard logging (granian, sqlalchemy, asyncio) is routed into the same sinks.
"""

from contextvars import ContextVar
from datetime import datetime, timezone
from enum import StrEnum
import logging
import os
import sys

from loguru import logger as loguru_logger

from src.platform.config.core_setting import settings


LOG_DIR = os.environ.get('TEST_LOG_DIR', settings.LOG_DIR)
SERVICE_CONTEXT = f'{settings.OTEL_SERVICE_NAME}:{settings.DEPLOY_ENV}:{os.getpid()}'

# Keyword arguments whose values never reach the logs
SENSITIVE_KEYWORDS = {
    'card_number',
    'cvv',
    'password',
    'transaction_id',
}

TRUNCATE_LIMIT = 500

chain_start_time_var: ContextVar[float] = ContextVar('chain_start_time_var', default=0)
call_depth_var: ContextVar[int] = ContextVar('call_depth_var', default=0)


class ExtraField(StrEnum):
    SERVICE_CONTEXT = 'service_context'
    CHAIN_START_TIME = 'chain_start_time'
    CALL_TARGET = 'call_target'


io_log_format = ' | '.join(
    (
        f'<c>{{extra[{ExtraField.SERVICE_CONTEXT}]}}</>',
        '<lvl>{level:<8}</>',
        f'<c>{{file}}::{{function}}:{{line}}</>=><y>{{extra[{ExtraField.CALL_TARGET}]}}</>',
        '{message}',
        '<lk>{elapsed}</>',
        f'<lk>{{extra[{ExtraField.CHAIN_START_TIME}]:<18}}</>',
    )
)

loguru_logger.remove()
custom_logger = loguru_logger.bind(
    **{
        ExtraField.SERVICE_CONTEXT: SERVICE_CONTEXT,
        ExtraField.CHAIN_START_TIME: '',
        ExtraField.CALL_TARGET: '',
    }
)

min_log_level = 'DEBUG' if settings.DEBUG else 'INFO'
custom_logger.add(sys.stdout, format=io_log_format, level=min_log_level, enqueue=True)

# Hourly files only in DEBUG mode, production ships stdout
if settings.DEBUG:
    prefix = 'test_' if os.environ.get('TEST_LOG_DIR') else ''
    custom_logger.add(
        f'{LOG_DIR}/{prefix}{datetime.now(timezone.utc):%Y-%m-%d_%H}.log',
        format=io_log_format,
        rotation='1 hour',
        retention='7 days',
        compression='gz',
        enqueue=True,
        level=min_log_level,
    )


def http_status_level(message: str) -> str | None:
    """
    Log level for a granian access log line, None for any other message.

    Format: '127.0.0.1 - "POST /api/ticket HTTP/1.1" - 201 - 8ms'
    """
    if ' - "' not in message or ' HTTP/' not in message:
        return None
    parts = message.split('"')
    if len(parts) < 3:
        return None
    status_parts = parts[2].strip().split()
    if len(status_parts) < 2 or status_parts[0] != '-' or not status_parts[1].isdigit():
        return None

    status_code = int(status_parts[1])
    if status_code >= 500:
        return 'CRITICAL'
    if status_code >= 400:
        return 'ERROR'
    if status_code >= 300:
        return 'WARNING'
    return 'SUCCESS' if status_code >= 200 else 'INFO'


class InterceptHandler(logging.Handler):
    def emit(self, record: logging.LogRecord) -> None:
        message = record.getMessage()
        if record.levelno <= logging.DEBUG and 'Using selector:' in message:
            return

        level: str | int | None = http_status_level(message)
        if level is None:
            try:
                level = loguru_logger.level(record.levelname).name
            except ValueError:
                level = record.levelno

        # Report the caller, not the logging module
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back  # type: ignore
            depth += 1

        custom_logger.opt(depth=depth, exception=record.exc_info).log(level, message)


logging.basicConfig(handlers=[InterceptHandler()], level=logging.INFO, force=True)
