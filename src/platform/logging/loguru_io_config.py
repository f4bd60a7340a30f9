from contextvars import ContextVar
from datetime import datetime, timezone
from enum import StrEnum
import logging
import os
import re
import sys
from typing import TYPE_CHECKING, Any

from loguru import logger as loguru_logger


if TYPE_CHECKING:
    from loguru import Logger as LoguruLogger

from src.platform.config.core_setting import settings
from src.platform.constant.path import LOG_DIR
from src.platform.logging.service_context import get_service_context


# Tests write to their own directory
LOG_DIR = os.environ.get('TEST_LOG_DIR', LOG_DIR)

SENSITIVE_KEYWORDS = {
    'password',
    'payment_ref',
    'attendee_email',
    'buyer_email',
    'email',
}

# Keyword arguments copied into every line logged by a Logger.io call
CORRELATION_KEYWORDS = (
    'event_id',
    'tier_id',
    'hold_id',
    'ticket_id',
    'allocation_id',
)

MAX_CONTENT_LENGTH = 500

chain_start_time_var: ContextVar[float] = ContextVar('first_time_var', default=0)
call_depth_var: ContextVar[int] = ContextVar('call_depth_var', default=0)


class ExtraField(StrEnum):
    SERVICE_CONTEXT = 'service_context'
    CHAIN_START_TIME = 'chain_start_time'
    CALL_TARGET = 'call_target'
    CORRELATION = 'correlation'


class GeneratorMethod(StrEnum):
    NEXT = 'next'
    SEND = 'send'
    THROW = 'throw'


def default_extra() -> dict[str, Any]:
    return {
        ExtraField.SERVICE_CONTEXT: get_service_context(),
        ExtraField.CHAIN_START_TIME: '',
        ExtraField.CALL_TARGET: '',
        ExtraField.CORRELATION: '',
    }


# uvicorn access line: '127.0.0.1:53124 - "POST /api/hold HTTP/1.1" 201'
_ACCESS_STATUS = re.compile(r' - ".+ HTTP/[\d.]+" (\d{3})')


def access_log_level(message: str) -> str | None:
    """Level for a uvicorn access line, keyed on its status code; None for anything else"""
    match = _ACCESS_STATUS.search(message)
    if not match:
        return None
    status_code = int(match.group(1))
    if status_code >= 500:
        return 'CRITICAL'
    if status_code >= 400:
        return 'ERROR'
    if status_code >= 300:
        return 'WARNING'
    if status_code >= 200:
        return 'SUCCESS'
    return 'INFO'


class InterceptHandler(logging.Handler):
    """Routes stdlib logging (uvicorn, sqlalchemy, alembic) into loguru"""

    _bound: 'LoguruLogger | None' = None

    @classmethod
    def bound_logger(cls) -> 'LoguruLogger':
        if cls._bound is None:
            cls._bound = loguru_logger.bind(**default_extra())
        return cls._bound

    def emit(self, record: logging.LogRecord) -> None:
        message = record.getMessage()

        # aiosqlite logs every proxied call at DEBUG, asyncio logs its selector
        if record.levelno <= logging.DEBUG and (
            record.name.startswith('aiosqlite') or 'Using selector:' in message
        ):
            return

        level: str | int | None = access_log_level(message)
        if level is None:
            try:
                level = loguru_logger.level(record.levelname).name
            except ValueError:
                level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back  # type: ignore
            depth += 1

        self.bound_logger().opt(depth=depth, exception=record.exc_info).log(level, message)


io_log_format = ' | '.join(
    (
        f'<c>{{extra[{ExtraField.SERVICE_CONTEXT}]}}</>',
        '<lvl>{level:<8}</>',
        f'<c>{{file}}::{{function}}:{{line}}</>=><y>{{extra[{ExtraField.CALL_TARGET}]}}</>',
        f'<m>{{extra[{ExtraField.CORRELATION}]}}</>',
        '{message}',
        '<lk>{elapsed}</>',
        f'<lk>{{extra[{ExtraField.CHAIN_START_TIME}]:<18}}</>',
    )
)


def configure_sinks(bound: 'LoguruLogger') -> None:
    """stdout always; an hourly file under LOG_DIR only when DEBUG is on"""
    level = 'DEBUG' if settings.DEBUG else 'INFO'
    bound.add(sys.stdout, format=io_log_format, level=level, enqueue=False)
    if not settings.DEBUG:
        return

    prefix = 'test_inventory' if os.environ.get('TEST_LOG_DIR') else 'inventory'
    hour = datetime.now(timezone.utc).strftime('%Y-%m-%d_%H')
    bound.add(
        f'{LOG_DIR}/{prefix}_{hour}.log',
        format=io_log_format,
        rotation='1 hour',
        retention='7 days',
        compression='gz',
        enqueue=False,
        level=level,
    )


loguru_logger.remove()
custom_logger = loguru_logger.bind(**default_extra())
configure_sinks(custom_logger)

logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
