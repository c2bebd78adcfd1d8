"""
Logging setup and command logging helpers.
"""
import functools
import json
import logging
import logging.config
import time
from dataclasses import asdict, is_dataclass
from typing import Any, Callable, Dict

from .config import AppSettings
from .domain.exceptions import DomainException

REDACTED = '[REDACTED]'

SENSITIVE_FIELDS = frozenset({
    'password',
    'confirm_password',
    'password_hash',
    'salt',
    'token',
    'access_token',
    'refresh_token',
    'secret',
    'api_key',
    'credit_card',
    'card_number',
    'cvv',
    'ssn',
    'pin',
})


class JsonFormatter(logging.Formatter):
    """Render log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            'timestamp': self.formatTime(record, '%Y-%m-%dT%H:%M:%S%z'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        context = getattr(record, 'context', None)
        if context:
            payload['context'] = context
        if record.exc_info:
            payload['exception'] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(settings: AppSettings) -> None:
    """Configure root logging from application settings."""
    formatter = 'json' if settings.log_format == 'json' else 'text'
    logging.config.dictConfig({
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'json': {'()': JsonFormatter},
            'text': {'format': '%(asctime)s %(levelname)-8s %(name)s: %(message)s'},
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'formatter': formatter,
            },
        },
        'root': {
            'level': settings.log_level.upper(),
            'handlers': ['console'],
        },
    })


def redact(data: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of ``data`` with sensitive values masked."""
    return {
        key: REDACTED if key.lower() in SENSITIVE_FIELDS else value
        for key, value in data.items()
    }


def _describe(command: Any) -> Dict[str, Any]:
    if is_dataclass(command) and not isinstance(command, type):
        return redact(asdict(command))
    return {'type': type(command).__name__}


def log_command(func: Callable) -> Callable:
    """
    Log handling of the command passed as the first argument of an async
    service method, with sensitive fields redacted and elapsed time.

    Domain errors are logged as warnings without a traceback.
    """

    @functools.wraps(func)
    async def wrapper(self, command, *args, **kwargs):
        command_name = type(command).__name__
        log = logging.getLogger(func.__module__)
        log.info(
            "Handling %s",
            command_name,
            extra={'context': _describe(command)},
        )
        started = time.perf_counter()
        try:
            result = await func(self, command, *args, **kwargs)
        except DomainException as exc:
            elapsed_ms = (time.perf_counter() - started) * 1000
            log.warning(
                "Rejected %s after %.0fms: %s",
                command_name,
                elapsed_ms,
                exc.code,
            )
            raise
        except Exception:
            elapsed_ms = (time.perf_counter() - started) * 1000
            log.exception("Error handling %s after %.0fms", command_name, elapsed_ms)
            raise
        elapsed_ms = (time.perf_counter() - started) * 1000
        log.info("Handled %s in %.0fms", command_name, elapsed_ms)
        return result

    return wrapper
