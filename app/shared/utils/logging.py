# 📄 File: app/shared/utils/logging.py

# 🧭 Purpose (Layman Explanation):
# This file sets up the logging system that records what happens in the nursery service
# in a structured way, so we can see which plant API was tried, how long it took and why it failed.

# 🧪 Purpose (Technical Summary):
# Structured logging built on the standard logging module and python-json-logger. Request and
# user context travel through ContextVars into every record; StructuredLogger wraps a stdlib
# logger with `extra` field handling plus performance and security event helpers.

# 🔗 Dependencies:
# - python-json-logger: JSON log formatting
# - logging: Python standard logging
# - contextvars: Request context tracking

# 🔄 Connected Modules / Calls From:
# Used by: app.main (startup/shutdown), request logging middleware, identification orchestrator,
# provider clients, repositories, database connection management

import logging
import os
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional
from uuid import uuid4

from pythonjsonlogger import jsonlogger

# Context variables for request tracking
request_id_var: ContextVar[str] = ContextVar('request_id', default='')
user_id_var: ContextVar[str] = ContextVar('user_id', default='')

SERVICE_NAME = 'nursery-identification-api'

_logging_configured = False
_loggers_cache: Dict[str, "StructuredLogger"] = {}


def _hostname() -> str:
    return os.uname().nodename if hasattr(os, 'uname') else 'unknown'


class ContextualFormatter(logging.Formatter):
    """
    Plain-text formatter that stamps request context onto each record.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.hostname = _hostname()

    def format(self, record):
        record.request_id = request_id_var.get('')
        record.user_id = user_id_var.get('')
        record.hostname = self.hostname
        record.service = SERVICE_NAME
        record.timestamp = datetime.now(timezone.utc).isoformat()

        if hasattr(record, 'extra_fields') and record.extra_fields:
            for key, value in record.extra_fields.items():
                setattr(record, key, value)

        return super().format(record)


class JSONFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter for structured logging.

    One JSON object per line with service, context and extra fields
    flattened under ``extra`` for log aggregation.
    """

    def __init__(self, *args, **kwargs):
        kwargs.setdefault('json_ensure_ascii', False)
        super().__init__(*args, **kwargs)
        self.hostname = _hostname()

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)

        log_record['timestamp'] = datetime.now(timezone.utc).isoformat()
        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['module'] = record.module
        log_record['function'] = record.funcName
        log_record['line'] = record.lineno
        log_record['service'] = SERVICE_NAME
        log_record['hostname'] = self.hostname

        if request_id_var.get():
            log_record['request_id'] = request_id_var.get()
        if user_id_var.get():
            log_record['user_id'] = user_id_var.get()

        # extra_fields is nested rather than merged to keep the top level stable
        extra_fields = log_record.pop('extra_fields', None)
        if extra_fields:
            log_record['extra'] = extra_fields


class EventLogger:
    """
    Base for loggers that emit one named event per call.

    Event fields go under ``extra_fields`` so both formatters pick them up.
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def _emit(self, level: int, message: str, event_type: str, fields: Dict, extra: Dict = None):
        extra_fields = {'event_type': event_type}
        extra_fields.update({k: v for k, v in fields.items() if v is not None})
        extra_fields.update(extra or {})
        self.logger.log(level, message, extra={'extra_fields': extra_fields})


class PerformanceLogger(EventLogger):
    """
    Timing events: inbound requests, outbound provider HTTP calls and
    identification attempts.
    """

    def log_request(
        self,
        method: str,
        path: str,
        status_code: int,
        duration_ms: float,
        user_id: str = None,
        extra: Dict = None
    ):
        """Log HTTP request performance."""
        self._emit(
            logging.INFO if status_code < 500 else logging.WARNING,
            f"HTTP {method} {path} - {status_code} - {duration_ms:.2f}ms",
            'http_request',
            {
                'method': method,
                'path': path,
                'status_code': status_code,
                'duration_ms': duration_ms,
                'user_id': user_id,
            },
            extra,
        )

    def log_external_api_call(
        self,
        api_name: str,
        endpoint: str,
        method: str,
        status_code: Optional[int],
        duration_ms: float,
        success: bool,
        extra: Dict = None
    ):
        """Log one outbound HTTP call. The endpoint must already be redacted."""
        self._emit(
            logging.INFO if success else logging.WARNING,
            f"API {api_name} {method} {endpoint} - {status_code or 'n/a'} - {duration_ms:.2f}ms",
            'external_api_call',
            {
                'api_name': api_name,
                'endpoint': endpoint,
                'method': method,
                'status_code': status_code,
                'duration_ms': duration_ms,
                'success': success,
            },
            extra,
        )

    def log_provider_attempt(
        self,
        provider: str,
        success: bool,
        duration_ms: int,
        suggestions: int = 0,
        reason: str = None
    ):
        """Log the outcome of one identification provider attempt."""
        if success:
            message = f"{provider} returned {suggestions} suggestions in {duration_ms}ms"
        else:
            message = f"{provider} attempt failed after {duration_ms}ms: {reason}"
        self._emit(
            logging.INFO if success else logging.WARNING,
            message,
            'provider_attempt',
            {
                'provider': provider,
                'success': success,
                'duration_ms': duration_ms,
                'suggestions': suggestions if success else None,
                'reason': reason,
            },
        )


class SecurityLogger(EventLogger):
    """
    Authentication and authorization decisions.
    """

    def log_authentication(
        self,
        user_id: Optional[str],
        event_type: str,
        success: bool,
        reason: str = None,
        extra: Dict = None
    ):
        outcome = 'success' if success else 'failed'
        self._emit(
            logging.INFO if success else logging.WARNING,
            f"Auth {event_type} for user {user_id or 'anonymous'} - {outcome}",
            'authentication',
            {'auth_event': event_type, 'user_id': user_id, 'success': success, 'reason': reason},
            extra,
        )

    def log_authorization(
        self,
        user_id: str,
        resource: str,
        action: str,
        granted: bool,
        reason: str = None,
        extra: Dict = None
    ):
        outcome = 'granted' if granted else 'denied'
        self._emit(
            logging.INFO if granted else logging.WARNING,
            f"Authorization {action} on {resource} for user {user_id} - {outcome}",
            'authorization',
            {
                'user_id': user_id,
                'resource': resource,
                'action': action,
                'granted': granted,
                'reason': reason,
            },
            extra,
        )


class StructuredLogger:
    """
    Enhanced logger with structured logging capabilities.

    Keyword arguments other than the stdlib ones (exc_info, stack_info,
    stacklevel) are folded into the record's extra fields.
    """

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)
        self.performance = PerformanceLogger(self.logger)
        self.security = SecurityLogger(self.logger)

    def debug(self, message: str, extra: Dict = None, **kwargs):
        self._log(logging.DEBUG, message, extra, **kwargs)

    def info(self, message: str, extra: Dict = None, **kwargs):
        self._log(logging.INFO, message, extra, **kwargs)

    def warning(self, message: str, extra: Dict = None, **kwargs):
        self._log(logging.WARNING, message, extra, **kwargs)

    def error(self, message: str, extra: Dict = None, exc_info: bool = False, **kwargs):
        self._log(logging.ERROR, message, extra, exc_info=exc_info, **kwargs)

    def _log(self, level: int, message: str, extra: Dict = None, **kwargs):
        """Internal log method with extra fields handling."""
        extra_fields = dict(extra or {})

        for key, value in kwargs.items():
            if key not in ['exc_info', 'stack_info', 'stacklevel']:
                extra_fields[key] = value

        clean_kwargs = {k: v for k, v in kwargs.items()
                        if k in ['exc_info', 'stack_info', 'stacklevel']}

        if extra_fields:
            clean_kwargs['extra'] = {'extra_fields': extra_fields}

        self.logger.log(level, message, **clean_kwargs)


def setup_logging(
    log_level: str = None,
    log_format: str = None,
    log_file: str = None,
    enable_console: bool = True
) -> logging.Logger:
    """
    Setup application logging configuration.

    Configures the root logger once per process. Later calls are no-ops.

    Args:
        log_level: Logging level name, defaults to settings.LOG_LEVEL
        log_format: 'json' or 'text', defaults to settings.LOG_FORMAT
        log_file: Optional file path for an extra file handler
        enable_console: Attach a stdout handler

    Returns:
        logging.Logger: The startup logger
    """
    global _logging_configured

    if _logging_configured:
        return logging.getLogger("startup")

    from app.shared.config.settings import get_settings

    settings = get_settings()
    log_level = log_level or settings.LOG_LEVEL
    log_format = log_format or settings.LOG_FORMAT
    log_file = log_file or settings.LOG_FILE

    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    if log_format.lower() == 'json':
        formatter = JSONFormatter('%(message)s')
    else:
        formatter = ContextualFormatter(
            '%(timestamp)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s'
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    logging.getLogger('aiohttp').setLevel(logging.WARNING)
    logging.getLogger('asyncio').setLevel(logging.WARNING)
    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)

    _logging_configured = True
    return logging.getLogger("startup")


def get_logger(name: str) -> StructuredLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        StructuredLogger instance
    """
    if name in _loggers_cache:
        return _loggers_cache[name]

    logger = StructuredLogger(name)
    _loggers_cache[name] = logger

    return logger


@contextmanager
def log_context(request_id: str = None, user_id: str = None):
    """
    Context manager for adding request context to logs.

    Args:
        request_id: Request identifier, generated when omitted
        user_id: User identifier
    """
    if request_id is None:
        request_id = str(uuid4())

    request_token = request_id_var.set(request_id)
    user_token = user_id_var.set(user_id or '')

    try:
        yield {
            'request_id': request_id,
            'user_id': user_id,
        }
    finally:
        request_id_var.reset(request_token)
        user_id_var.reset(user_token)


def log_startup_event(service_name: str, version: str, extra: Dict = None):
    """Log application startup event."""
    logger = get_logger('startup')
    logger.info(
        f"🌱 Service {service_name} starting up",
        extra={
            'event_type': 'service_startup',
            'service_name': service_name,
            'version': version,
            **(extra or {})
        }
    )


def log_shutdown_event(service_name: str, extra: Dict = None):
    """Log application shutdown event."""
    logger = get_logger('shutdown')
    logger.info(
        f"Service {service_name} shutting down",
        extra={
            'event_type': 'service_shutdown',
            'service_name': service_name,
            **(extra or {})
        }
    )


def log_health_check(component: str, status: str, extra: Dict = None):
    """Log health check results."""
    logger = get_logger('health')
    message = f"Health check for {component}: {status}"
    fields = {
        'event_type': 'health_check',
        'component': component,
        'status': status,
        **(extra or {})
    }
    if status == 'healthy':
        logger.debug(message, extra=fields)
    else:
        logger.warning(message, extra=fields)
