"""
Structured logging with correlation IDs for the sentence analysis core.

Each generation request runs inside a ``LoggingContext`` so every log line it
produces, across provider retries and fallbacks, carries the same correlation
and request IDs.

Rendering happens once, in the root handler's ``ProcessorFormatter``: structlog
events and plain ``logging`` records from the library modules share one
processor chain and come out either as console lines or as flat JSON objects.
"""

import contextvars
import logging
import threading
import time
import uuid
from datetime import datetime, timezone
from typing import List, Optional, TextIO

import structlog


# Context variable for correlation ID
correlation_id_context: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "correlation_id", default=None
)

# Context variable for request ID
request_id_context: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "request_id", default=None
)

_structlog_configured = False


def _iso_timestamp(ts: float) -> str:
    return datetime.fromtimestamp(ts, tz=timezone.utc).isoformat()


class CorrelationIdProcessor:
    """Processor to add correlation ID to log records."""

    def __call__(self, logger, method_name, event_dict):
        correlation_id = correlation_id_context.get()
        if correlation_id:
            event_dict["correlation_id"] = correlation_id

        request_id = request_id_context.get()
        if request_id:
            event_dict["request_id"] = request_id

        return event_dict


class TimestampProcessor:
    """Processor to add consistent timestamps."""

    def __call__(self, logger, method_name, event_dict):
        now = time.time()
        event_dict["timestamp"] = now
        event_dict["timestamp_iso"] = _iso_timestamp(now)
        return event_dict


class ThreadProcessor:
    def __call__(self, logger, method_name, event_dict):
        event_dict["thread_name"] = threading.current_thread().name
        return event_dict


def _shared_processors() -> List:
    """Processors applied to both structlog events and stdlib records."""
    return [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        TimestampProcessor(),
        CorrelationIdProcessor(),
        ThreadProcessor(),
        # Skip this module's wrappers so the call site is the caller's
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.MODULE,
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ],
            additional_ignores=[__name__],
        ),
    ]


def _configure_structlog():
    """Route structlog through the standard library, rendering left to the handler."""
    global _structlog_configured
    if _structlog_configured:
        return

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _structlog_configured = True


class StructuredLogger:
    """
    Structured logger with correlation ID support.

    Wraps a structlog logger routed through the standard library, so output
    goes wherever ``configure_logging`` points the root logger.
    """

    def __init__(self, name: str, component: Optional[str] = None):
        """
        Initialize structured logger.

        Args:
            name: Logger name
            component: Component name for logging context
        """
        self.name = name
        self.component = component or name

        _configure_structlog()
        self.logger = structlog.get_logger(name).bind(component=self.component)

    def debug(self, message: str, **kwargs):
        self.logger.debug(message, **kwargs)

    def info(self, message: str, **kwargs):
        self.logger.info(message, **kwargs)

    def warning(self, message: str, **kwargs):
        self.logger.warning(message, **kwargs)

    def error(self, message: str, error: Optional[Exception] = None, **kwargs):
        """Log error message with optional exception."""
        if error:
            kwargs.update(
                {
                    "error_type": type(error).__name__,
                    "error_message": str(error),
                }
            )
        self.logger.error(message, **kwargs)

    def with_context(self, **context) -> "StructuredLogger":
        """Create a new logger with additional bound context."""
        new_logger = StructuredLogger(self.name, self.component)
        new_logger.logger = self.logger.bind(**context)
        return new_logger


class CorrelationIdManager:
    """Manager for correlation ID lifecycle."""

    @staticmethod
    def generate_id() -> str:
        return str(uuid.uuid4())

    @staticmethod
    def get_correlation_id() -> Optional[str]:
        return correlation_id_context.get()

    @staticmethod
    def get_request_id() -> Optional[str]:
        return request_id_context.get()

    @staticmethod
    def clear_context():
        correlation_id_context.set(None)
        request_id_context.set(None)


class LoggingContext:
    """
    Context manager scoping correlation and request IDs.

    A fresh request ID is issued per context; the correlation ID is inherited
    from an enclosing context unless one is given.
    """

    def __init__(self, correlation_id: Optional[str] = None, request_id: Optional[str] = None):
        self.correlation_id = (
            correlation_id
            or CorrelationIdManager.get_correlation_id()
            or CorrelationIdManager.generate_id()
        )
        self.request_id = request_id or CorrelationIdManager.generate_id()
        self._tokens = []

    def __enter__(self):
        self._tokens = [
            correlation_id_context.set(self.correlation_id),
            request_id_context.set(self.request_id),
        ]
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        request_token = self._tokens.pop()
        correlation_token = self._tokens.pop()
        request_id_context.reset(request_token)
        correlation_id_context.reset(correlation_token)


class OperationLogger:
    """Logger for tracking operations with timing."""

    def __init__(self, logger: StructuredLogger, operation: str):
        """
        Initialize operation logger.

        Args:
            logger: Structured logger instance
            operation: Operation name
        """
        self.logger = logger
        self.operation = operation
        self.start_time = None
        self.context = {}

    @property
    def duration_ms(self) -> float:
        if self.start_time is None:
            return 0.0
        return (time.time() - self.start_time) * 1000

    def start(self, **context):
        self.start_time = time.time()
        self.context = context
        self.logger.info(
            f"Starting operation: {self.operation}",
            operation=self.operation,
            operation_status="started",
            **context,
        )

    def success(self, **additional_context):
        self.logger.info(
            f"Operation completed successfully: {self.operation}",
            operation=self.operation,
            operation_status="success",
            duration_ms=round(self.duration_ms, 1),
            **self.context,
            **additional_context,
        )

    def error(self, error: Exception, **additional_context):
        self.logger.error(
            f"Operation failed: {self.operation}",
            error=error,
            operation=self.operation,
            operation_status="error",
            duration_ms=round(self.duration_ms, 1),
            **self.context,
            **additional_context,
        )


def get_logger(name: str, component: Optional[str] = None) -> StructuredLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name
        component: Component name for context

    Returns:
        Configured structured logger
    """
    return StructuredLogger(name, component)


def build_formatter(json_format: bool = False) -> structlog.stdlib.ProcessorFormatter:
    """Build the handler formatter that renders every record exactly once."""
    if json_format:
        renderers = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ]
    else:
        renderers = [structlog.dev.ConsoleRenderer(colors=False)]

    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_shared_processors(),
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *renderers],
    )


def configure_logging(log_level: str = "INFO", json_format: bool = False, stream: Optional[TextIO] = None):
    """
    Configure global logging settings.

    Args:
        log_level: Minimum log level
        json_format: Whether to emit one JSON object per line
        stream: Output stream, stderr when omitted
    """
    _configure_structlog()

    level = getattr(logging, log_level.upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(stream)
    console_handler.setLevel(level)
    console_handler.setFormatter(build_formatter(json_format))
    root_logger.addHandler(console_handler)
