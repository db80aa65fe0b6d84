"""
Observability helpers: structured logging with correlation IDs.
"""

from .structured_logger import (
    StructuredLogger,
    CorrelationIdManager,
    LoggingContext,
    OperationLogger,
    build_formatter,
    get_logger,
    configure_logging,
)

__all__ = [
    'StructuredLogger',
    'CorrelationIdManager',
    'LoggingContext',
    'OperationLogger',
    'build_formatter',
    'get_logger',
    'configure_logging',
]
