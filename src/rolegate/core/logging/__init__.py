"""Structured logging setup and request logging middleware."""

from rolegate.core.logging.middleware import RequestLoggingMiddleware
from rolegate.core.logging.setup import configure_logging


__all__ = [
    "RequestLoggingMiddleware",
    "configure_logging",
]
