"""Logging setup for Proxy Conform.

Provides configurable logging with JSON format support and file rotation.
"""

from proxy_conform.logging.config import configure_logging
from proxy_conform.logging.handlers import JSONFormatter

__all__ = [
    "JSONFormatter",
    "configure_logging",
]
