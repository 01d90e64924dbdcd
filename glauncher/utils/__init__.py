"""Common utilities."""

from .async_http import AsyncHTTPClient
from .logger import setup_logging
from .platform import classpath_separator, current_arch, current_os

__all__ = ["AsyncHTTPClient", "setup_logging", "classpath_separator", "current_arch", "current_os"]
