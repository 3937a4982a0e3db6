"""
Redis HTTP Cache - Configuration Module

Provides typed connection options and the URI/environment option builder.
"""

from .loader import SUPPORTED_SCHEMES, build_options
from .schemas import DEFAULT_EXPIRES_IN, DEFAULT_NAMESPACE, ConnectionOptions, LogLevel, StoreDriver

__all__ = [
    "build_options",
    "SUPPORTED_SCHEMES",
    "ConnectionOptions",
    "StoreDriver",
    "LogLevel",
    "DEFAULT_NAMESPACE",
    "DEFAULT_EXPIRES_IN",
]
