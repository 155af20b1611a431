"""
Core module providing foundational components.

This module contains the configuration loader, centralized logging setup,
and custom exception hierarchy. It has no internal dependencies.
"""

from .config_loader import get_config, Config, StoreConfig, SearchConfig
from .logger import get_logger
from .exceptions import (
    PageSearchError,
    ConfigurationError,
    NotConfiguredError,
    InvalidInputError,
    WriteConflictError,
    ExtractionError,
    DatabaseError
)

__all__ = [
    "get_config",
    "Config",
    "StoreConfig",
    "SearchConfig",
    "get_logger",
    "PageSearchError",
    "ConfigurationError",
    "NotConfiguredError",
    "InvalidInputError",
    "WriteConflictError",
    "ExtractionError",
    "DatabaseError"
]
