# Area: Shared
"""
Shared utilities used across the package.

This package contains:
- Logging configuration
- Settings and contract descriptor loading
"""

from .config import ClientSettings, load_contract_ref, load_settings
from .logging_config import log_error, setup_logging

__all__ = [
    "ClientSettings",
    "load_contract_ref",
    "load_settings",
    "log_error",
    "setup_logging",
]
