"""Ambient infrastructure for croncalc: logging setup and settings loading.

The parsing and calculation modules only ever call
``logging.getLogger(__name__)``; the helpers here are for applications (and
the bundled CLI) that want to configure output and load settings.
"""

from croncalc.infrastructure.config import (
    ConfigError,
    ConfigValidationError,
    Settings,
    load_settings,
)
from croncalc.infrastructure.logging import (
    JSONFormatter,
    LogLevel,
    configure_logging,
    reset_logging,
)

__all__ = [
    # Config
    "ConfigError",
    "ConfigValidationError",
    "Settings",
    "load_settings",
    # Logging
    "JSONFormatter",
    "LogLevel",
    "configure_logging",
    "reset_logging",
]
