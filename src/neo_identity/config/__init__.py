"""Configuration for neo-identity: settings and logging."""

from .settings import IdentitySettings, get_settings
from .logging_config import (
    LoggingConfig,
    LogFormat,
    LogLevel,
    LogVerbosity,
    setup_logging,
    mask_secret,
)

__all__ = [
    "IdentitySettings",
    "get_settings",
    "LoggingConfig",
    "LogFormat",
    "LogLevel",
    "LogVerbosity",
    "setup_logging",
    "mask_secret",
]
