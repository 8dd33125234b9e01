"""Settings management for watch actions."""

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import load_settings
from .models import (
    AccountConfig,
    AppSettings,
    EmailSettings,
    HtmlSanitizationConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
    SmtpConfig,
)

__all__ = [
    # Loader functions
    "load_settings",
    "load_environment_config",
    # Models
    "AppSettings",
    "EmailSettings",
    "AccountConfig",
    "SmtpConfig",
    "HtmlSanitizationConfig",
    "LoggingConfig",
    "EnvironmentConfig",
    # Enums
    "LogLevel",
    "LogFormat",
    # Exceptions
    "ConfigurationError",
]
