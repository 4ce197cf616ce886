"""Core utilities for configuration, logging, errors and domain models."""

from .config import (
    AppSettings,
    LlmSettings,
    LoggingSettings,
    SmtpSettings,
    load_app_settings,
)
from .logging import configure_logging

__all__ = [
    "AppSettings",
    "LlmSettings",
    "LoggingSettings",
    "SmtpSettings",
    "configure_logging",
    "load_app_settings",
]
