"""Configuration models and loaders for retryer."""

from .loader import ConfigError, DEFAULT_SECTION, dump_example_settings, load_settings
from .models import RetrySettings

__all__ = [
    "ConfigError",
    "DEFAULT_SECTION",
    "RetrySettings",
    "dump_example_settings",
    "load_settings",
]
