from ossgate.settings.loader import load_settings, load_settings_file
from ossgate.settings.models import EffectiveConfig, GlobalSettings, JobSettings
from ossgate.settings.resolve import (
    DEFAULT_TIMEOUT,
    resolve_api_token,
    resolve_connection_timeout,
    resolve_effective_config,
)
from ossgate.settings.validation import validate_settings

__all__ = [
    "DEFAULT_TIMEOUT",
    "EffectiveConfig",
    "GlobalSettings",
    "JobSettings",
    "load_settings",
    "load_settings_file",
    "resolve_api_token",
    "resolve_connection_timeout",
    "resolve_effective_config",
    "validate_settings",
]
