"""Engine settings management."""

from dynaform.config.settings import (
    EngineSettings,
    MessageTemplates,
    SettingsError,
    get_settings,
    load_settings,
    reset_settings,
)

__all__ = [
    "EngineSettings",
    "MessageTemplates",
    "SettingsError",
    "get_settings",
    "load_settings",
    "reset_settings",
]
