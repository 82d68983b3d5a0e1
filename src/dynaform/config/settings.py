"""Engine settings schema and loader.

Settings tune the human-facing parts of the engine: validation message
templates, the email shape check and the labels of synthetic actions.
They are loaded from a YAML file named by the ``DYNAFORM_SETTINGS``
environment variable, or fall back to built-in defaults.
"""

import logging
import os
import re
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

SETTINGS_ENV_VAR = "DYNAFORM_SETTINGS"


class SettingsError(Exception):
    """Raised when a settings file cannot be read or is invalid."""
    pass


class MessageTemplates(BaseModel):
    """Validation messages. ``{n}`` is replaced with the violated limit."""

    model_config = ConfigDict(extra="forbid")

    required: str = "Required."
    min_len: str = "Min length: {n}."
    max_len: str = "Max length: {n}."
    min_value: str = "Min value: {n}."
    max_value: str = "Max value: {n}."
    invalid_format: str = "Invalid format."
    invalid_email: str = "Invalid email."


class EngineSettings(BaseModel):
    """Process-wide engine settings.

    Attributes:
        messages: Validation message templates.
        email_pattern: Regex for the lightweight email shape check.
        submit_label: Label of the synthetic submit action.
        dismiss_label: Label of the synthetic dismiss action.
        empty_option_label: Label of the placeholder option shown by a
            select or radio field that declares no options.
    """

    model_config = ConfigDict(extra="forbid")

    messages: MessageTemplates = Field(default_factory=MessageTemplates)
    email_pattern: str = Field(
        default=r"^[^@\s]+@[^@\s]+\.[^@\s]+$",
        description="Regex a value must match to count as an email address",
    )
    submit_label: str = Field(default="OK", min_length=1)
    dismiss_label: str = Field(default="Cancel", min_length=1)
    empty_option_label: str = "(none)"

    @field_validator("email_pattern")
    @classmethod
    def validate_email_pattern(cls, v: str) -> str:
        """Validate that email_pattern is a valid regex."""
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid regex pattern '{v}': {e}")
        return v


def load_settings(config_path: Path) -> EngineSettings:
    """Load engine settings from a YAML file.

    An empty file yields the defaults.

    Raises:
        SettingsError: If the file is missing, is not valid YAML, or does
            not match the settings schema.
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise SettingsError(f"Settings file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SettingsError(f"Invalid YAML in settings file {config_path}: {e}") from e

    if data is None:
        logger.warning(f"Empty settings file at {config_path}, using defaults")
        return EngineSettings()

    try:
        settings = EngineSettings.model_validate(data)
    except ValidationError as e:
        raise SettingsError(f"Invalid settings in {config_path}: {e}") from e

    logger.debug(f"Loaded engine settings from {config_path}")
    return settings


# Cached settings (loaded once per process)
_cached_settings: Optional[EngineSettings] = None


def get_settings(force_reload: bool = False) -> EngineSettings:
    """Get the process default settings (cached).

    Args:
        force_reload: If True, re-read the settings file even if cached.
    """
    global _cached_settings

    if force_reload or _cached_settings is None:
        path = os.environ.get(SETTINGS_ENV_VAR)
        _cached_settings = load_settings(Path(path)) if path else EngineSettings()

    return _cached_settings


def reset_settings() -> None:
    """Reset the settings cache."""
    global _cached_settings
    _cached_settings = None
