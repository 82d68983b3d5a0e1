"""Unit tests for engine settings loading."""

import pytest

from dynaform.config.settings import (
    SETTINGS_ENV_VAR,
    EngineSettings,
    SettingsError,
    get_settings,
    load_settings,
    reset_settings,
)


class TestEngineSettingsDefaults:
    def test_messages(self):
        settings = EngineSettings()
        assert settings.messages.required == "Required."
        assert settings.messages.min_len.format(n=3) == "Min length: 3."
        assert settings.messages.invalid_email == "Invalid email."

    def test_labels(self):
        settings = EngineSettings()
        assert (settings.submit_label, settings.dismiss_label) == ("OK", "Cancel")
        assert settings.empty_option_label == "(none)"

    def test_bad_email_pattern_rejected(self):
        with pytest.raises(ValueError):
            EngineSettings(email_pattern="[unclosed")


class TestLoadSettings:
    def test_valid_yaml(self, tmp_path):
        path = tmp_path / "engine.yaml"
        path.write_text(
            "messages:\n"
            "  required: Pflichtfeld.\n"
            "submit_label: Speichern\n",
            encoding="utf-8",
        )
        settings = load_settings(path)
        assert settings.messages.required == "Pflichtfeld."
        assert settings.messages.max_len == "Max length: {n}."
        assert settings.submit_label == "Speichern"

    def test_missing_file(self, tmp_path):
        with pytest.raises(SettingsError, match="not found"):
            load_settings(tmp_path / "absent.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "engine.yaml"
        path.write_text("messages: [unclosed\n", encoding="utf-8")
        with pytest.raises(SettingsError, match="Invalid YAML"):
            load_settings(path)

    def test_unknown_key_rejected(self, tmp_path):
        path = tmp_path / "engine.yaml"
        path.write_text("submit_colour: red\n", encoding="utf-8")
        with pytest.raises(SettingsError, match="Invalid settings"):
            load_settings(path)

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "engine.yaml"
        path.write_text("", encoding="utf-8")
        assert load_settings(path) == EngineSettings()


class TestGetSettings:
    def test_defaults_without_env(self):
        assert get_settings() == EngineSettings()

    def test_cached(self):
        assert get_settings() is get_settings()

    def test_env_var_file(self, tmp_path, monkeypatch):
        path = tmp_path / "engine.yaml"
        path.write_text("dismiss_label: Close\n", encoding="utf-8")
        monkeypatch.setenv(SETTINGS_ENV_VAR, str(path))
        reset_settings()
        assert get_settings().dismiss_label == "Close"

    def test_force_reload(self, tmp_path, monkeypatch):
        first = get_settings()
        path = tmp_path / "engine.yaml"
        path.write_text("submit_label: Go\n", encoding="utf-8")
        monkeypatch.setenv(SETTINGS_ENV_VAR, str(path))

        assert get_settings() is first
        assert get_settings(force_reload=True).submit_label == "Go"
