"""
Pytest fixtures and configuration for dynaform tests.
Provides shared form schemas and settings isolation.
"""

import json

import pytest

from dynaform.config.settings import SETTINGS_ENV_VAR, reset_settings


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Every test starts from built-in settings, not the caller's environment."""
    monkeypatch.delenv(SETTINGS_ENV_VAR, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def role_quota_schema():
    """Role selector that shows a quota field only for admins."""
    return {
        "id": "account",
        "title": "Account",
        "fields": [
            {
                "key": "role",
                "type": "select",
                "label": "Role",
                "options": ["User", "Admin", "Guest"],
            },
            {"key": "quota", "type": "number", "label": "Quota", "min": 0, "max": 100},
            {"key": "name", "type": "text", "label": "Name", "required": True},
        ],
        "visibility": [
            {"field": "role", "eq": "Admin", "show": ["quota"]},
            {"field": "role", "neq": "Admin", "hide": ["quota"]},
        ],
        "actions": [
            {"id": "save", "label": "Save", "primary": True},
            {"id": "close", "label": "Close", "dismiss": True},
        ],
    }


@pytest.fixture
def tagged_options_schema():
    """Plan selector whose options are narrowed by the chosen region."""
    return {
        "title": "Plan",
        "data": {"region": "eu", "plan": "b"},
        "fields": [
            {"key": "region", "type": "radio", "options": ["eu", "us"]},
            {
                "key": "plan",
                "type": "select",
                "options": [
                    {"value": "a", "label": "Alpha", "tags": ["x"]},
                    {"value": "b", "label": "Beta", "tags": "y"},
                    {"value": "c", "label": "Gamma", "tags": ["x", "y"]},
                ],
            },
        ],
        "visibility": [
            {"field": "region", "eq": "us", "options": {"for": "plan", "includeTags": ["x"]}},
        ],
    }


@pytest.fixture
def write_json(tmp_path):
    """Write a JSON document to a temp file and return its path."""

    def _write(name, payload):
        path = tmp_path / name
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        return path

    return _write
