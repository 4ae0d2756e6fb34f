"""Shared fixtures for the life calendar tests."""

import json

import pytest

from life_calendar.config import CalendarConfig

QUOTES = ["Anchor quote", "Second quote", "Third quote", "Fourth quote", "Fifth quote", "Sixth quote"]
ATTRIBUTIONS = ["Tim Urban", "Seneca", "Annie Dillard", "Marcus Aurelius", "Epictetus", "Horace"]


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Run every test in its own working directory without test-mode env overrides."""
    monkeypatch.chdir(tmp_path)
    for name in ("TEST_DATE", "TEST_RESOLUTION", "TEST_MULTIPLE_RESOLUTIONS"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


@pytest.fixture
def config_data():
    return {
        "birthdate": "1990-06-15",
        "theme": "dark",
        "quotes": list(QUOTES),
        "attributions": list(ATTRIBUTIONS),
    }


@pytest.fixture
def config_file(tmp_path, config_data):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(config_data), encoding="utf-8")
    return path


@pytest.fixture
def calendar_config():
    return CalendarConfig(
        birthdate="1990-06-15",
        theme="dark",
        quotes=tuple(QUOTES),
        attributions=tuple(ATTRIBUTIONS),
    )
