"""
Tests for environment-driven configuration.
"""
from pathlib import Path

import pytest

from ulax.config import AppConfig, CalendarConfig, ConfigError


ENV_NAMES = [
    'ULAX_BASE_URL', 'ULAX_SCHEDULE_API', 'ULAX_LEAGUE', 'ULAX_CLUB_NAME',
    'ULAX_DATA_DIR', 'ULAX_TIMEOUT', 'ULAX_MAX_WORKERS',
    'GOOGLE_CALENDAR_ID', 'GOOGLE_API_KEY',
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    config = AppConfig.from_env()

    assert config.base_url == 'https://ulax.org/sanfrancisco/men/'
    assert config.league == 'sanfran'
    assert config.club_name == 'Barbary Coast'
    assert config.snapshot_path == Path('data') / 'ulax.json'
    assert config.timeout == 30
    assert config.max_workers == 3


def test_environment_overrides(monkeypatch) -> None:
    monkeypatch.setenv('ULAX_BASE_URL', 'https://example.test/men')
    monkeypatch.setenv('ULAX_CLUB_NAME', 'Fog City')
    monkeypatch.setenv('ULAX_DATA_DIR', '/srv/site/data')
    monkeypatch.setenv('ULAX_TIMEOUT', '10')
    monkeypatch.setenv('ULAX_MAX_WORKERS', '6')

    config = AppConfig.from_env()

    assert config.base_url == 'https://example.test/men/'
    assert config.club_name == 'Fog City'
    assert config.snapshot_path == Path('/srv/site/data/ulax.json')
    assert (config.timeout, config.max_workers) == (10, 6)


def test_invalid_numbers_fall_back(monkeypatch) -> None:
    monkeypatch.setenv('ULAX_TIMEOUT', 'soon')
    monkeypatch.setenv('ULAX_MAX_WORKERS', '0')

    config = AppConfig.from_env()

    assert config.timeout == 30
    assert config.max_workers == 1


def test_calendar_config(monkeypatch) -> None:
    monkeypatch.setenv('GOOGLE_CALENDAR_ID', 'club@group.calendar.google.com')
    monkeypatch.setenv('GOOGLE_API_KEY', 'secret')

    calendar = CalendarConfig.from_env()

    assert calendar == CalendarConfig('club@group.calendar.google.com', 'secret')


def test_calendar_config_lists_missing_variables(monkeypatch) -> None:
    monkeypatch.setenv('GOOGLE_API_KEY', '   ')

    with pytest.raises(ConfigError) as excinfo:
        CalendarConfig.from_env()

    assert 'GOOGLE_CALENDAR_ID' in str(excinfo.value)
    assert 'GOOGLE_API_KEY' in str(excinfo.value)
