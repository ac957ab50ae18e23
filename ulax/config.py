#!/usr/bin/env python3
"""
Configuration for the ULAX data sync.

All tunable settings (upstream URLs, tracked club, output directory,
timeouts and worker counts) are read from the environment once, with
typed fallbacks, so the rest of the package never touches ``os.environ``.
"""
from typing import Dict, List, Optional, Tuple
from dataclasses import dataclass, field
from pathlib import Path
import os


SEASONS: Tuple[str, ...] = ("winter", "spring", "summer")

DEFAULT_DIVISION = "Men's Field"

SNAPSHOT_FILE = "ulax.json"
CALENDAR_FILE = "calendar.json"

# Historical (season, year) pairs refetched by ``--with-archives``.
ARCHIVE_SEASONS: Tuple[Tuple[str, int], ...] = (
    ("winter", 2025),
    ("spring", 2025),
    ("summer", 2025),
    ("winter", 2024),
    ("spring", 2024),
    ("summer", 2024),
)


class ConfigError(ValueError):
    """Raised when a required setting is missing from the environment."""


def _env_str(name: str, default: str) -> str:
    """Read a string environment variable, treating blank values as unset."""
    value = os.getenv(name, "").strip()
    return value or default


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable, returning default on missing/invalid values."""
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


@dataclass(frozen=True)
class AppConfig:
    """
    Immutable sync configuration.

    Attributes
    ----------
    base_url : str
        Base of the server-rendered pages; ``<base_url><season>/standings``
    schedule_api : str
        JSON schedule endpoint
    league : str
        League identifier passed to the schedule endpoint
    club_name : str
        Tracked club, matched by substring against team names
    data_dir : Path
        Directory the snapshot and companion files are written to
    timeout : int
        Per-request timeout in seconds
    max_workers : int
        Number of seasons fetched concurrently
    """
    base_url: str = "https://ulax.org/sanfrancisco/men/"
    schedule_api: str = "https://ulax.org/assets/getData/getDataSeasons.php"
    league: str = "sanfran"
    club_name: str = "Barbary Coast"
    data_dir: Path = Path("data")
    timeout: int = 30
    max_workers: int = 3
    headers: Dict[str, str] = field(default_factory=lambda: {
        'User-Agent': 'Mozilla/5.0 (X11; Linux x86_64; rv:144.0) Gecko/20100101 Firefox/144.0',
        'Accept': 'text/html,application/xhtml+xml,application/json;q=0.9,*/*;q=0.8',
        'Accept-Language': 'en-US,en;q=0.5',
    })

    @classmethod
    def from_env(cls) -> "AppConfig":
        """
        Build a configuration from ``ULAX_*`` environment variables.

        Returns
        -------
        AppConfig
            Configuration with every unset variable at its default
        """
        defaults = cls()
        base_url = _env_str("ULAX_BASE_URL", defaults.base_url)
        if not base_url.endswith("/"):
            base_url += "/"
        return cls(
            base_url=base_url,
            schedule_api=_env_str("ULAX_SCHEDULE_API", defaults.schedule_api),
            league=_env_str("ULAX_LEAGUE", defaults.league),
            club_name=_env_str("ULAX_CLUB_NAME", defaults.club_name),
            data_dir=Path(_env_str("ULAX_DATA_DIR", str(defaults.data_dir))),
            timeout=max(1, _env_int("ULAX_TIMEOUT", defaults.timeout)),
            max_workers=max(1, _env_int("ULAX_MAX_WORKERS", defaults.max_workers)),
        )

    @property
    def snapshot_path(self) -> Path:
        return self.data_dir / SNAPSHOT_FILE


@dataclass(frozen=True)
class CalendarConfig:
    """Credentials for the companion Google Calendar sync."""
    calendar_id: str
    api_key: str

    @classmethod
    def from_env(cls) -> "CalendarConfig":
        """
        Read ``GOOGLE_CALENDAR_ID`` and ``GOOGLE_API_KEY``.

        Raises
        ------
        ConfigError
            If either variable is missing or blank; the message lists
            every missing variable
        """
        values: Dict[str, Optional[str]] = {
            name: (os.getenv(name) or "").strip() or None
            for name in ("GOOGLE_CALENDAR_ID", "GOOGLE_API_KEY")
        }
        missing: List[str] = [name for name, value in values.items() if value is None]
        if missing:
            raise ConfigError(f"Missing required environment variable(s): {', '.join(missing)}")
        return cls(calendar_id=values["GOOGLE_CALENDAR_ID"], api_key=values["GOOGLE_API_KEY"])
