"""
Shared fixtures: a fake ULAX site served through the scraper's session factory.
"""
from typing import Any, Dict, List, Optional, Tuple
import threading

import pytest
import requests

from ulax.config import AppConfig
from ulax.scraper import UlaxScraper


BASE_URL = "https://ulax.test/sanfrancisco/men/"
SCHEDULE_API = "https://ulax.test/assets/getData/getDataSeasons.php"


class FakeResponse:
    """Just enough of requests.Response for the scraper."""

    def __init__(self, url: str, text: str = '', payload: Any = None, status: int = 200) -> None:
        self.url = url
        self.text = text
        self.payload = payload
        self.status_code = status

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error for url: {self.url}", response=self)

    def json(self) -> Any:
        if self.payload is None:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self.payload


class FakeSession:
    def __init__(self, site: "FakeSite") -> None:
        self.site = site
        self.headers: Dict[str, str] = {}
        self.closed = False

    def get(self, url: str, params: Optional[Dict[str, Any]] = None, timeout: Any = None) -> FakeResponse:
        return self.site.get(url, params or {}, timeout)

    def close(self) -> None:
        self.closed = True


class FakeSite:
    """
    In-memory upstream.

    ``pages`` maps a full page URL to HTML (or an exception to raise);
    unknown pages answer 404. ``schedules`` maps a season key ("winter",
    "winter-2025") to the JSON array (or an exception); unknown seasons
    answer an empty array.
    """

    def __init__(self) -> None:
        self.pages: Dict[str, Any] = {}
        self.schedules: Dict[str, Any] = {}
        self.requests: List[Tuple[str, Dict[str, Any], Any]] = []
        self._lock = threading.Lock()

    def page(self, path: str, content: Any) -> None:
        self.pages[BASE_URL + path] = content

    def season(self, key_path: str, schedule: Any = None, standings: Any = '<html></html>',
               stats: Any = '<html></html>', rosters: Any = '<html></html>') -> None:
        """Register every page of one season; ``key_path`` is "winter" or "winter/2025"."""
        self.schedules[key_path.replace('/', '-')] = schedule if schedule is not None else []
        self.page(f"{key_path}/standings", standings)
        self.page(f"{key_path}/stats", stats)
        self.page(f"{key_path}/rosters", rosters)

    def session(self) -> FakeSession:
        return FakeSession(self)

    def get(self, url: str, params: Dict[str, Any], timeout: Any) -> FakeResponse:
        with self._lock:
            self.requests.append((url, dict(params), timeout))

        if url == SCHEDULE_API:
            key = params['season'] if 'year' not in params else f"{params['season']}-{params['year']}"
            value = self.schedules.get(key, [])
            if isinstance(value, Exception):
                raise value
            return FakeResponse(url, payload=value)

        value = self.pages.get(url)
        if value is None:
            return FakeResponse(url, status=404)
        if isinstance(value, Exception):
            raise value
        return FakeResponse(url, text=value)


def raw_game(game_id: int, home: str, away: str, home_score: Any = '', away_score: Any = '',
             gamedate: str = 'January 11, 2026', gametype: int = 0) -> Dict[str, Any]:
    """A schedule record shaped like the upstream API's."""
    return {
        'id': game_id,
        'gamedate': gamedate,
        'gametime': '7:30 PM',
        'field': 'Kezar Stadium',
        'awayteam': away,
        'awayscore': away_score,
        'hometeam': home,
        'homescore': home_score,
        'gametype': gametype,
        'typename': 'Regular Season',
    }


STANDINGS_HTML = """
<html><body>
<h2>Standings</h2>
<table>
  <thead><tr><th>Date</th><th>Opponent</th></tr></thead>
  <tbody><tr><td>Jan 11</td><td>Fog City</td></tr></tbody>
</table>
<table class="table">
  <thead><tr><th>Team</th><th>GP</th><th>W</th><th>L</th><th>T</th><th>PTS</th><th>GF</th><th>GA</th></tr></thead>
  <tbody>
    <tr><td>Barbary Coast</td><td>2</td><td>2</td><td>0</td><td>0</td><td>4</td><td>20</td><td>10</td></tr>
    <tr><td>Fog City</td><td>2</td><td>0</td><td>2</td><td>0</td><td>0</td><td>10</td><td>20</td></tr>
    <tr><td></td><td>0</td><td>0</td><td>0</td><td>0</td><td>0</td><td>0</td><td>0</td></tr>
    <tr><td>Short Row</td><td>1</td></tr>
  </tbody>
</table>
</body></html>
"""

STATS_HTML = """
<html><body>
<div class="stats">
  <img src="/assets/teams/Barbary_Coast_x50.png" alt="">
  <h4>Barbary Coast</h4>
  <table>
    <thead><tr><th>Name</th><th>#</th><th>GP</th><th>G</th><th>A</th><th>PTS</th></tr></thead>
    <tbody>
      <tr><td>Alex Smith</td><td>12</td><td>2</td><td>5</td><td>2</td><td>7</td></tr>
      <tr><td>Chris Lee</td><td>4</td><td>2</td><td>1</td><td>3</td><td>4</td></tr>
    </tbody>
  </table>
  <table>
    <thead><tr><th>Name</th><th>#</th><th>W</th><th>L</th><th>GA</th><th>SV</th><th>SV%</th></tr></thead>
    <tbody><tr><td>Gary Goalie</td><td>1</td><td>2</td><td>0</td><td>10</td><td>40</td><td>.800</td></tr></tbody>
  </table>
  <a href="/teams/fog"><img src="/assets/teams/Fog_City_(SF)_x50.png" alt=""></a>
  <table>
    <thead><tr><th>Name</th><th>#</th><th>GP</th><th>G</th><th>A</th><th>PTS</th></tr></thead>
    <tbody><tr><td>Pat Jones</td><td>7</td><td>2</td><td>3</td><td>1</td><td>4</td></tr></tbody>
  </table>
  <table>
    <thead><tr><th>Name</th><th>#</th><th>W</th><th>L</th><th>GA</th><th>SV</th><th>SV%</th></tr></thead>
    <tbody><tr><td>Fran Keeper</td><td>30</td><td>0</td><td>2</td><td>20</td><td>35</td><td>63.6%</td></tr></tbody>
  </table>
</div>
</body></html>
"""

ROSTER_HTML = """
<html><body>
<img src="/assets/teams/Barbary_Coast_x50.png">
<table>
  <thead><tr><th>Name</th><th>#</th><th>Position</th><th>Height</th><th>Weight</th><th>Age</th><th>Hometown</th></tr></thead>
  <tbody>
    <tr><td>Sam Stone (C)</td><td>9</td><td>M</td><td>6'1"</td><td>190</td><td>31</td><td>Oakland, CA</td></tr>
    <tr><td>Ann Archer <span class="assistant">(A)</span></td><td>22</td><td>D</td><td>5'10"</td><td>170</td><td>28</td><td>Berkeley, CA</td></tr>
    <tr><td>Kim Lead <span class="captain"></span></td><td>5</td><td>A</td><td>6'0"</td><td>180</td><td>35</td><td>San Jose, CA</td></tr>
    <tr><td>Joe Player</td><td>17</td><td>G</td><td>6'3"</td><td>210</td><td>26</td><td>Daly City, CA</td></tr>
    <tr><td>Too Short</td><td>1</td><td>M</td></tr>
  </tbody>
</table>
</body></html>
"""

ARCHIVES_HTML = """
<html><body>
<h2>League Archives</h2>
<h3>Winter Champions</h3>
<ul>
  <li>2025: Barbary Coast</li>
  <li>2024 - Fog City</li>
</ul>
<h3>Spring Champions</h3>
<p>2025: <a href="/teams/fog">Fog City</a><br>2024: Barbary Coast</p>
<h3>Summer Champions</h3>
<ul><li>2025: Golden Gate</li></ul>
</body></html>
"""

ARCHIVES_PROSE_HTML = """
<html><body>
<div>Winter: 2025 - Barbary Coast, 2024 - Fog City</div>
<div>Spring: 2023 - Golden Gate</div>
</body></html>
"""


@pytest.fixture
def site() -> FakeSite:
    return FakeSite()


@pytest.fixture
def config(tmp_path) -> AppConfig:
    return AppConfig(
        base_url=BASE_URL,
        schedule_api=SCHEDULE_API,
        league='sanfran',
        club_name='Barbary Coast',
        data_dir=tmp_path / 'data',
        timeout=5,
        max_workers=3,
    )


@pytest.fixture
def scraper(config: AppConfig, site: FakeSite) -> UlaxScraper:
    return UlaxScraper(config, session_factory=site.session)
