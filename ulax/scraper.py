#!/usr/bin/env python3
"""
Fetchers for the ULAX site.

The schedule comes from a JSON endpoint; standings, stats, rosters and
championships are scraped from server-rendered pages. Every fetcher
raises ``FetchError`` on network or response-shape failures. A page that
loads but lacks the expected table is "no data" and returns an empty
result.
"""
from typing import Any, Callable, Dict, Iterable, List, NamedTuple, Optional, Tuple
from concurrent.futures import ThreadPoolExecutor, as_completed

import click
import requests

from .aggregate import compute_standings, standings_mismatches
from .config import AppConfig
from .models import Championship, Game, GoalieStat, PlayerStat, RosterPlayer, SeasonData, Standing
from .parse_archives import parse_championships
from .parse_standings import parse_standings
from .parse_stats import parse_roster, parse_stats
from .schema import decode_games


class FetchError(RuntimeError):
    """A request failed or returned something that is not the expected JSON/HTML."""


class SeasonRef(NamedTuple):
    """
    A season to fetch.

    ``year`` is None for the current edition of a season type and set
    for archived editions.
    """
    season: str
    year: Optional[int] = None

    @property
    def key(self) -> str:
        """Snapshot key: "winter" or "winter-2024"."""
        return self.season if self.year is None else f"{self.season}-{self.year}"

    @property
    def path(self) -> str:
        """URL path segment under the page base."""
        return self.season if self.year is None else f"{self.season}/{self.year}"


class UlaxScraper:
    """
    Fetches and normalizes ULAX league data.

    Each request runs on a fresh session built by ``session_factory`` so
    concurrent fetches never share a connection pool.
    """

    def __init__(self, config: Optional[AppConfig] = None,
                 session_factory: Callable[[], requests.Session] = requests.Session) -> None:
        """
        Initialize the scraper.

        Parameters
        ----------
        config : Optional[AppConfig]
            Sync configuration (default: read from the environment)
        session_factory : Callable[[], requests.Session]
            Builds the session used for each request
        """
        self.config = config or AppConfig.from_env()
        self.session_factory = session_factory

    def _get(self, url: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        session = self.session_factory()
        session.headers.update(self.config.headers)
        try:
            response = session.get(url, params=params, timeout=self.config.timeout)
            response.raise_for_status()
            return response
        except requests.RequestException as e:
            raise FetchError(f"GET {url} failed: {e}") from e
        finally:
            session.close()

    def get_page(self, ref: SeasonRef, page: str) -> str:
        """
        Fetch one server-rendered page of a season.

        Parameters
        ----------
        ref : SeasonRef
            Season the page belongs to
        page : str
            Page name: "standings", "stats", "rosters" or "archives"

        Returns
        -------
        str
            Page HTML
        """
        url = f"{self.config.base_url}{ref.path}/{page}"
        return self._get(url).text

    def fetch_schedule(self, ref: SeasonRef) -> List[Game]:
        """
        Fetch and decode a season's schedule from the JSON API.

        Records failing validation are skipped and reported as warnings.

        Raises
        ------
        FetchError
            If the request fails or the body is not a JSON array
        """
        params: Dict[str, Any] = {
            'type': 'schedule',
            'league': self.config.league,
            'season': ref.season,
        }
        if ref.year is not None:
            params['year'] = ref.year

        response = self._get(self.config.schedule_api, params=params)
        try:
            payload = response.json()
        except ValueError as e:
            raise FetchError(f"Schedule for {ref.key} is not JSON: {e}") from e
        if not isinstance(payload, list):
            raise FetchError(f"Schedule for {ref.key}: expected array response, got {type(payload).__name__}")

        games, _ = decode_games(payload, self.config.club_name)
        return games

    def fetch_standings(self, ref: SeasonRef) -> List[Standing]:
        """Fetch the published standings table; empty when the page has none."""
        return parse_standings(self.get_page(ref, 'standings'))

    def fetch_stats(self, ref: SeasonRef) -> Tuple[List[PlayerStat], List[GoalieStat]]:
        """Fetch skater and goalie stats for every team of a season."""
        return parse_stats(self.get_page(ref, 'stats'))

    def fetch_roster(self, ref: SeasonRef) -> List[RosterPlayer]:
        """Fetch every team's roster for a season."""
        return parse_roster(self.get_page(ref, 'rosters'))

    def fetch_archives(self) -> List[Championship]:
        """
        Fetch all championships.

        The site publishes one combined archive for all season types; the
        winter copy is used.
        """
        return parse_championships(self.get_page(SeasonRef('winter'), 'archives'))

    def fetch_season(self, ref: SeasonRef) -> SeasonData:
        """
        Fetch schedule, standings, stats and roster of one season.

        The four requests run concurrently and are joined: if any of them
        fails the whole season fails. When the standings page has no
        table, standings are derived from the schedule; when it has one,
        the derived table is only used to warn about disagreements.

        Parameters
        ----------
        ref : SeasonRef
            Season to fetch

        Returns
        -------
        SeasonData
            The season's data (possibly empty if nothing is published yet)

        Raises
        ------
        FetchError
            If any of the four fetches fails
        """
        with ThreadPoolExecutor(max_workers=4) as executor:
            schedule_f = executor.submit(self.fetch_schedule, ref)
            standings_f = executor.submit(self.fetch_standings, ref)
            stats_f = executor.submit(self.fetch_stats, ref)
            roster_f = executor.submit(self.fetch_roster, ref)
            schedule = schedule_f.result()
            standings = standings_f.result()
            players, goalies = stats_f.result()
            roster = roster_f.result()

        derived = compute_standings(schedule)
        if not standings:
            standings = derived
        elif derived:
            mismatched = standings_mismatches(standings, derived)
            if mismatched:
                click.echo(f"Warning: {ref.key}: published standings differ from game results for "
                           f"{', '.join(mismatched)}", err=True)

        return SeasonData(
            schedule=schedule,
            standings=standings,
            player_stats=players,
            goalie_stats=goalies,
            roster=roster,
        )

    def _fetch_season_unit(self, ref: SeasonRef, idx: int, total: int) -> Optional[SeasonData]:
        """Fetch one season for the fan-out; a failure becomes None, an empty season is returned as is."""
        try:
            season = self.fetch_season(ref)
        except FetchError as e:
            click.echo(f"Warning: [{idx}/{total}] ✗ {ref.key}: {e}", err=True)
            return None

        if season.is_empty():
            click.echo(f"[{idx}/{total}] ⊘ {ref.key}: No data published")
            return season

        click.echo(f"[{idx}/{total}] ✓ {ref.key}: {len(season.schedule)} games, "
                   f"{len(season.standings)} teams, {len(season.player_stats)} players")
        return season

    def fetch_seasons(self, refs: Iterable[SeasonRef]) -> Dict[str, Optional[SeasonData]]:
        """
        Fetch several seasons concurrently, at most ``max_workers`` at once.

        Parameters
        ----------
        refs : Iterable[SeasonRef]
            Seasons to fetch

        Returns
        -------
        Dict[str, Optional[SeasonData]]
            Season key to data, None for seasons whose fetch failed; a
            season with nothing published yet maps to an empty SeasonData.
            Keys follow the order of ``refs``
        """
        refs = list(refs)
        results: Dict[str, Optional[SeasonData]] = {ref.key: None for ref in refs}
        click.echo(f"Fetching {len(refs)} season(s) with {self.config.max_workers} workers...")

        with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
            futures = {
                executor.submit(self._fetch_season_unit, ref, idx + 1, len(refs)): ref
                for idx, ref in enumerate(refs)
            }
            for future in as_completed(futures):
                ref = futures[future]
                try:
                    results[ref.key] = future.result()
                except Exception as e:
                    click.echo(f"Warning: Error processing {ref.key}: {e}", err=True)

        return results
