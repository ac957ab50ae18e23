#!/usr/bin/env python3
"""
Sync orchestration.

One full sync:

1. fetch championships (season summaries depend on them)
2. fetch the selected seasons concurrently
3. merge with the previous snapshot (skipped for an archive backfill)
4. compute the club's per-season and all-time summaries
5. write the snapshot atomically
6. print a report
"""
from typing import Callable, Dict, List, Optional
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime, timezone

import click

from .aggregate import summarize_all_time, summarize_club_season
from .config import ARCHIVE_SEASONS, SEASONS
from .extractors import season_for_date
from .models import Championship, ClubRecord, ClubSeasonSummary, SeasonData, SingleSeasonData, Snapshot
from .scraper import FetchError, SeasonRef, UlaxScraper
from .snapshot import load_snapshot, merge_seasons, write_json_atomic, write_snapshot


class SyncError(RuntimeError):
    """A top-level failure that aborts the sync without writing anything."""


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def iso_timestamp(moment: datetime) -> str:
    """Format as ISO-8601 UTC with milliseconds, e.g. "2026-01-11T20:15:00.000Z"."""
    return moment.astimezone(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def season_refs(current_season: str, current_only: bool = False,
                with_archives: bool = False) -> List[SeasonRef]:
    """
    Select the seasons a sync fetches.

    Parameters
    ----------
    current_season : str
        Season active today
    current_only : bool
        Fetch only ``current_season``
    with_archives : bool
        Also fetch the fixed archive backfill set

    Returns
    -------
    List[SeasonRef]
        Seasons in fetch order
    """
    if current_only:
        return [SeasonRef(current_season)]
    refs = [SeasonRef(season) for season in SEASONS]
    if with_archives:
        refs.extend(SeasonRef(season, year) for season, year in ARCHIVE_SEASONS)
    return refs


def build_snapshot(seasons: Dict[str, SeasonData], championships: List[Championship], club_name: str,
                   today: date, fetched_at: str) -> Snapshot:
    """
    Assemble the snapshot and the club's summaries for every season.

    ``today`` sets the current season and year indicators only; the year
    of each season comes from its key or its own schedule.
    """
    summaries: List[ClubSeasonSummary] = []
    for key, season in seasons.items():
        summary = summarize_club_season(key, season, championships, club_name)
        if summary is not None:
            summaries.append(summary)

    return Snapshot(
        current_season=season_for_date(today),
        current_year=today.year,
        seasons=seasons,
        championships=championships,
        club=ClubRecord(
            name=club_name,
            all_time=summarize_all_time(summaries),
            seasons=summaries,
        ),
        fetched_at=fetched_at,
    )


def print_report(snapshot: Snapshot, fetched: int, carried: int) -> None:
    """Print counts and the club's aggregate record."""
    total_games = sum(len(s.schedule) for s in snapshot.seasons.values())
    club = snapshot.club
    all_time = club.all_time

    click.echo(f"\n{'='*80}")
    click.echo("Sync Summary:")
    click.echo(f"  Seasons: {len(snapshot.seasons)} ({fetched} fetched, {carried} kept from previous snapshot)")
    click.echo(f"  Games: {total_games}")
    click.echo(f"  Championships: {len(snapshot.championships)}")
    click.echo(f"\n{club.name} all-time: {all_time.wins}-{all_time.losses}-{all_time.ties} "
               f"(GF {all_time.goals_for}, GA {all_time.goals_against}, titles {all_time.titles})")
    for summary in club.seasons:
        click.echo(f"  {summary.season}: {summary.wins}-{summary.losses}-{summary.ties} {summary.result}")


def run_sync(scraper: UlaxScraper, current_only: bool = False, with_archives: bool = False,
             today: Optional[date] = None, clock: Callable[[], datetime] = utc_now) -> Snapshot:
    """
    Run one full sync and write the snapshot.

    Parameters
    ----------
    scraper : UlaxScraper
        Configured fetcher
    current_only : bool
        Fetch only the season active ``today``
    with_archives : bool
        Also refetch the archive backfill set; the previous snapshot is
        not merged in this mode
    today : Optional[date]
        Date deciding the current season (default: today)
    clock : Callable[[], datetime]
        Source of the ``fetchedAt`` timestamp

    Returns
    -------
    Snapshot
        The snapshot that was written

    Raises
    ------
    SyncError
        If the championships cannot be fetched, if ``current_only`` is
        set and its season's fetch fails (nothing published yet is not a
        failure), or if both flags are set
    """
    if current_only and with_archives:
        raise SyncError("--current-only and --with-archives cannot be combined")

    config = scraper.config
    today = today or date.today()
    current_season = season_for_date(today)

    click.echo(f"Syncing ULAX data ({'current season: ' + current_season if current_only else 'all seasons'}"
               f"{', with archives' if with_archives else ''})...")

    click.echo("Fetching championships...")
    try:
        championships = scraper.fetch_archives()
    except FetchError as e:
        raise SyncError(f"Championship fetch failed: {e}") from e
    click.echo(f"Found {len(championships)} championships")

    refs = season_refs(current_season, current_only=current_only, with_archives=with_archives)
    results = scraper.fetch_seasons(refs)
    if current_only and results[current_season] is None:
        raise SyncError(f"Fetch failed for the current season ({current_season})")

    # Empty seasons are left out so a stored copy is carried forward
    fresh = {key: season for key, season in results.items()
             if season is not None and not season.is_empty()}

    previous = None if with_archives else load_snapshot(config.snapshot_path)
    seasons = merge_seasons(fresh, previous)

    snapshot = build_snapshot(seasons, championships, config.club_name, today, iso_timestamp(clock()))
    write_snapshot(config.snapshot_path, snapshot)
    click.echo(f"✓ Wrote {len(seasons)} seasons to {config.snapshot_path}")

    print_report(snapshot, fetched=len(fresh), carried=len(seasons) - len(fresh))
    return snapshot


def run_season_sync(scraper: UlaxScraper, season: str = 'winter',
                    clock: Callable[[], datetime] = utc_now) -> SingleSeasonData:
    """
    Legacy single-season sync: schedule and standings only.

    Writes ``<data_dir>/ulax-<season>.json`` and leaves the snapshot
    untouched. Any fetch failure is fatal.

    Parameters
    ----------
    scraper : UlaxScraper
        Configured fetcher
    season : str
        "winter", "spring" or "summer"
    clock : Callable[[], datetime]
        Source of the ``fetchedAt`` timestamp

    Returns
    -------
    SingleSeasonData
        The data that was written
    """
    config = scraper.config
    ref = SeasonRef(season)
    click.echo(f"Syncing ULAX data for {season} season...")

    try:
        with ThreadPoolExecutor(max_workers=2) as executor:
            schedule_f = executor.submit(scraper.fetch_schedule, ref)
            standings_f = executor.submit(scraper.fetch_standings, ref)
            schedule = schedule_f.result()
            standings = standings_f.result()
    except FetchError as e:
        raise SyncError(f"Season {season} fetch failed: {e}") from e

    data = SingleSeasonData(
        schedule=schedule,
        standings=standings,
        fetched_at=iso_timestamp(clock()),
        season=season,
    )
    path = config.data_dir / f"ulax-{season}.json"
    write_json_atomic(path, data.to_json_dict())
    click.echo(f"✓ Wrote {len(schedule)} games and {len(standings)} standings to {path}")

    club_games = [g for g in schedule if g.is_club_game]
    club_standing = next((s for s in standings if config.club_name in s.team), None)
    click.echo("\nSummary:")
    click.echo(f"  Total games: {len(schedule)}")
    click.echo(f"  {config.club_name} games: {len(club_games)}")
    click.echo(f"  Teams in standings: {len(standings)}")
    if club_standing:
        click.echo(f"\n{config.club_name}: {club_standing.w}-{club_standing.l}-{club_standing.t} "
                   f"({club_standing.pts} pts)")

    return data
