#!/usr/bin/env python3
"""
ULAX sync CLI.

Commands for syncing league data and the companion calendar into the
website's data directory.
"""
import sys

import click

from .calendar_sync import run_calendar_sync
from .config import SEASONS, AppConfig, CalendarConfig, ConfigError
from .scraper import FetchError, UlaxScraper
from .sync import SyncError, run_season_sync, run_sync


CONTEXT_SETTINGS = dict(help_option_names=['-h', '--help'])


def _fail(error: Exception) -> None:
    click.echo(f"Error: {error}", err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(version='1.0.0', prog_name='ulax')
def cli() -> None:
    """
    ULAX sync - fetch league data for the club website.

    Examples:

        ulax sync

        ulax sync --current-only

        ulax sync-season spring

        ulax sync-calendar
    """


@cli.command(context_settings=CONTEXT_SETTINGS)
@click.option('--current-only', is_flag=True,
              help='Only fetch the season active today')
@click.option('--with-archives', is_flag=True,
              help='Also refetch the historical archive seasons')
def sync(current_only: bool, with_archives: bool) -> None:
    """
    Sync schedule, standings, stats, rosters and championships.

    Without options all three season types are fetched and merged with
    the seasons already stored in the snapshot.
    """
    if current_only and with_archives:
        raise click.UsageError("--current-only and --with-archives are mutually exclusive")

    try:
        run_sync(UlaxScraper(AppConfig.from_env()), current_only=current_only,
                 with_archives=with_archives)
    except (ConfigError, FetchError, SyncError) as e:
        _fail(e)


@cli.command('sync-season', context_settings=CONTEXT_SETTINGS)
@click.argument('season', default='winter', type=click.Choice(SEASONS, case_sensitive=False))
def sync_season(season: str) -> None:
    """
    Legacy sync of one season's schedule and standings.

    Writes data/ulax-SEASON.json; the snapshot is not touched.
    """
    try:
        run_season_sync(UlaxScraper(AppConfig.from_env()), season.lower())
    except (ConfigError, FetchError, SyncError) as e:
        _fail(e)


@cli.command('sync-calendar', context_settings=CONTEXT_SETTINGS)
def sync_calendar() -> None:
    """
    Sync Google Calendar events to data/calendar.json.

    Requires GOOGLE_CALENDAR_ID and GOOGLE_API_KEY.
    """
    try:
        calendar = CalendarConfig.from_env()
        run_calendar_sync(calendar, AppConfig.from_env())
    except (ConfigError, FetchError) as e:
        _fail(e)


if __name__ == '__main__':
    cli()
