#!/usr/bin/env python3
"""
Companion Google Calendar sync.

Pulls every event of a public Google Calendar through the REST API,
following ``nextPageToken`` pages, and writes them to ``calendar.json``
with the same write discipline as the league snapshot.
"""
from typing import Any, Callable, Dict, List, Optional
from datetime import datetime
from urllib.parse import quote

import click
import requests

from .config import CALENDAR_FILE, AppConfig, CalendarConfig
from .models import CalendarData, CalendarEvent
from .scraper import FetchError
from .snapshot import write_json_atomic
from .sync import iso_timestamp, utc_now


CALENDAR_API = "https://www.googleapis.com/calendar/v3/calendars"


def transform_event(raw: Dict[str, Any]) -> Optional[CalendarEvent]:
    """
    Convert one Google Calendar item.

    An event is all-day when its start has a ``date`` and no
    ``dateTime``. Items without an id or a start are dropped; a missing
    end falls back to the start.

    Parameters
    ----------
    raw : Dict[str, Any]
        Item from the ``events`` list response

    Returns
    -------
    Optional[CalendarEvent]
        The event, or None if the item is unusable
    """
    start_obj = raw.get('start') or {}
    if not raw.get('id') or not start_obj:
        return None

    end_obj = raw.get('end') or {}
    all_day = bool(start_obj.get('date')) and not start_obj.get('dateTime')
    start = (start_obj.get('date') if all_day else start_obj.get('dateTime')) or ''
    if not start:
        return None
    end = (end_obj.get('date') if all_day else end_obj.get('dateTime')) or start

    return CalendarEvent(
        id=raw['id'],
        summary=raw.get('summary') or '',
        description=raw.get('description') or '',
        location=raw.get('location') or '',
        start=start,
        end=end,
        all_day=all_day,
    )


class CalendarClient:
    """Minimal client for the Google Calendar ``events`` endpoint."""

    def __init__(self, api_key: str, timeout: int = 30,
                 session_factory: Callable[[], requests.Session] = requests.Session) -> None:
        self.api_key = api_key
        self.timeout = timeout
        self.session_factory = session_factory

    def fetch_events(self, calendar_id: str) -> List[CalendarEvent]:
        """
        Fetch every event of a calendar, page by page.

        Parameters
        ----------
        calendar_id : str
            Google Calendar identifier

        Returns
        -------
        List[CalendarEvent]
            Events ordered by start time

        Raises
        ------
        FetchError
            On a network failure, a non-JSON body, or an API error object
        """
        url = f"{CALENDAR_API}/{quote(calendar_id, safe='')}/events"
        events: List[CalendarEvent] = []
        page_token: Optional[str] = None

        session = self.session_factory()
        try:
            while True:
                params = {
                    'key': self.api_key,
                    'singleEvents': 'true',
                    'orderBy': 'startTime',
                    'maxResults': '2500',
                }
                if page_token:
                    params['pageToken'] = page_token

                try:
                    payload = session.get(url, params=params, timeout=self.timeout).json()
                except (requests.RequestException, ValueError) as e:
                    raise FetchError(f"Google Calendar request failed: {e}") from e
                if not isinstance(payload, dict):
                    raise FetchError(f"Google Calendar: expected object response, got {type(payload).__name__}")

                error = payload.get('error')
                if error:
                    raise FetchError(f"Google Calendar API error {error.get('code')}: {error.get('message')}")

                for item in payload.get('items') or []:
                    event = transform_event(item)
                    if event is not None:
                        events.append(event)

                page_token = payload.get('nextPageToken')
                if not page_token:
                    break
        finally:
            session.close()

        return events


def run_calendar_sync(calendar: CalendarConfig, config: AppConfig,
                      session_factory: Callable[[], requests.Session] = requests.Session,
                      clock: Callable[[], datetime] = utc_now) -> CalendarData:
    """Fetch all events and write ``<data_dir>/calendar.json``."""
    click.echo("Syncing Google Calendar data...")
    click.echo(f"  Calendar ID: {calendar.calendar_id}")

    client = CalendarClient(calendar.api_key, timeout=config.timeout, session_factory=session_factory)
    events = client.fetch_events(calendar.calendar_id)
    click.echo(f"  Fetched {len(events)} events")

    data = CalendarData(events=events, fetched_at=iso_timestamp(clock()))
    path = config.data_dir / CALENDAR_FILE
    write_json_atomic(path, data.to_json_dict())
    click.echo(f"✓ Wrote {len(events)} events to {path}")
    return data
