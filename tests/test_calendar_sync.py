"""
Tests for the Google Calendar sync.
"""
from datetime import datetime, timezone
import json

import pytest
import requests

from ulax.calendar_sync import CALENDAR_API, CalendarClient, run_calendar_sync, transform_event
from ulax.config import CalendarConfig
from ulax.scraper import FetchError

from conftest import FakeResponse


class CalendarSession:
    """Serves queued payloads and records the query of every request."""

    def __init__(self, payloads) -> None:
        self.payloads = list(payloads)
        self.calls = []
        self.headers = {}

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, dict(params or {})))
        payload = self.payloads.pop(0)
        if isinstance(payload, Exception):
            raise payload
        return FakeResponse(url, payload=payload)

    def close(self) -> None:
        pass


def timed_event(event_id: str, start: str, end: str, summary: str = 'Practice'):
    return {
        'id': event_id,
        'summary': summary,
        'location': 'Kezar Stadium',
        'start': {'dateTime': start},
        'end': {'dateTime': end},
    }


def test_transform_timed_event() -> None:
    event = transform_event(timed_event('e1', '2026-01-11T19:30:00-08:00', '2026-01-11T21:00:00-08:00'))

    assert event.id == 'e1'
    assert event.start == '2026-01-11T19:30:00-08:00'
    assert event.end == '2026-01-11T21:00:00-08:00'
    assert event.location == 'Kezar Stadium'
    assert event.description == ''
    assert not event.all_day


def test_transform_all_day_event() -> None:
    event = transform_event({'id': 'e2', 'summary': 'Tournament',
                             'start': {'date': '2026-02-07'}, 'end': {'date': '2026-02-09'}})

    assert event.all_day
    assert (event.start, event.end) == ('2026-02-07', '2026-02-09')


def test_transform_event_without_end_uses_start() -> None:
    event = transform_event({'id': 'e3', 'start': {'dateTime': '2026-03-01T10:00:00Z'}})
    assert event.end == '2026-03-01T10:00:00Z'


@pytest.mark.parametrize("raw", [
    {'summary': 'No id', 'start': {'date': '2026-01-01'}},
    {'id': 'no-start'},
    {'id': 'empty-start', 'start': {}},
])
def test_transform_event_drops_unusable_items(raw) -> None:
    assert transform_event(raw) is None


def test_fetch_events_follows_pages() -> None:
    session = CalendarSession([
        {'items': [timed_event('e1', '2026-01-11T19:30:00Z', '2026-01-11T21:00:00Z')],
         'nextPageToken': 'page-2'},
        {'items': [timed_event('e2', '2026-01-18T19:30:00Z', '2026-01-18T21:00:00Z'), {'id': 'bad'}]},
    ])
    client = CalendarClient('secret', timeout=5, session_factory=lambda: session)

    events = client.fetch_events('club@group.calendar.google.com')

    assert [e.id for e in events] == ['e1', 'e2']
    assert session.calls[0][0] == f"{CALENDAR_API}/club%40group.calendar.google.com/events"
    first, second = (params for _, params in session.calls)
    assert first['key'] == 'secret'
    assert first['singleEvents'] == 'true'
    assert first['orderBy'] == 'startTime'
    assert 'pageToken' not in first
    assert second['pageToken'] == 'page-2'


def test_fetch_events_api_error() -> None:
    session = CalendarSession([{'error': {'code': 403, 'message': 'API key not valid'}}])
    client = CalendarClient('secret', session_factory=lambda: session)

    with pytest.raises(FetchError, match='403: API key not valid'):
        client.fetch_events('club')


def test_fetch_events_network_error() -> None:
    session = CalendarSession([requests.ConnectionError('connection refused')])
    client = CalendarClient('secret', session_factory=lambda: session)

    with pytest.raises(FetchError, match='connection refused'):
        client.fetch_events('club')


def test_run_calendar_sync_writes_file(config) -> None:
    session = CalendarSession([
        {'items': [{'id': 'e1', 'summary': 'Tournament',
                    'start': {'date': '2026-02-07'}, 'end': {'date': '2026-02-09'}}]},
    ])

    data = run_calendar_sync(
        CalendarConfig(calendar_id='club', api_key='secret'),
        config,
        session_factory=lambda: session,
        clock=lambda: datetime(2026, 1, 15, 20, 0, tzinfo=timezone.utc),
    )

    path = config.data_dir / 'calendar.json'
    text = path.read_text(encoding='utf-8')
    assert text.endswith('\n')
    written = json.loads(text)
    assert written == data.to_json_dict()
    assert written['fetchedAt'] == '2026-01-15T20:00:00.000Z'
    assert written['events'][0]['allDay'] is True
