#!/usr/bin/env python3
"""
Field extraction rules for ULAX pages and API records.

Each rule is a small pure function so an upstream markup change only
touches one place. Rules that look at page structure return an empty
value on a miss instead of raising.
"""
from typing import Optional, Tuple
from datetime import date, datetime
from urllib.parse import unquote
import re

from bs4 import Tag

from .config import SEASONS


LOGO_SRC_RE = re.compile(r'x50\.png')
LOGO_NAME_RE = re.compile(r'/([^/]+)_x50\.png')
CAPTAINCY_RE = re.compile(r'\s*\(([CA])\)\s*')

DATE_FORMATS = ('%B %d, %Y', '%b %d, %Y', '%Y-%m-%d', '%m/%d/%Y')

GAME_TYPES = {0: 'regular', 1: 'playoff', 2: 'championship'}


def team_from_logo_src(src: str) -> str:
    """
    Derive a team name from a logo path.

    Examples:
    - "/logos/Barbary_Coast_x50.png" -> "Barbary Coast"
    - "/logos/Fog_City_(Men)_x50.png" -> "Fog City"

    Parameters
    ----------
    src : str
        Image ``src`` attribute

    Returns
    -------
    str
        Team name, or empty string if the path is not a team logo
    """
    match = LOGO_NAME_RE.search(src or '')
    if not match:
        return ''
    name = unquote(match.group(1)).replace('_', ' ')
    name = re.sub(r'\s*\(.*\)', '', name)
    return ' '.join(name.split())


def _logo_in(element: Tag) -> Optional[Tag]:
    """Return the logo image that is, or is wrapped by, a sibling element."""
    if element.name == 'img':
        return element if LOGO_SRC_RE.search(element.get('src', '')) else None
    return element.find('img', src=LOGO_SRC_RE)


def team_from_logo(table: Tag) -> str:
    """
    Attribute a stats/roster table to a team via the nearest preceding logo.

    Upstream prints each team's logo right before that team's table, so
    the closest preceding sibling carrying a ``*_x50.png`` image names
    the team.

    Parameters
    ----------
    table : Tag
        The ``<table>`` element

    Returns
    -------
    str
        Team name, or empty string if no logo precedes the table
    """
    for sibling in table.find_previous_siblings(True):
        logo = _logo_in(sibling)
        if logo is not None:
            return team_from_logo_src(logo.get('src', ''))
    return ''


def split_captaincy(cell: Tag) -> Tuple[str, bool, bool]:
    """
    Strip "(C)"/"(A)" markers from a roster name cell.

    Markers may be inline text or child elements with a ``captain`` or
    ``assistant`` class.

    Parameters
    ----------
    cell : Tag
        The name ``<td>``

    Returns
    -------
    Tuple[str, bool, bool]
        (display name, is captain, is assistant captain)
    """
    text = ' '.join(cell.get_text(' ').split())
    markers = set(CAPTAINCY_RE.findall(text))
    is_captain = 'C' in markers or cell.find(class_='captain') is not None
    is_assistant = 'A' in markers or cell.find(class_='assistant') is not None
    name = ' '.join(CAPTAINCY_RE.sub(' ', text).split())
    return name, is_captain, is_assistant


def normalize_game_date(date_str: str) -> str:
    """
    Normalize an upstream date to ``YYYY-MM-DD``.

    Parsing is done on naive calendar components, so the result never
    depends on the host timezone ("January 11, 2026" is always
    "2026-01-11").

    Parameters
    ----------
    date_str : str
        Date as published, usually "Month D, YYYY"

    Returns
    -------
    str
        ISO calendar date

    Raises
    ------
    ValueError
        If the string matches none of the known formats
    """
    text = ' '.join((date_str or '').split())
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date().isoformat()
        except ValueError:
            continue
    raise ValueError(f"Unrecognized game date: {date_str!r}")


def game_type_from_code(code: int) -> str:
    """Map the upstream game type code; unknown codes are regular season."""
    return GAME_TYPES.get(code, 'regular')


def season_for_date(today: date) -> str:
    """
    Return the season active on a given date.

    January-March is winter, April-June is spring, the rest of the year
    is summer.
    """
    if today.month <= 3:
        return SEASONS[0]
    if today.month <= 6:
        return SEASONS[1]
    return SEASONS[2]
