#!/usr/bin/env python3
"""
Locate HTML tables by their header text.

Upstream tables carry no ids or classes worth relying on, so a table is
identified by the set of column headers it shows. A page may hold several
tables with the same header set (one per team), so the locator yields
every match rather than stopping at the first.
"""
from typing import Iterable, Iterator, List, Optional
from bs4 import BeautifulSoup, Tag
import re


INT_RE = re.compile(r'^[+-]?\d+')
FLOAT_RE = re.compile(r'^[+-]?(?:\d+\.?\d*|\.\d+)')


def cell_text(cell: Tag) -> str:
    """Return a cell's text with whitespace collapsed."""
    return ' '.join(cell.get_text(' ').split())


def header_texts(table: Tag) -> List[str]:
    """
    Return the trimmed text of every ``<th>`` in a table.

    Parameters
    ----------
    table : Tag
        The ``<table>`` element

    Returns
    -------
    List[str]
        Header texts in document order
    """
    return [cell_text(th) for th in table.find_all('th')]


def find_tables(soup: BeautifulSoup, required: Iterable[str],
                excluded: Iterable[str] = ()) -> Iterator[Tag]:
    """
    Yield every table whose headers include all required texts.

    Header order does not matter and extra columns are allowed.

    Parameters
    ----------
    soup : BeautifulSoup
        Parsed page
    required : Iterable[str]
        Header texts that must all be present
    excluded : Iterable[str]
        Header texts that must all be absent (tells a skater table from
        a goalie table that shares its columns)

    Yields
    ------
    Tag
        Matching ``<table>`` elements in document order
    """
    required_set = set(required)
    excluded_set = set(excluded)
    for table in soup.find_all('table'):
        headers = set(header_texts(table))
        if required_set <= headers and not (excluded_set & headers):
            yield table


def find_table(soup: BeautifulSoup, required: Iterable[str],
               excluded: Iterable[str] = ()) -> Optional[Tag]:
    """Return the first table matching ``required``, or None."""
    return next(find_tables(soup, required, excluded), None)


def body_rows(table: Tag) -> List[List[Tag]]:
    """
    Return the data cells of every body row.

    Rows come from ``<tbody>`` when the table has one; otherwise every
    row holding ``<td>`` cells counts (the header row has only ``<th>``).

    Parameters
    ----------
    table : Tag
        The ``<table>`` element

    Returns
    -------
    List[List[Tag]]
        One list of ``<td>`` cells per row
    """
    bodies = table.find_all('tbody')
    if bodies:
        rows = [tr for tbody in bodies for tr in tbody.find_all('tr')]
    else:
        rows = table.find_all('tr')
    cells = [row.find_all('td') for row in rows]
    return [row for row in cells if row]


def parse_int(value: str) -> int:
    """Parse the leading integer of a cell ("12", "-3", "7*"); 0 when there is none."""
    match = INT_RE.match(value.strip())
    return int(match.group(0)) if match else 0


def parse_float(value: str) -> float:
    """Parse the leading decimal of a cell (".912", "91.2%"); 0.0 when there is none."""
    match = FLOAT_RE.match(value.strip())
    return float(match.group(0)) if match else 0.0
