#!/usr/bin/env python3
"""
Parse a season's standings page.

The standings table is the one showing GP, W and L headers; a ties
column may or may not be present. Rows are read positionally:
Team, GP, W, L, T, PTS, GF, GA.
"""
from typing import List
from bs4 import BeautifulSoup

from .html_tables import body_rows, cell_text, find_table, parse_int
from .models import Standing


STANDINGS_HEADERS = ('GP', 'W', 'L')


def parse_standings(html_content: str) -> List[Standing]:
    """
    Parse the standings table from a standings page.

    Parameters
    ----------
    html_content : str
        The HTML content of ``<base>/<season>/standings``

    Returns
    -------
    List[Standing]
        One row per team in page order; empty if the table is missing
    """
    soup = BeautifulSoup(html_content, 'html.parser')
    standings: List[Standing] = []

    table = find_table(soup, STANDINGS_HEADERS)
    if table is None:
        return standings

    for cells in body_rows(table):
        # Team, GP, W, L, T, PTS, GF, GA
        if len(cells) < 8:
            continue
        values = [cell_text(cell) for cell in cells[:8]]
        team = values[0]
        if not team:
            continue
        standings.append(Standing(
            team=team,
            gp=parse_int(values[1]),
            w=parse_int(values[2]),
            l=parse_int(values[3]),
            t=parse_int(values[4]),
            pts=parse_int(values[5]),
            gf=parse_int(values[6]),
            ga=parse_int(values[7]),
        ))

    return standings
