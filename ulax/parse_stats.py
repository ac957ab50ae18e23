#!/usr/bin/env python3
"""
Parse the stats and rosters pages.

Both pages print one table per team, each preceded by that team's logo.
Team attribution comes from the logo (see ``extractors.team_from_logo``)
and is best-effort: rows are still captured with an empty team when no
logo is found.
"""
from typing import List, Tuple
from bs4 import BeautifulSoup

from .extractors import split_captaincy, team_from_logo
from .html_tables import body_rows, cell_text, find_tables, parse_float, parse_int
from .models import GoalieStat, PlayerStat, RosterPlayer


SKATER_HEADERS = ('GP', 'G', 'A', 'PTS')
GOALIE_HEADERS = ('W', 'L', 'GA', 'SV')
ROSTER_HEADERS = ('Position', 'Height')


def parse_player_stats(soup: BeautifulSoup) -> List[PlayerStat]:
    """
    Parse every skater table: Name, #, GP, G, A, PTS.

    A table with a W column is a goalie table and is left out even if it
    also shows the skater columns.
    """
    players: List[PlayerStat] = []
    for table in find_tables(soup, SKATER_HEADERS, excluded=('W',)):
        team = team_from_logo(table)
        for cells in body_rows(table):
            if len(cells) < 6:
                continue
            values = [cell_text(cell) for cell in cells[:6]]
            if not values[0]:
                continue
            players.append(PlayerStat(
                name=values[0],
                number=values[1],
                team=team,
                gp=parse_int(values[2]),
                goals=parse_int(values[3]),
                assists=parse_int(values[4]),
                points=parse_int(values[5]),
            ))
    return players


def parse_goalie_stats(soup: BeautifulSoup) -> List[GoalieStat]:
    """Parse every goalie table: Name, #, W, L, GA, SV, SV%."""
    goalies: List[GoalieStat] = []
    for table in find_tables(soup, GOALIE_HEADERS):
        team = team_from_logo(table)
        for cells in body_rows(table):
            if len(cells) < 7:
                continue
            values = [cell_text(cell) for cell in cells[:7]]
            if not values[0]:
                continue
            goalies.append(GoalieStat(
                name=values[0],
                number=values[1],
                team=team,
                wins=parse_int(values[2]),
                losses=parse_int(values[3]),
                goals_against=parse_int(values[4]),
                saves=parse_int(values[5]),
                save_percentage=parse_float(values[6]),
            ))
    return goalies


def parse_stats(html_content: str) -> Tuple[List[PlayerStat], List[GoalieStat]]:
    """
    Parse skater and goalie tables from a stats page.

    Parameters
    ----------
    html_content : str
        The HTML content of ``<base>/<season>/stats``

    Returns
    -------
    Tuple[List[PlayerStat], List[GoalieStat]]
        Skaters and goalies in page order; empty lists if no table matches
    """
    soup = BeautifulSoup(html_content, 'html.parser')
    return parse_player_stats(soup), parse_goalie_stats(soup)


def parse_roster(html_content: str) -> List[RosterPlayer]:
    """
    Parse every roster table from a rosters page.

    Columns: Name, #, Position, Height, Weight, Age, Hometown. Captaincy
    markers are stripped from the name into boolean flags.

    Parameters
    ----------
    html_content : str
        The HTML content of ``<base>/<season>/rosters``

    Returns
    -------
    List[RosterPlayer]
        Players in page order; empty if no roster table is found
    """
    soup = BeautifulSoup(html_content, 'html.parser')
    roster: List[RosterPlayer] = []

    for table in find_tables(soup, ROSTER_HEADERS):
        team = team_from_logo(table)
        for cells in body_rows(table):
            if len(cells) < 7:
                continue
            name, is_captain, is_assistant = split_captaincy(cells[0])
            if not name:
                continue
            values = [cell_text(cell) for cell in cells[1:7]]
            roster.append(RosterPlayer(
                name=name,
                number=values[0],
                position=values[1],
                height=values[2],
                weight=values[3],
                age=values[4],
                home_town=values[5],
                team=team,
                is_captain=is_captain,
                is_assistant_captain=is_assistant,
            ))

    return roster
