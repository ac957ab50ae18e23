#!/usr/bin/env python3
"""
Derived statistics: standings from game results, club season summaries
and the all-time rollup.

Points are 2 per win, 1 per tie, 0 per loss, the same as the league's
published standings, so derived and scraped tables can be compared row
for row.
"""
from typing import Dict, Iterable, List, Optional, Tuple
import re

from .config import SEASONS
from .models import (
    AllTimeSummary,
    Championship,
    ClubSeasonSummary,
    Game,
    SeasonData,
    Standing,
)


POINTS_WIN = 2
POINTS_TIE = 1

SEASON_KEY_RE = re.compile(rf'^({"|".join(SEASONS)})(?:-(\d{{4}}))?$')


def sort_standings(standings: Iterable[Standing]) -> List[Standing]:
    """Order by points, then goal differential, both descending; ties keep input order."""
    return sorted(standings, key=lambda s: (-s.pts, -s.goal_differential))


def compute_standings(games: Iterable[Game]) -> List[Standing]:
    """
    Derive standings from completed games.

    A game counts only when both scores are known; scheduled games and
    games with one score missing are ignored.

    Parameters
    ----------
    games : Iterable[Game]
        A season's schedule

    Returns
    -------
    List[Standing]
        One row per team that has played, sorted by points then goal
        differential
    """
    table: Dict[str, Standing] = {}

    def row(team: str) -> Standing:
        if team not in table:
            table[team] = Standing(team=team)
        return table[team]

    for game in games:
        if not game.is_completed:
            continue
        sides = (
            (row(game.home_team), game.home_score, game.away_score),
            (row(game.away_team), game.away_score, game.home_score),
        )
        for standing, scored, conceded in sides:
            standing.gp += 1
            standing.gf += scored
            standing.ga += conceded
            if scored > conceded:
                standing.w += 1
                standing.pts += POINTS_WIN
            elif scored < conceded:
                standing.l += 1
            else:
                standing.t += 1
                standing.pts += POINTS_TIE

    return sort_standings(table.values())


def standings_mismatches(scraped: List[Standing], derived: List[Standing]) -> List[str]:
    """
    Compare published standings with ones derived from the schedule.

    Returns
    -------
    List[str]
        Names of teams whose rows differ or appear on one side only,
        in published order then derived order
    """
    derived_by_team = {s.team: s for s in derived}
    mismatched: List[str] = []
    for standing in scraped:
        other = derived_by_team.pop(standing.team, None)
        if other is None or other.model_dump() != standing.model_dump():
            mismatched.append(standing.team)
    mismatched.extend(derived_by_team)
    return mismatched


def parse_season_key(season_key: str) -> Tuple[str, Optional[int]]:
    """
    Split a season key into season name and year.

    Examples:
    - "winter" -> ("winter", None)
    - "summer-2024" -> ("summer", 2024)
    """
    match = SEASON_KEY_RE.match(season_key)
    if not match:
        return season_key, None
    year = int(match.group(2)) if match.group(2) else None
    return match.group(1), year


def is_club_title(championship: Championship, club_name: str,
                  season_key: str, year: Optional[int] = None) -> bool:
    """
    Whether a championship is the club's title for a season key.

    The champion must contain the club name and the championship's
    season must be contained in the key. When a year is known (from the
    key itself, or ``year`` for keys without one) it must match too.
    """
    if club_name not in championship.champion:
        return False
    if championship.season not in season_key:
        return False
    _, key_year = parse_season_key(season_key)
    expected_year = key_year if key_year is not None else year
    return expected_year is None or championship.year == expected_year


def season_year(season: SeasonData) -> Optional[int]:
    """Year of the latest game in a season's schedule; None when it has no games."""
    years = [int(game.date[:4]) for game in season.schedule if game.date[:4].isdigit()]
    return max(years) if years else None


def summarize_club_season(season_key: str, season: SeasonData, championships: List[Championship],
                          club_name: str) -> Optional[ClubSeasonSummary]:
    """
    Build the club's summary for one season.

    A current-season key ("spring") carries no year, and in January it
    still holds last year's spring, so its year is taken from the
    season's own schedule. With no games, any year matches.

    Parameters
    ----------
    season_key : str
        Key of the season in the snapshot ("winter", "winter-2024")
    season : SeasonData
        The season's data; standings are derived from the schedule when
        the season has none
    championships : List[Championship]
        Every known championship
    club_name : str
        Tracked club

    Returns
    -------
    Optional[ClubSeasonSummary]
        Summary, or None when the club neither appears in the standings
        nor won the title
    """
    standings = season.standings or compute_standings(season.schedule)
    standing = next((s for s in standings if club_name in s.team), None)
    year = season_year(season)
    is_champion = any(is_club_title(c, club_name, season_key, year) for c in championships)

    if standing is None and not is_champion:
        return None
    standing = standing or Standing(team=club_name)

    if is_champion:
        result = 'Champions'
    elif standing.w > standing.l:
        result = 'Playoffs'
    else:
        result = 'Regular Season'

    return ClubSeasonSummary(
        season=season_key,
        wins=standing.w,
        losses=standing.l,
        ties=standing.t,
        goals_for=standing.gf,
        goals_against=standing.ga,
        result=result,
        is_champion=is_champion,
    )


def summarize_all_time(summaries: Iterable[ClubSeasonSummary]) -> AllTimeSummary:
    """Sum every season summary; each champion season adds one title."""
    total = AllTimeSummary()
    for summary in summaries:
        total.wins += summary.wins
        total.losses += summary.losses
        total.ties += summary.ties
        total.goals_for += summary.goals_for
        total.goals_against += summary.goals_against
        if summary.is_champion:
            total.titles += 1
    return total
