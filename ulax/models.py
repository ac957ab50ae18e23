#!/usr/bin/env python3
"""
Pydantic models for ULAX league data.

These are the canonical internal types every fetcher produces and the
snapshot file persists. Field names are snake_case in Python and
camelCase in the JSON written for the website (``away_team`` is stored
as ``awayTeam``).
"""
from typing import Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


GameType = Literal["regular", "playoff", "championship"]
SeasonName = Literal["winter", "spring", "summer"]


class UlaxModel(BaseModel):
    """Base model: camelCase JSON aliases, Python names also accepted."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> dict:
        """Dump to the JSON-ready, camelCase representation."""
        return self.model_dump(mode="json", by_alias=True)


class Game(UlaxModel):
    """
    One scheduled or completed game.

    Attributes
    ----------
    id : int
        Upstream-assigned identifier
    date : str
        Calendar date as ``YYYY-MM-DD``
    time : str
        Display time as published (e.g. "7:30 PM")
    field : str
        Venue
    away_team, home_team : str
        Trimmed team names
    away_score, home_score : Optional[int]
        Goals, or None when the game has not been played
    game_type : str
        "regular", "playoff" or "championship"
    type_name : str
        Upstream display label for the game type
    is_club_game : bool
        Whether the tracked club plays in this game
    club_is_home : Optional[bool]
        Whether the tracked club is the home side; None when it does not play
    """
    id: int
    date: str
    time: str
    field: str
    away_team: str
    away_score: Optional[int] = None
    home_team: str
    home_score: Optional[int] = None
    game_type: GameType = "regular"
    type_name: str = ""
    is_club_game: bool = False
    club_is_home: Optional[bool] = None

    @property
    def is_completed(self) -> bool:
        """A game counts toward records only once both scores are known."""
        return self.away_score is not None and self.home_score is not None


class Standing(UlaxModel):
    """One team's record within a season."""
    team: str
    gp: int = 0
    w: int = 0
    l: int = 0
    t: int = 0
    pts: int = 0
    gf: int = 0
    ga: int = 0

    @property
    def goal_differential(self) -> int:
        return self.gf - self.ga


class PlayerStat(UlaxModel):
    """Seasonal skater totals; ``team`` is empty when attribution failed."""
    name: str
    number: str = ""
    team: str = ""
    gp: int = 0
    goals: int = 0
    assists: int = 0
    points: int = 0


class GoalieStat(UlaxModel):
    """Seasonal goalie totals; ``team`` is empty when attribution failed."""
    name: str
    number: str = ""
    team: str = ""
    wins: int = 0
    losses: int = 0
    goals_against: int = 0
    saves: int = 0
    save_percentage: float = 0.0


class RosterPlayer(UlaxModel):
    """Roster entry with captaincy markers split out of the name."""
    name: str
    number: str = ""
    position: str = ""
    height: str = ""
    weight: str = ""
    age: str = ""
    home_town: str = ""
    team: str = ""
    is_captain: bool = False
    is_assistant_captain: bool = False


class Championship(UlaxModel):
    """A title won at the end of a league season."""
    year: int
    season: SeasonName
    division: str
    champion: str


class SeasonData(UlaxModel):
    """Everything fetched for one season."""
    schedule: List[Game] = Field(default_factory=list)
    standings: List[Standing] = Field(default_factory=list)
    player_stats: List[PlayerStat] = Field(default_factory=list)
    goalie_stats: List[GoalieStat] = Field(default_factory=list)
    roster: List[RosterPlayer] = Field(default_factory=list)

    def is_empty(self) -> bool:
        """True when upstream has published nothing for this season yet."""
        return not (self.schedule or self.standings or self.player_stats
                    or self.goalie_stats or self.roster)


class ClubSeasonSummary(UlaxModel):
    """
    The tracked club's record for one season.

    ``result`` is "Champions" when a matching championship exists,
    "Playoffs" when wins exceed losses, otherwise "Regular Season".
    The "Playoffs" label is a heuristic, not a playoff-berth signal.
    """
    season: str
    wins: int = 0
    losses: int = 0
    ties: int = 0
    goals_for: int = 0
    goals_against: int = 0
    result: str = "Regular Season"
    is_champion: bool = False


class AllTimeSummary(UlaxModel):
    """Sum of every ClubSeasonSummary plus a title count."""
    wins: int = 0
    losses: int = 0
    ties: int = 0
    titles: int = 0
    goals_for: int = 0
    goals_against: int = 0


class ClubRecord(UlaxModel):
    """The tracked club's all-time and per-season summaries."""
    name: str
    all_time: AllTimeSummary = Field(default_factory=AllTimeSummary)
    seasons: List[ClubSeasonSummary] = Field(default_factory=list)


class Snapshot(UlaxModel):
    """
    The persisted artifact consumed by the website.

    Attributes
    ----------
    current_season : str
        Season active on the sync date
    current_year : int
        Calendar year of the sync date
    seasons : Dict[str, SeasonData]
        Season key ("winter", "winter-2024") to season data
    championships : List[Championship]
        Every title parsed from the archive page
    club : ClubRecord
        Derived summaries for the tracked club
    fetched_at : str
        ISO-8601 UTC timestamp of the sync
    """
    current_season: SeasonName
    current_year: int
    seasons: Dict[str, SeasonData] = Field(default_factory=dict)
    championships: List[Championship] = Field(default_factory=list)
    club: ClubRecord
    fetched_at: str


class SingleSeasonData(UlaxModel):
    """Output of the legacy single-season sync: schedule and standings only."""
    schedule: List[Game] = Field(default_factory=list)
    standings: List[Standing] = Field(default_factory=list)
    fetched_at: str
    season: SeasonName


class CalendarEvent(UlaxModel):
    """A calendar event; ``start``/``end`` are dates for all-day events, else datetimes."""
    id: str
    summary: str = ""
    description: str = ""
    location: str = ""
    start: str
    end: str
    all_day: bool = False


class CalendarData(UlaxModel):
    events: List[CalendarEvent] = Field(default_factory=list)
    fetched_at: str
