#!/usr/bin/env python3
"""
Decode raw schedule records from the ULAX JSON API.

The API is loosely typed: a score arrives as a number, ``null`` or an
empty string depending on whether the game was played. ``RawGame``
resolves that once, so every score downstream is ``int`` or ``None``.
"""
from typing import Any, List, Optional, Tuple
import json

import click
from pydantic import BaseModel, ConfigDict, NonNegativeInt, field_validator

from .extractors import game_type_from_code, normalize_game_date
from .models import Game


class RawGame(BaseModel):
    """One schedule record exactly as the API names its fields."""
    model_config = ConfigDict(strict=True, extra='ignore')

    id: int
    gamedate: str
    gametime: str
    field: str
    awayteam: str
    awayscore: Optional[NonNegativeInt]
    hometeam: str
    homescore: Optional[NonNegativeInt]
    gametype: int
    typename: str

    @field_validator('awayscore', 'homescore', mode='before')
    @classmethod
    def _coerce_score(cls, value: Any) -> Any:
        """An empty string means not played (whitespace is rejected); whole floats are accepted as ints."""
        if value == '':
            return None
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return value


def transform_game(raw: RawGame, club_name: str) -> Game:
    """
    Build a canonical Game from a decoded record.

    Club participation is a substring match on either team name, so a
    club whose name is contained in another team's name also matches.

    Parameters
    ----------
    raw : RawGame
        Decoded API record
    club_name : str
        Tracked club

    Returns
    -------
    Game
        Normalized game

    Raises
    ------
    ValueError
        If the game date cannot be parsed
    """
    is_club_game = club_name in raw.hometeam or club_name in raw.awayteam
    return Game(
        id=raw.id,
        date=normalize_game_date(raw.gamedate),
        time=raw.gametime,
        field=raw.field,
        away_team=raw.awayteam.strip(),
        away_score=raw.awayscore,
        home_team=raw.hometeam.strip(),
        home_score=raw.homescore,
        game_type=game_type_from_code(raw.gametype),
        type_name=raw.typename,
        is_club_game=is_club_game,
        club_is_home=(club_name in raw.hometeam) if is_club_game else None,
    )


def decode_games(items: List[Any], club_name: str) -> Tuple[List[Game], int]:
    """
    Decode and transform every record of a schedule response.

    Records that fail validation are skipped with a warning; the batch
    is never aborted.

    Parameters
    ----------
    items : List[Any]
        Parsed JSON array from the API
    club_name : str
        Tracked club

    Returns
    -------
    Tuple[List[Game], int]
        (decoded games in input order, number of skipped records)
    """
    games: List[Game] = []
    skipped = 0
    for item in items:
        try:
            games.append(transform_game(RawGame.model_validate(item), club_name))
        except ValueError as e:
            # pydantic.ValidationError is a ValueError
            skipped += 1
            click.echo(f"Warning: Failed to parse game: {json.dumps(item, default=str)} ({_first_line(e)})", err=True)

    if skipped:
        click.echo(f"Warning: Schedule parsing: {skipped} of {len(items)} games failed validation", err=True)

    return games, skipped


def _first_line(error: Exception) -> str:
    text = str(error).strip()
    return text.splitlines()[0] if text else error.__class__.__name__
