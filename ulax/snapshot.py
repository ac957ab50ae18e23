#!/usr/bin/env python3
"""
Snapshot persistence: load, merge and atomically write JSON data files.

The snapshot is a key/value map of season key to season data with a
read-modify-write cycle: seasons fetched by the current run replace
their previous entries, every other previously stored season is carried
forward unchanged.
"""
from typing import Dict, Mapping, Optional, Tuple
from pathlib import Path
import json
import os
import tempfile

import click
from pydantic import ValidationError

from .aggregate import parse_season_key
from .config import SEASONS
from .models import SeasonData, Snapshot


def season_sort_key(season_key: str) -> Tuple[int, int, int, str]:
    """
    Order season keys: current seasons first (winter, spring, summer),
    then archived seasons newest year first.
    """
    season, year = parse_season_key(season_key)
    season_idx = SEASONS.index(season) if season in SEASONS else len(SEASONS)
    if year is None:
        return (0, 0, season_idx, season_key)
    return (1, -year, season_idx, season_key)


def order_seasons(seasons: Mapping[str, SeasonData]) -> Dict[str, SeasonData]:
    """Return the seasons as a new dict in ``season_sort_key`` order."""
    return {key: seasons[key] for key in sorted(seasons, key=season_sort_key)}


def load_snapshot(path: Path) -> Optional[Snapshot]:
    """
    Load a previously written snapshot.

    Parameters
    ----------
    path : Path
        Snapshot file

    Returns
    -------
    Optional[Snapshot]
        The snapshot, or None if the file is missing or unreadable (an
        unreadable file is reported as a warning)
    """
    if not path.exists():
        return None
    try:
        return Snapshot.model_validate(json.loads(path.read_text(encoding='utf-8')))
    except (OSError, ValueError, ValidationError) as e:
        click.echo(f"Warning: Could not read previous snapshot {path}: {e}", err=True)
        return None


def merge_seasons(fresh: Mapping[str, SeasonData],
                  previous: Optional[Snapshot]) -> Dict[str, SeasonData]:
    """
    Combine this run's seasons with the ones stored previously.

    Parameters
    ----------
    fresh : Mapping[str, SeasonData]
        Seasons fetched successfully in this run
    previous : Optional[Snapshot]
        Last written snapshot, if any

    Returns
    -------
    Dict[str, SeasonData]
        Fresh seasons plus every previous season this run did not fetch,
        in ``season_sort_key`` order
    """
    merged: Dict[str, SeasonData] = dict(fresh)
    if previous is not None:
        for key, season in previous.seasons.items():
            if key not in merged:
                merged[key] = season
    return order_seasons(merged)


def write_json_atomic(path: Path, data: dict) -> None:
    """
    Write pretty-printed UTF-8 JSON with a trailing newline.

    The content goes to a temporary file in the same directory which then
    replaces ``path``, so readers never see a truncated file. The parent
    directory is created if needed.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix='.tmp', dir=path.parent)
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as tmp_file:
            tmp_file.write(json.dumps(data, indent=2, ensure_ascii=False) + '\n')
        os.replace(tmp_name, path)
    except Exception:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


def write_snapshot(path: Path, snapshot: Snapshot) -> None:
    """Persist a snapshot in its camelCase JSON form."""
    write_json_atomic(path, snapshot.to_json_dict())
