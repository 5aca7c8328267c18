import json
import logging
from pathlib import Path
from typing import Any

from fantasy_auction.domain.projection import PlayerProjection
from fantasy_auction.exceptions import ProjectionSourceError

logger = logging.getLogger(__name__)

# Accepted spellings of the external identifier field.
_ID_FIELDS = ("external_id", "mlbam_id", "mlbamId", "player_id")


def projection_from_dict(raw: dict[str, Any]) -> PlayerProjection:
    """Build a projection from one JSON record.

    Requires ``name``. ``positions`` may be a list or a comma-separated string.
    Non-numeric stat values are dropped.
    """
    name = raw.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ValueError("record is missing a player name")

    positions = raw.get("positions", ())
    if isinstance(positions, str):
        positions = positions.replace("/", ",").split(",")
    stats: dict[str, float] = {}
    for key, value in (raw.get("stats") or {}).items():
        if isinstance(value, bool) or not isinstance(value, int | float):
            logger.debug("Dropping non-numeric stat %s=%r for %s", key, value, name)
            continue
        stats[str(key)] = float(value)

    external_id = next((raw[f] for f in _ID_FIELDS if raw.get(f) not in (None, "")), None)
    team = raw.get("team")
    return PlayerProjection(
        name=name.strip(),
        positions=tuple(p.strip().upper() for p in positions if p and p.strip()),
        stats=stats,
        team=str(team) if team else None,
        external_id=str(external_id) if external_id is not None else None,
    )


def load_projections(path: Path) -> list[PlayerProjection]:
    """Read a JSON array of projection records (or ``{"players": [...]}``)."""
    try:
        data = json.loads(path.read_text())
    except OSError as e:
        raise ProjectionSourceError(f"Cannot read {path}: {e.strerror}", str(path)) from e
    except json.JSONDecodeError as e:
        raise ProjectionSourceError(f"{path} is not valid JSON: {e.msg} (line {e.lineno})", str(path)) from e

    if isinstance(data, dict):
        data = data.get("players")
    if not isinstance(data, list):
        raise ProjectionSourceError(f"{path} must contain a list of player projections", str(path))

    projections: list[PlayerProjection] = []
    for i, record in enumerate(data):
        if not isinstance(record, dict):
            raise ProjectionSourceError(f"{path}: record {i} is not an object", str(path))
        try:
            projections.append(projection_from_dict(record))
        except ValueError as e:
            raise ProjectionSourceError(f"{path}: record {i}: {e}", str(path)) from e
    logger.debug("Loaded %d projections from %s", len(projections), path)
    return projections
