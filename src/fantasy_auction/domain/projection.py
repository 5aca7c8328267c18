from dataclasses import dataclass, field
from enum import StrEnum


class PlayerType(StrEnum):
    HITTER = "hitter"
    PITCHER = "pitcher"
    TWO_WAY = "two_way"
    UNKNOWN = "unknown"


class PlayerGroup(StrEnum):
    """Valuation group. Two-way players are valued in both."""

    HITTERS = "hitters"
    PITCHERS = "pitchers"


@dataclass(frozen=True)
class PlayerProjection:
    name: str
    positions: tuple[str, ...] = ()
    stats: dict[str, float] = field(default_factory=dict)
    team: str | None = None
    external_id: str | None = None


HITTER_POSITIONS: frozenset[str] = frozenset(
    {"C", "1B", "2B", "3B", "SS", "OF", "LF", "CF", "RF", "DH", "UTIL", "MI", "CI"}
)
PITCHER_POSITIONS: frozenset[str] = frozenset({"SP", "RP", "P"})
