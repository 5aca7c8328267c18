from dataclasses import dataclass, field
from enum import StrEnum

from fantasy_auction.domain.projection import HITTER_POSITIONS, PITCHER_POSITIONS, PlayerProjection


class ConflictKind(StrEnum):
    DUPLICATE = "duplicate"
    STATS_MISMATCH = "stats_mismatch"


class MatchConfidence(StrEnum):
    EXTERNAL_ID = "external_id"
    NAME_AND_TEAM = "name_and_team"
    NAME_ONLY = "name_only"


@dataclass(frozen=True)
class MergeConflict:
    player_id: str
    player_name: str
    kind: ConflictKind
    resolution: str
    confidence: MatchConfidence = MatchConfidence.EXTERNAL_ID


@dataclass(frozen=True)
class MergeResult:
    merged: list[PlayerProjection]
    conflicts: list[MergeConflict] = field(default_factory=list)
    hitter_count: int = 0
    pitcher_count: int = 0
    dual_count: int = 0

    def hitters(self) -> list[PlayerProjection]:
        """Merged players eligible at a hitting position, two-way players included."""
        return [p for p in self.merged if any(pos.upper() in HITTER_POSITIONS for pos in p.positions)]

    def pitchers(self) -> list[PlayerProjection]:
        return [p for p in self.merged if any(pos.upper() in PITCHER_POSITIONS for pos in p.positions)]
