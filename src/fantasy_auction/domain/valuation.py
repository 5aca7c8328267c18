from dataclasses import dataclass, field
from enum import StrEnum

from fantasy_auction.domain.projection import PlayerProjection, PlayerType


class ValueTier(StrEnum):
    ELITE = "elite"
    STAR = "star"
    STARTER = "starter"
    BENCH = "bench"
    REPLACEMENT = "replacement"


@dataclass(frozen=True)
class PlayerValue:
    key: str
    projection: PlayerProjection
    player_type: PlayerType
    original_value: float
    adjusted_value: float
    score: float = 0.0
    var: float = 0.0
    rank: int = 0
    tier: int = 0
    value_tier: ValueTier = ValueTier.REPLACEMENT
    assigned_position: str | None = None
    position_rank: dict[str, int] = field(default_factory=dict)
    is_draftable: bool = False
    is_drafted: bool = False
    drafted_by: str | None = None
    draft_price: float | None = None

    @property
    def name(self) -> str:
        return self.projection.name

    @property
    def team(self) -> str | None:
        return self.projection.team

    @property
    def positions(self) -> tuple[str, ...]:
        return self.projection.positions
