from dataclasses import dataclass, field
from enum import StrEnum
from typing import TypeAlias

from fantasy_auction.domain.projection import PlayerGroup


class ScoringType(StrEnum):
    ROTO = "roto"
    H2H_CATEGORIES = "h2h-categories"
    H2H_POINTS = "h2h-points"


@dataclass(frozen=True)
class CategoryScoring:
    hitting_categories: tuple[str, ...]
    pitching_categories: tuple[str, ...]
    type: ScoringType = ScoringType.ROTO


@dataclass(frozen=True)
class PointsScoring:
    hitting_points: dict[str, float]
    pitching_points: dict[str, float]
    type: ScoringType = ScoringType.H2H_POINTS


ScoringFormat: TypeAlias = CategoryScoring | PointsScoring


@dataclass(frozen=True)
class LeagueSettings:
    team_count: int
    auction_budget: float
    total_roster_spots: int
    position_requirements: dict[str, int] = field(default_factory=dict)
    name: str = "default"

    @property
    def total_budget(self) -> float:
        return self.team_count * self.auction_budget


class ValuationMethod(StrEnum):
    SGP = "sgp"
    ZSCORE = "zscore"
    POINTS = "points"


class SplitMethod(StrEnum):
    CALCULATED = "calculated"
    MANUAL = "manual"
    STANDARD = "standard"


class SplitPreset(StrEnum):
    BALANCED = "balanced"
    HITTER_HEAVY = "hitter_heavy"
    PITCHER_HEAVY = "pitcher_heavy"


# Hitter share of the dollar pool, in percent.
STANDARD_SPLITS: dict[SplitPreset, float] = {
    SplitPreset.BALANCED: 65.0,
    SplitPreset.HITTER_HEAVY: 70.0,
    SplitPreset.PITCHER_HEAVY: 60.0,
}


@dataclass(frozen=True)
class BudgetSplit:
    method: SplitMethod = SplitMethod.CALCULATED
    hitter_percent: float | None = None
    preset: SplitPreset = SplitPreset.BALANCED

    def hitter_fraction(self) -> float | None:
        """Fixed hitter share of the pool, or None when the split follows VAR."""
        if self.method is SplitMethod.MANUAL and self.hitter_percent is not None:
            return self.hitter_percent / 100.0
        if self.method is SplitMethod.STANDARD:
            return STANDARD_SPLITS[self.preset] / 100.0
        return None


class ReplacementMethod(StrEnum):
    LAST_DRAFTED = "last_drafted"
    FIRST_UNDRAFTED = "first_undrafted"
    BLENDED = "blended"


class InflationMethod(StrEnum):
    DRAFTED_SPEND = "drafted_spend"
    REMAINING_BUDGET = "remaining_budget"


def _default_flex_weights() -> dict[str, dict[PlayerGroup, float]]:
    return {
        "UTIL": {PlayerGroup.HITTERS: 1.0},
        "MI": {PlayerGroup.HITTERS: 1.0},
        "CI": {PlayerGroup.HITTERS: 1.0},
        "P": {PlayerGroup.PITCHERS: 1.0},
        "BENCH": {PlayerGroup.HITTERS: 0.5, PlayerGroup.PITCHERS: 0.5},
    }


@dataclass(frozen=True)
class RosterAllocation:
    """How flex and bench slots count toward each group's valuation pool.

    Primary positions always count fully toward their own group. Flex slots
    (UTIL, MI, CI, P, BENCH) contribute ``weight * spots`` to each group listed.
    """

    flex_weights: dict[str, dict[PlayerGroup, float]] = field(default_factory=_default_flex_weights)

    def weight(self, position: str, group: PlayerGroup) -> float:
        return self.flex_weights.get(position.upper(), {}).get(group, 0.0)

    def is_flex(self, position: str) -> bool:
        return position.upper() in self.flex_weights


@dataclass(frozen=True)
class ValueCalculationSettings:
    method: ValuationMethod = ValuationMethod.ZSCORE
    budget_split: BudgetSplit = field(default_factory=BudgetSplit)
    replacement_method: ReplacementMethod = ReplacementMethod.LAST_DRAFTED
    roster_allocation: RosterAllocation = field(default_factory=RosterAllocation)
    apply_position_scarcity: bool = False
    position_scarcity_weights: dict[str, float] = field(default_factory=dict)
    sgp_denominators: dict[str, float] = field(default_factory=dict)
    min_bid: float = 1.0
    smoothing_window: int = 5
    inflation_method: InflationMethod = InflationMethod.DRAFTED_SPEND
