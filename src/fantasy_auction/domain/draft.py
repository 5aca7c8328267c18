from dataclasses import dataclass, field
from enum import StrEnum


class DraftStatus(StrEnum):
    IDLE = "idle"
    ACTIVE = "active"


@dataclass(frozen=True)
class DraftPick:
    pick_number: int
    player_key: str
    player_name: str
    positions: tuple[str, ...]
    projected_value: float
    price: float
    team: str
    is_my_bid: bool = False


@dataclass
class DraftState:
    total_players_available: int
    picks: list[DraftPick] = field(default_factory=list)
    current_inflation_rate: float = 0.0
    total_budget_spent: float = 0.0
    total_players_drafted: int = 0

    @property
    def status(self) -> DraftStatus:
        return DraftStatus.ACTIVE if self.picks else DraftStatus.IDLE


@dataclass(frozen=True)
class DraftMetrics:
    total_budget: float
    budget_spent: float
    budget_remaining: float
    players_left_to_draft: int
    average_cost_per_player: float
    average_adjusted_value: float
    inflation_rate: float
    inflation_direction: str


@dataclass(frozen=True)
class PositionNeed:
    position: str
    required: int
    filled: int
    remaining: int


@dataclass(frozen=True)
class TeamNeeds:
    team: str
    budget_remaining: float
    players_drafted: int
    needs: tuple[PositionNeed, ...]

    @property
    def total_remaining(self) -> int:
        return sum(n.remaining for n in self.needs)

    @property
    def budget_per_spot(self) -> float:
        remaining = self.total_remaining
        return self.budget_remaining / remaining if remaining > 0 else 0.0
