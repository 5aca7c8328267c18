from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from fantasy_auction.domain.league_settings import ReplacementMethod, RosterAllocation
from fantasy_auction.domain.projection import HITTER_POSITIONS, PITCHER_POSITIONS, PlayerGroup

if TYPE_CHECKING:
    from collections.abc import Mapping

    from fantasy_auction.domain.league_settings import LeagueSettings

logger = logging.getLogger(__name__)

HITTER_SCARCITY_ORDER = ("C", "SS", "2B", "3B", "1B", "OF", "LF", "CF", "RF", "DH")
PITCHER_SCARCITY_ORDER = ("SP", "RP")
HITTER_FLEX_ORDER = ("MI", "CI", "UTIL", "BENCH")
PITCHER_FLEX_ORDER = ("P", "BENCH")

_OUTFIELD = frozenset({"OF", "LF", "CF", "RF"})


@dataclass(frozen=True)
class PositionThreshold:
    position: str
    roster_spots: int
    filled: int
    replacement_value: float


@dataclass(frozen=True)
class GroupReplacement:
    group: PlayerGroup
    pool_size: int
    assignments: dict[str, str]
    replacement_value: float
    thresholds: tuple[PositionThreshold, ...] = ()

    @property
    def pool(self) -> frozenset[str]:
        return frozenset(self.assignments)


def is_eligible(slot: str, positions: tuple[str, ...], group: PlayerGroup) -> bool:
    """Whether a player with ``positions`` can fill ``slot`` for ``group``."""
    if slot in ("UTIL", "BENCH") and group is PlayerGroup.HITTERS:
        return any(p in HITTER_POSITIONS for p in positions)
    if slot in ("P", "BENCH") and group is PlayerGroup.PITCHERS:
        return any(p in PITCHER_POSITIONS for p in positions)
    if slot == "MI":
        return "2B" in positions or "SS" in positions
    if slot == "CI":
        return "1B" in positions or "3B" in positions
    if slot == "OF":
        return bool(_OUTFIELD.intersection(positions))
    return slot in positions


def group_slot_spots(
    group: PlayerGroup,
    league: LeagueSettings,
    allocation: RosterAllocation,
) -> dict[str, int]:
    """League-wide roster spots per slot counted toward ``group``'s valuation pool.

    Returned in fill order: scarce primary positions first, then flex slots.
    """
    requirements: dict[str, int] = {}
    for position, count in league.position_requirements.items():
        code = "BENCH" if position.upper() == "BN" else position.upper()
        requirements[code] = requirements.get(code, 0) + count
    if not requirements:
        # No positional slots configured: the whole roster is shared like the bench.
        requirements["BENCH"] = league.total_roster_spots

    if group is PlayerGroup.HITTERS:
        primary, flex = HITTER_SCARCITY_ORDER, HITTER_FLEX_ORDER
    else:
        primary, flex = PITCHER_SCARCITY_ORDER, PITCHER_FLEX_ORDER
    extra_flex = tuple(p for p in allocation.flex_weights if p not in flex)

    spots: dict[str, int] = {}
    for position in primary:
        count = requirements.get(position, 0)
        if count > 0 and not allocation.is_flex(position):
            spots[position] = count * league.team_count
    for position in (*flex, *extra_flex):
        count = requirements.get(position, 0)
        weight = allocation.weight(position, group)
        if count > 0 and weight > 0.0:
            spots[position] = round(count * league.team_count * weight)
    return spots


def assign_positions(
    scores: Mapping[str, float],
    positions: Mapping[str, tuple[str, ...]],
    slot_spots: dict[str, int],
    group: PlayerGroup,
) -> dict[str, str]:
    """Greedy scarcity-first assignment. Returns player key -> slot.

    Slots are filled in ``slot_spots`` order with the best remaining eligible
    players. When the cut falls inside a run of equal scores every tied player
    takes the slot, so a slot can hold more than its spot count. Players left
    unassigned are outside the valuation pool.
    """
    ranked = sorted(scores, key=lambda k: (-scores[k], k))
    assigned: dict[str, str] = {}
    for slot, spots in slot_spots.items():
        eligible = [k for k in ranked if k not in assigned and is_eligible(slot, positions.get(k, ()), group)]
        taken = eligible[:spots]
        if taken:
            cutoff = scores[taken[-1]]
            taken += [k for k in eligible[spots:] if scores[k] == cutoff]
        for key in taken:
            assigned[key] = slot
    return assigned


def _smoothed_value(ranked_scores: list[float], threshold_index: int, window: int) -> float:
    if not ranked_scores:
        return 0.0
    if threshold_index >= len(ranked_scores):
        return ranked_scores[-1]
    half = window // 2
    start = max(0, threshold_index - half)
    end = min(len(ranked_scores), threshold_index + half + 1)
    values = ranked_scores[start:end]
    return sum(values) / len(values)


def replacement_value(
    scores: Mapping[str, float],
    pool: frozenset[str],
    method: ReplacementMethod,
    smoothing_window: int = 5,
) -> float:
    """Replacement baseline for one group given its valuation pool."""
    if not pool:
        return max(scores.values(), default=0.0)
    last_drafted = min(scores[k] for k in pool)
    undrafted = [scores[k] for k in scores if k not in pool]

    match method:
        case ReplacementMethod.LAST_DRAFTED:
            return last_drafted
        case ReplacementMethod.FIRST_UNDRAFTED:
            return max(undrafted, default=last_drafted)
        case ReplacementMethod.BLENDED:
            ranked = sorted(scores.values(), reverse=True)
            return _smoothed_value(ranked, len(pool), smoothing_window)


def _thresholds(
    scores: Mapping[str, float],
    assignments: Mapping[str, str],
    slot_spots: Mapping[str, int],
) -> tuple[PositionThreshold, ...]:
    thresholds: list[PositionThreshold] = []
    for slot, spots in slot_spots.items():
        filled = [scores[k] for k, s in assignments.items() if s == slot and k in scores]
        thresholds.append(
            PositionThreshold(
                position=slot,
                roster_spots=spots,
                filled=len(filled),
                replacement_value=min(filled, default=0.0),
            )
        )
    return tuple(thresholds)


def rebase_replacement(
    replacement: GroupReplacement,
    scores: Mapping[str, float],
    method: ReplacementMethod = ReplacementMethod.LAST_DRAFTED,
    smoothing_window: int = 5,
) -> GroupReplacement:
    """Recompute the baseline for re-scored players, keeping the pool fixed."""
    spots = {t.position: t.roster_spots for t in replacement.thresholds}
    return GroupReplacement(
        group=replacement.group,
        pool_size=replacement.pool_size,
        assignments=replacement.assignments,
        replacement_value=replacement_value(scores, replacement.pool, method, smoothing_window),
        thresholds=_thresholds(scores, replacement.assignments, spots),
    )


def compute_group_replacement(
    group: PlayerGroup,
    scores: Mapping[str, float],
    positions: Mapping[str, tuple[str, ...]],
    league: LeagueSettings,
    allocation: RosterAllocation,
    method: ReplacementMethod = ReplacementMethod.LAST_DRAFTED,
    smoothing_window: int = 5,
) -> GroupReplacement:
    """Size the valuation pool for ``group`` and find its replacement level."""
    slot_spots = group_slot_spots(group, league, allocation)
    assignments = assign_positions(scores, positions, slot_spots, group)
    pool = frozenset(assignments)
    baseline = replacement_value(scores, pool, method, smoothing_window)

    logger.debug(
        "%s pool: %d of %d players across %d slots, replacement=%.3f (%s)",
        group.value,
        len(pool),
        len(scores),
        sum(slot_spots.values()),
        baseline,
        method.value,
    )
    return GroupReplacement(
        group=group,
        pool_size=len(pool),
        assignments=assignments,
        replacement_value=baseline,
        thresholds=_thresholds(scores, assignments, slot_spots),
    )
