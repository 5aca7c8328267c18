from collections.abc import Sequence

from fantasy_auction.domain.draft import DraftMetrics, DraftState, PositionNeed, TeamNeeds
from fantasy_auction.domain.league_settings import LeagueSettings
from fantasy_auction.domain.projection import PITCHER_POSITIONS
from fantasy_auction.domain.valuation import PlayerValue
from fantasy_auction.draft.inflation import inflation_direction

NEED_POSITIONS = ("C", "1B", "2B", "3B", "SS", "OF", "MI", "CI", "UTIL", "SP", "RP", "P", "BENCH")
FLEX_POSITIONS = ("MI", "CI", "UTIL", "P", "BENCH")

_OUTFIELD = frozenset({"OF", "LF", "CF", "RF"})


def draft_metrics(league: LeagueSettings, state: DraftState, values: Sequence[PlayerValue]) -> DraftMetrics:
    total_budget = league.total_budget
    budget_remaining = total_budget - state.total_budget_spent
    players_left = max(0, league.team_count * league.total_roster_spots - state.total_players_drafted)
    undrafted = [v for v in values if not v.is_drafted]
    return DraftMetrics(
        total_budget=total_budget,
        budget_spent=state.total_budget_spent,
        budget_remaining=budget_remaining,
        players_left_to_draft=players_left,
        average_cost_per_player=budget_remaining / players_left if players_left > 0 else 0.0,
        average_adjusted_value=sum(v.adjusted_value for v in undrafted) / len(undrafted) if undrafted else 0.0,
        inflation_rate=state.current_inflation_rate,
        inflation_direction=inflation_direction(state.current_inflation_rate),
    )


def _flex_slots(positions: set[str]) -> list[str]:
    slots: list[str] = []
    if positions & {"2B", "SS"}:
        slots.append("MI")
    if positions & {"1B", "3B"}:
        slots.append("CI")
    if not positions & PITCHER_POSITIONS:
        slots.append("UTIL")
    if positions & {"SP", "RP"}:
        slots.append("P")
    slots.append("BENCH")
    return slots


def positional_needs(
    league: LeagueSettings,
    team: str,
    drafted: Sequence[PlayerValue],
) -> TeamNeeds:
    """Fill ``team``'s roster slots with its drafted players and report what is left.

    Players with the fewest eligible positions are placed first. Each goes to the
    primary position with the most open spots, falling back to flex slots and
    finally the bench.
    """
    required: dict[str, int] = {}
    for position, count in league.position_requirements.items():
        code = "BENCH" if position.upper() == "BN" else position.upper()
        required[code] = required.get(code, 0) + count
    filled: dict[str, int] = {p: 0 for p in required}

    roster = [v for v in drafted if v.is_drafted and v.drafted_by == team]
    for value in sorted(roster, key=lambda v: len(v.positions)):
        positions = {p.upper() for p in value.positions}
        if positions & _OUTFIELD:
            positions.add("OF")
        primary = sorted(
            (p for p in positions if p in required and p not in FLEX_POSITIONS),
            key=lambda p: -(required[p] - filled[p]),
        )
        for slot in (*primary, *_flex_slots(positions)):
            if filled.get(slot, 0) < required.get(slot, 0):
                filled[slot] += 1
                break

    ordered = [p for p in NEED_POSITIONS if p in required] + sorted(p for p in required if p not in NEED_POSITIONS)
    needs = tuple(
        PositionNeed(
            position=p,
            required=required[p],
            filled=filled[p],
            remaining=max(0, required[p] - filled[p]),
        )
        for p in ordered
        if required[p] > 0
    )
    spent = sum(v.draft_price or 0.0 for v in roster)
    return TeamNeeds(
        team=team,
        budget_remaining=league.auction_budget - spent,
        players_drafted=len(roster),
        needs=needs,
    )
