"""Inflation rate formulas and repricing of undrafted players.

An inflation rate is a fraction: +0.25 means players are going for 25% more
than the model expected, -0.10 means 10% less. Every formula is guarded to 0
when its baseline is empty.
"""

from collections.abc import Iterable

from fantasy_auction.domain.league_settings import InflationMethod
from fantasy_auction.domain.valuation import PlayerValue


def drafted_spend_rate(budget_spent: float, drafted_original_value: float) -> float:
    """Spending on drafted players relative to what the model said they were worth."""
    if drafted_original_value <= 0.0:
        return 0.0
    return (budget_spent - drafted_original_value) / drafted_original_value


def remaining_budget_rate(budget_remaining: float, undrafted_original_value: float) -> float:
    """Money left in the room relative to the value left on the board."""
    if undrafted_original_value <= 0.0 or budget_remaining <= 0.0:
        return 0.0
    return budget_remaining / undrafted_original_value - 1.0


def inflation_rate(
    method: InflationMethod,
    values: Iterable[PlayerValue],
    budget_spent: float,
    total_budget: float,
) -> float:
    drafted_value = 0.0
    undrafted_value = 0.0
    for value in values:
        if value.is_drafted:
            drafted_value += value.original_value
        else:
            undrafted_value += value.original_value

    match method:
        case InflationMethod.DRAFTED_SPEND:
            return drafted_spend_rate(budget_spent, drafted_value)
        case InflationMethod.REMAINING_BUDGET:
            return remaining_budget_rate(total_budget - budget_spent, undrafted_value)


def inflate(original_value: float, rate: float) -> float:
    """Adjusted dollar value, never below 0."""
    return max(0.0, round(original_value * (1.0 + rate), 2))


def inflation_direction(rate: float) -> str:
    if rate > 0.0:
        return "inflation"
    if rate < 0.0:
        return "deflation"
    return "neutral"
