import dataclasses
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from fantasy_auction.domain.league_settings import LeagueSettings, ValueCalculationSettings
from fantasy_auction.domain.projection import PlayerGroup, PlayerProjection
from fantasy_auction.domain.valuation import PlayerValue, ValueTier
from fantasy_auction.exceptions import ConfigurationError
from fantasy_auction.projections.merger import classify_player
from fantasy_auction.valuation.normalizer import NormalizedScores
from fantasy_auction.valuation.replacement import GroupReplacement, compute_group_replacement

logger = logging.getLogger(__name__)

TIER_SIZE = 20

# Upper bound (exclusive) of each tier, as a fraction of the positively valued players.
_VALUE_TIER_CUTOFFS: tuple[tuple[float, ValueTier], ...] = (
    (0.05, ValueTier.ELITE),
    (0.20, ValueTier.STAR),
    (0.60, ValueTier.STARTER),
)


@dataclass(frozen=True)
class Valuation:
    values: list[PlayerValue]
    dollar_pool: float
    group_budgets: dict[PlayerGroup, float] = field(default_factory=dict)
    replacements: dict[PlayerGroup, GroupReplacement] = field(default_factory=dict)


def validate_league(league: LeagueSettings) -> None:
    """Raise ConfigurationError for settings that leave the dollar pool undefined.

    A position-requirement total that differs from ``total_roster_spots`` is
    only logged.
    """
    if league.team_count <= 0:
        raise ConfigurationError(f"team_count must be > 0, got {league.team_count}", field="team_count")
    if league.auction_budget <= 0:
        raise ConfigurationError(f"auction_budget must be > 0, got {league.auction_budget}", field="auction_budget")
    if league.total_roster_spots <= 0:
        raise ConfigurationError(
            f"total_roster_spots must be > 0, got {league.total_roster_spots}", field="total_roster_spots"
        )
    required = sum(league.position_requirements.values())
    if league.position_requirements and required != league.total_roster_spots:
        logger.warning(
            "League '%s': position requirements sum to %d but total_roster_spots is %d",
            league.name,
            required,
            league.total_roster_spots,
        )


def total_dollar_pool(league: LeagueSettings, min_bid: float = 1.0) -> float:
    """League budget less a minimum bid reserved for every roster spot."""
    validate_league(league)
    pool = league.team_count * league.auction_budget - league.team_count * league.total_roster_spots * min_bid
    if pool <= 0:
        raise ConfigurationError(
            f"auction_budget {league.auction_budget} cannot cover {league.total_roster_spots} "
            f"roster spots at ${min_bid:g} each",
            field="auction_budget",
        )
    return pool


def split_budget(
    dollar_pool: float,
    positive_var: Mapping[PlayerGroup, float],
    hitter_fraction: float | None = None,
) -> dict[PlayerGroup, float]:
    """Divide the pool between hitters and pitchers.

    Follows ``hitter_fraction`` when given, otherwise each group's share of the
    total positive VAR. A group with no positive VAR cannot absorb dollars, so
    its share moves to the other group.
    """
    hitter_var = positive_var.get(PlayerGroup.HITTERS, 0.0)
    pitcher_var = positive_var.get(PlayerGroup.PITCHERS, 0.0)
    total_var = hitter_var + pitcher_var

    if hitter_fraction is None:
        hitter_fraction = hitter_var / total_var if total_var > 0 else 0.5

    if hitter_var <= 0 < pitcher_var:
        if hitter_fraction > 0:
            logger.warning("No hitter has positive VAR; moving the hitter budget to pitchers")
        hitter_fraction = 0.0
    elif pitcher_var <= 0 < hitter_var:
        if hitter_fraction < 1:
            logger.warning("No pitcher has positive VAR; moving the pitcher budget to hitters")
        hitter_fraction = 1.0
    elif total_var <= 0:
        logger.warning("No player has positive value above replacement; nothing to price")

    return {
        PlayerGroup.HITTERS: dollar_pool * hitter_fraction,
        PlayerGroup.PITCHERS: dollar_pool * (1.0 - hitter_fraction),
    }


def var_to_dollars(
    var_values: Mapping[str, float],
    budget: float,
    min_bid: float = 1.0,
) -> dict[str, float]:
    """Convert VAR to auction dollars summing to ``budget``.

    Every positive-VAR player gets ``min_bid`` plus a VAR-proportional share of
    what is left; everyone else gets 0.
    """
    positive = {k: v for k, v in var_values.items() if v > 0.0}
    sum_positive = sum(positive.values())
    if sum_positive <= 0.0 or budget <= 0.0:
        return {k: 0.0 for k in var_values}

    surplus = budget - len(positive) * min_bid
    if surplus < 0.0:
        logger.warning(
            "Budget $%.2f cannot cover a $%g floor for %d players; pricing without the floor",
            budget,
            min_bid,
            len(positive),
        )
        return {k: (v / sum_positive) * budget if v > 0.0 else 0.0 for k, v in var_values.items()}

    return {k: min_bid + (v / sum_positive) * surplus if v > 0.0 else 0.0 for k, v in var_values.items()}


def _group_var(
    scores: Mapping[str, float],
    replacement: GroupReplacement,
    settings: ValueCalculationSettings,
) -> dict[str, float]:
    result: dict[str, float] = {}
    for key, score in scores.items():
        slot = replacement.assignments.get(key)
        if slot is None:
            result[key] = 0.0
            continue
        var = max(0.0, score - replacement.replacement_value)
        if settings.apply_position_scarcity:
            var *= settings.position_scarcity_weights.get(slot, 1.0)
        result[key] = var
    return result


def _value_tier(index: int, positive_count: int) -> ValueTier:
    fraction = index / positive_count
    for cutoff, tier in _VALUE_TIER_CUTOFFS:
        if fraction < cutoff:
            return tier
    return ValueTier.BENCH


def rank_values(values: list[PlayerValue]) -> list[PlayerValue]:
    """Order by value (ties broken by name) and fill rank, tiers and position ranks."""
    ordered = sorted(values, key=lambda v: (-v.original_value, v.name, v.key))
    positive_count = sum(1 for v in ordered if v.original_value > 0)
    position_counts: dict[str, int] = {}

    ranked: list[PlayerValue] = []
    for i, value in enumerate(ordered):
        position_rank: dict[str, int] = {}
        for position in value.positions:
            code = position.upper()
            position_counts[code] = position_counts.get(code, 0) + 1
            position_rank[code] = position_counts[code]
        ranked.append(
            dataclasses.replace(
                value,
                rank=i + 1,
                tier=i // TIER_SIZE + 1,
                value_tier=_value_tier(i, positive_count) if value.original_value > 0 else ValueTier.REPLACEMENT,
                position_rank=position_rank,
            )
        )
    return ranked


def compute_valuation(
    scores: NormalizedScores,
    projections: Mapping[str, PlayerProjection],
    settings: ValueCalculationSettings,
    league: LeagueSettings,
    *,
    replacements: Mapping[PlayerGroup, GroupReplacement] | None = None,
) -> Valuation:
    """Turn normalized scores into baseline dollar values.

    Positive ``original_value``s sum to the draftable dollar pool, up to cent
    rounding. Players outside the valuation pool or at/below replacement get 0.
    """
    dollar_pool = total_dollar_pool(league, settings.min_bid)
    positions = {k: tuple(p.upper() for p in proj.positions) for k, proj in projections.items()}

    group_replacements: dict[PlayerGroup, GroupReplacement] = {}
    group_var: dict[PlayerGroup, dict[str, float]] = {}
    for group in PlayerGroup:
        group_scores = {k: ps.score for k, ps in scores.group(group).items()}
        if replacements is not None and group in replacements:
            replacement = replacements[group]
        else:
            replacement = compute_group_replacement(
                group,
                group_scores,
                positions,
                league,
                settings.roster_allocation,
                settings.replacement_method,
                settings.smoothing_window,
            )
        group_replacements[group] = replacement
        group_var[group] = _group_var(group_scores, replacement, settings)

    budgets = split_budget(
        dollar_pool,
        {g: sum(v for v in var.values() if v > 0) for g, var in group_var.items()},
        settings.budget_split.hitter_fraction(),
    )
    group_dollars = {g: var_to_dollars(group_var[g], budgets[g], settings.min_bid) for g in PlayerGroup}
    totals = scores.totals()

    values: list[PlayerValue] = []
    for key, projection in projections.items():
        dollars = sum(group_dollars[g].get(key, 0.0) for g in PlayerGroup)
        var = sum(group_var[g].get(key, 0.0) for g in PlayerGroup)
        by_dollars = sorted(PlayerGroup, key=lambda g: -group_dollars[g].get(key, 0.0))
        assigned = next(
            (group_replacements[g].assignments[key] for g in by_dollars if key in group_replacements[g].assignments),
            None,
        )
        original = round(dollars, 2)
        values.append(
            PlayerValue(
                key=key,
                projection=projection,
                player_type=classify_player(projection),
                original_value=original,
                adjusted_value=original,
                score=totals.get(key, 0.0),
                var=var,
                assigned_position=assigned,
                is_draftable=assigned is not None,
            )
        )

    ranked = rank_values(values)
    logger.info(
        "Valued %d players: $%.2f pool (hitters $%.2f, pitchers $%.2f)",
        len(ranked),
        dollar_pool,
        budgets[PlayerGroup.HITTERS],
        budgets[PlayerGroup.PITCHERS],
    )
    return Valuation(values=ranked, dollar_pool=dollar_pool, group_budgets=budgets, replacements=group_replacements)


def compute_values(
    scores: NormalizedScores,
    projections: Mapping[str, PlayerProjection],
    settings: ValueCalculationSettings,
    league: LeagueSettings,
) -> list[PlayerValue]:
    return compute_valuation(scores, projections, settings, league).values
