import logging
from collections.abc import Sequence

from fantasy_auction.domain.league_settings import (
    LeagueSettings,
    PointsScoring,
    ScoringFormat,
    ValueCalculationSettings,
)
from fantasy_auction.domain.projection import PlayerGroup, PlayerProjection
from fantasy_auction.projections.merger import key_projections
from fantasy_auction.valuation.engine import Valuation, compute_valuation
from fantasy_auction.valuation.normalizer import normalize
from fantasy_auction.valuation.replacement import (
    GroupReplacement,
    compute_group_replacement,
    rebase_replacement,
)

logger = logging.getLogger(__name__)


def calculate_player_values(
    merged: Sequence[PlayerProjection],
    scoring_format: ScoringFormat,
    settings: ValueCalculationSettings,
    league: LeagueSettings,
) -> Valuation:
    """Value merged projections end to end.

    Players are first scored against their whole group to rank them and pick
    the valuation pool. Category formats are then re-scored against pool
    members only, so fringe players do not drag the means and deviations.
    """
    projections = key_projections(list(merged))
    positions = {k: tuple(p.upper() for p in proj.positions) for k, proj in projections.items()}

    first_pass = normalize(
        projections,
        scoring_format,
        settings.method,
        sgp_denominators=settings.sgp_denominators,
    )
    replacements: dict[PlayerGroup, GroupReplacement] = {}
    for group in PlayerGroup:
        replacements[group] = compute_group_replacement(
            group,
            {k: ps.score for k, ps in first_pass.group(group).items()},
            positions,
            league,
            settings.roster_allocation,
            settings.replacement_method,
            settings.smoothing_window,
        )

    if isinstance(scoring_format, PointsScoring):
        return compute_valuation(first_pass, projections, settings, league, replacements=replacements)

    scores = normalize(
        projections,
        scoring_format,
        settings.method,
        pool={g: r.pool for g, r in replacements.items()},
        sgp_denominators=settings.sgp_denominators,
    )
    rebased = {
        group: rebase_replacement(
            replacement,
            {k: ps.score for k, ps in scores.group(group).items()},
            settings.replacement_method,
            settings.smoothing_window,
        )
        for group, replacement in replacements.items()
    }
    logger.debug(
        "Re-scored against pools of %d hitters and %d pitchers",
        rebased[PlayerGroup.HITTERS].pool_size,
        rebased[PlayerGroup.PITCHERS].pool_size,
    )
    return compute_valuation(scores, projections, settings, league, replacements=rebased)
