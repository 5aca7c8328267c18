import logging
import statistics
from collections.abc import Collection, Mapping, Sequence
from dataclasses import dataclass, field

from fantasy_auction.domain.league_settings import (
    CategoryScoring,
    PointsScoring,
    ScoringFormat,
    ValuationMethod,
)
from fantasy_auction.domain.projection import PlayerGroup, PlayerProjection
from fantasy_auction.projections.merger import classify_player, key_projections, player_groups
from fantasy_auction.valuation.stats import (
    DEFAULT_HITTING_SGP,
    DEFAULT_PITCHING_SGP,
    RATE_STATS,
    Direction,
    canonical_stat,
    canonicalize,
    direction_for,
    rate_components,
    stat_value,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlayerScore:
    key: str
    group: PlayerGroup
    score: float
    category_scores: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class NormalizedScores:
    hitters: dict[str, PlayerScore] = field(default_factory=dict)
    pitchers: dict[str, PlayerScore] = field(default_factory=dict)

    def group(self, group: PlayerGroup) -> dict[str, PlayerScore]:
        return self.hitters if group is PlayerGroup.HITTERS else self.pitchers

    def totals(self) -> dict[str, float]:
        """Scalar score per player key; two-way players sum both groups."""
        result: dict[str, float] = {}
        for scores in (self.hitters, self.pitchers):
            for key, ps in scores.items():
                result[key] = result.get(key, 0.0) + ps.score
        return result


def compute_sgp_denominators(
    historical_standings: dict[str, list[float]],
    team_count: int,
) -> dict[str, float]:
    """Derive SGP denominators from past standings totals: (best - worst) / (teams - 1)."""
    if team_count < 2:
        raise ValueError("team_count must be at least 2 to compute SGP denominators")

    denominators: dict[str, float] = {}
    for cat, values in historical_standings.items():
        if not values:
            continue
        denominators[cat] = (max(values) - min(values)) / (team_count - 1)
    return denominators


def _resolve_categories(categories: Sequence[str]) -> list[tuple[str, str]]:
    """Pair each configured category label with its canonical code, dropping unknown ones."""
    resolved: list[tuple[str, str]] = []
    for label in categories:
        code = canonical_stat(label)
        if code is None:
            logger.warning("Ignoring unrecognized scoring category %r", label)
            continue
        resolved.append((label, code))
    return resolved


def _zscore(value: float, mean: float, std: float) -> float:
    if std == 0.0:
        return 0.0
    return (value - mean) / std


def _category_values(
    members: list[str],
    stats: dict[str, dict[str, float]],
    pool_members: list[str],
    code: str,
    method: ValuationMethod,
) -> dict[str, float]:
    """Per-player raw values for one category.

    Rate categories are weighted by volume: z-scores use the contribution
    ``num - den * pool_rate`` and SGP scores a player with no denominator at the
    pool rate, so a pitcher without innings is neutral rather than elite. When
    nobody in the pool has a denominator the plain rate is used.
    """
    if code not in RATE_STATS:
        return {k: stat_value(stats[k], code) for k in members}
    components = {k: rate_components(stats[k], code) for k in members}
    total_den = sum(components[k][1] for k in pool_members)
    if total_den <= 0.0:
        return {k: stat_value(stats[k], code) for k in members}
    pool_rate = sum(components[k][0] for k in pool_members) / total_den
    if method is ValuationMethod.SGP:
        return {k: num / den if den > 0.0 else pool_rate for k, (num, den) in components.items()}
    return {k: num - den * pool_rate for k, (num, den) in components.items()}


def _category_scores(
    members: list[str],
    stats: dict[str, dict[str, float]],
    pool: Collection[str] | None,
    categories: list[tuple[str, str]],
    group: PlayerGroup,
    method: ValuationMethod,
    denominators: Mapping[str, float],
) -> dict[str, PlayerScore]:
    pool_members = [k for k in members if pool is None or k in pool]

    per_category: dict[str, dict[str, float]] = {}
    for label, code in categories:
        values = _category_values(members, stats, pool_members, code, method)
        pool_values = [values[k] for k in pool_members]
        sign = -1.0 if direction_for(code, group) is Direction.LOWER else 1.0
        mean = statistics.mean(pool_values) if pool_values else 0.0

        if method is ValuationMethod.SGP:
            denom = denominators.get(code, 0.0)
            if denom == 0.0:
                logger.warning("No SGP denominator for %s category %s; scoring it as 0", group.value, code)
            per_category[label] = {
                k: sign * (v - mean) / denom if denom != 0.0 else 0.0 for k, v in values.items()
            }
        else:
            std = statistics.pstdev(pool_values) if len(pool_values) > 1 else 0.0
            per_category[label] = {k: sign * _zscore(v, mean, std) for k, v in values.items()}

    result: dict[str, PlayerScore] = {}
    for key in members:
        cat_scores = {label: per_category[label][key] for label, _ in categories}
        result[key] = PlayerScore(key=key, group=group, score=sum(cat_scores.values()), category_scores=cat_scores)
    return result


def _points_scores(
    members: list[str],
    stats: dict[str, dict[str, float]],
    weights: Mapping[str, float],
    group: PlayerGroup,
) -> dict[str, PlayerScore]:
    resolved = _resolve_categories(list(weights))
    result: dict[str, PlayerScore] = {}
    for key in members:
        cat_scores = {label: stat_value(stats[key], code) * weights[label] for label, code in resolved}
        result[key] = PlayerScore(key=key, group=group, score=sum(cat_scores.values()), category_scores=cat_scores)
    return result


def normalize(
    projections: Mapping[str, PlayerProjection] | Sequence[PlayerProjection],
    scoring_format: ScoringFormat,
    method: ValuationMethod = ValuationMethod.ZSCORE,
    *,
    pool: Mapping[PlayerGroup, Collection[str]] | None = None,
    sgp_denominators: Mapping[str, float] | None = None,
) -> NormalizedScores:
    """Convert raw stat lines into one comparable score per player and group.

    Category formats are scored against each group's valuation ``pool`` (the
    whole group when None): z-scores use the pool mean and population deviation,
    SGP divides the delta from the pool mean by a per-category denominator. Points formats sum
    ``stat * weight`` and ignore the pool. Never raises for data problems.
    """
    if not isinstance(projections, Mapping):
        projections = key_projections(list(projections))

    stats: dict[str, dict[str, float]] = {}
    unrecognized: set[str] = set()
    members: dict[PlayerGroup, list[str]] = {PlayerGroup.HITTERS: [], PlayerGroup.PITCHERS: []}
    for key, projection in projections.items():
        canonical, unknown = canonicalize(projection.stats)
        stats[key] = canonical
        unrecognized.update(unknown)
        for group in player_groups(classify_player(projection)):
            members[group].append(key)
    if unrecognized:
        logger.warning("Ignoring unrecognized stat keys: %s", ", ".join(sorted(unrecognized)))

    match scoring_format:
        case PointsScoring(hitting_points=hitting, pitching_points=pitching):
            return NormalizedScores(
                hitters=_points_scores(members[PlayerGroup.HITTERS], stats, hitting, PlayerGroup.HITTERS),
                pitchers=_points_scores(members[PlayerGroup.PITCHERS], stats, pitching, PlayerGroup.PITCHERS),
            )
        case CategoryScoring():
            return _normalize_categories(members, stats, scoring_format, method, pool, sgp_denominators)
        case _:
            raise TypeError(f"Unsupported scoring format: {scoring_format!r}")


def _normalize_categories(
    members: dict[PlayerGroup, list[str]],
    stats: dict[str, dict[str, float]],
    scoring_format: CategoryScoring,
    method: ValuationMethod,
    pool: Mapping[PlayerGroup, Collection[str]] | None,
    sgp_denominators: Mapping[str, float] | None,
) -> NormalizedScores:
    if method is ValuationMethod.POINTS:
        logger.warning("Points method requested for a category format; using z-scores")
        method = ValuationMethod.ZSCORE

    overrides = dict(sgp_denominators or {})
    return NormalizedScores(
        hitters=_category_scores(
            members[PlayerGroup.HITTERS],
            stats,
            None if pool is None else pool.get(PlayerGroup.HITTERS, ()),
            _resolve_categories(scoring_format.hitting_categories),
            PlayerGroup.HITTERS,
            method,
            {**DEFAULT_HITTING_SGP, **overrides},
        ),
        pitchers=_category_scores(
            members[PlayerGroup.PITCHERS],
            stats,
            None if pool is None else pool.get(PlayerGroup.PITCHERS, ()),
            _resolve_categories(scoring_format.pitching_categories),
            PlayerGroup.PITCHERS,
            method,
            {**DEFAULT_PITCHING_SGP, **overrides},
        ),
    )
