from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar, cast

from config import ConfigurationSet, config_from_dict, config_from_env, config_from_yaml

from fantasy_auction.domain.league_settings import (
    BudgetSplit,
    CategoryScoring,
    InflationMethod,
    LeagueSettings,
    PointsScoring,
    ReplacementMethod,
    RosterAllocation,
    ScoringFormat,
    ScoringType,
    SplitMethod,
    SplitPreset,
    ValuationMethod,
    ValueCalculationSettings,
)
from fantasy_auction.domain.projection import PlayerGroup
from fantasy_auction.exceptions import ConfigurationError
from fantasy_auction.valuation import engine

if TYPE_CHECKING:
    from collections.abc import Iterable


DEFAULT_POSITION_REQUIREMENTS: dict[str, int] = {
    "C": 2,
    "1B": 1,
    "2B": 1,
    "3B": 1,
    "SS": 1,
    "OF": 5,
    "MI": 1,
    "CI": 1,
    "UTIL": 1,
    "SP": 5,
    "RP": 2,
    "P": 2,
}

# ESPN standard points.
DEFAULT_HITTING_POINTS: dict[str, float] = {
    "Single": 1,
    "Double": 2,
    "Triple": 3,
    "Home Run": 5,
    "Run": 1,
    "RBI": 1,
    "Walk": 1,
    "Stolen Base": 1,
    "Caught Stealing": -1,
    "Hit By Pitch": 1,
}

DEFAULT_PITCHING_POINTS: dict[str, float] = {
    "Inning Pitched": 3,
    "Win": 5,
    "Loss": -5,
    "Save": 5,
    "Blown Save": -3,
    "Earned Run": -2,
    "Hit Allowed": -1,
    "Walk Allowed": -1,
    "Strikeout": 1,
    "Quality Start": 3,
}

# Mapping-valued settings (position requirements, points tables) are not part of
# the layered defaults: a mapping from any layer replaces the default outright.
_DEFAULTS: dict[str, object] = {
    "league": {
        "name": "default",
        "team_count": 12,
        "auction_budget": 260,
        "total_roster_spots": 23,
    },
    "scoring": {
        "type": "roto",
        "hitting_categories": ["R", "HR", "RBI", "SB", "AVG"],
        "pitching_categories": ["W", "SV", "K", "ERA", "WHIP"],
    },
    "valuation": {
        "method": "zscore",
        "split_method": "calculated",
        "split_preset": "balanced",
        "hitter_percent": 65,
        "replacement_method": "last_drafted",
        "bench_hitter_share": 0.5,
        "apply_position_scarcity": False,
        "min_bid": 1,
        "smoothing_window": 5,
        "inflation_method": "drafted_spend",
    },
    "store": {
        "db_path": "~/.config/auction/auction.db",
    },
}


def create_config(
    yaml_path: str = "auction.yaml",
    env_prefix: str = "AUCTION",
    defaults: dict[str, object] | None = None,
    *,
    overrides: dict[str, object] | None = None,
) -> ConfigurationSet:
    """Create a layered configuration.

    Priority (highest to lowest): explicit overrides > env vars > YAML file > defaults dict.
    Environment variables use ``__`` between levels, e.g. ``AUCTION__LEAGUE__TEAM_COUNT``.
    """
    if defaults is None:
        defaults = _DEFAULTS

    layers = [
        config_from_env(env_prefix, separator="__", lowercase_keys=True),
        config_from_yaml(yaml_path, read_from_file=True, ignore_missing_paths=True),
        config_from_dict(defaults),
    ]
    if overrides:
        layers.insert(0, config_from_dict(overrides))
    return ConfigurationSet(*layers)


# -- Parsing -----------------------------------------------------------------


def _section(cfg: ConfigurationSet, key: str) -> dict[str, Any]:
    try:
        value = cfg[key]
    except (KeyError, AttributeError):
        return {}
    if hasattr(value, "as_dict"):
        return cast("dict[str, Any]", value.as_dict())
    if isinstance(value, Mapping):
        return dict(value)
    raise ConfigurationError(f"'{key}' must be a mapping, got {value!r}", field=key)


def _int(cfg: ConfigurationSet, key: str) -> int:
    raw = cfg[key]
    try:
        return int(str(raw))
    except ValueError:
        raise ConfigurationError(f"'{key}' must be an integer, got {raw!r}", field=key) from None


def _float(cfg: ConfigurationSet, key: str) -> float:
    raw = cfg[key]
    try:
        return float(str(raw))
    except ValueError:
        raise ConfigurationError(f"'{key}' must be a number, got {raw!r}", field=key) from None


def _bool(cfg: ConfigurationSet, key: str) -> bool:
    raw = cfg[key]
    if isinstance(raw, bool):
        return raw
    text = str(raw).strip().lower()
    if text in ("1", "true", "yes", "on"):
        return True
    if text in ("0", "false", "no", "off", ""):
        return False
    raise ConfigurationError(f"'{key}' must be a boolean, got {raw!r}", field=key)


E = TypeVar("E")


def _enum(enum_type: type[E], cfg: ConfigurationSet, key: str) -> E:
    raw = str(cfg[key])
    try:
        return enum_type(raw.lower())  # type: ignore[call-arg]
    except ValueError:
        raise ConfigurationError(f"'{key}' has invalid value '{raw}'", field=key) from None


def _number_map(raw: Mapping[str, Any], key: str, *, upper: bool = False) -> dict[str, float]:
    result: dict[str, float] = {}
    for name, value in raw.items():
        try:
            result[name.upper() if upper else name] = float(value)
        except (TypeError, ValueError):
            raise ConfigurationError(f"'{key}.{name}' must be a number, got {value!r}", field=key) from None
    return result


def _string_list(cfg: ConfigurationSet, key: str) -> tuple[str, ...]:
    raw = cfg[key]
    if isinstance(raw, str):
        return tuple(s.strip() for s in raw.split(",") if s.strip())
    return tuple(str(s) for s in cast("Iterable[object]", raw))


def parse_position_requirements(raw: Mapping[str, Any]) -> dict[str, int]:
    requirements: dict[str, int] = {}
    for position, count in raw.items():
        try:
            value = int(str(count))
        except ValueError:
            raise ConfigurationError(
                f"Position requirement '{position}' must be an integer, got {count!r}",
                field="league.position_requirements",
            ) from None
        if value < 0:
            raise ConfigurationError(
                f"Position requirement '{position}' must be >= 0, got {value}",
                field="league.position_requirements",
            )
        requirements[position.upper()] = value
    return requirements


def validate_league(settings: LeagueSettings) -> list[str]:
    """Raise ConfigurationError for an unusable league; return (and log) softer warnings."""
    engine.validate_league(settings)
    warnings: list[str] = []
    required = sum(settings.position_requirements.values())
    if settings.position_requirements and required != settings.total_roster_spots:
        warnings.append(
            f"position requirements sum to {required} but total_roster_spots is {settings.total_roster_spots}"
        )
    return warnings


def load_league_settings(cfg: ConfigurationSet | None = None) -> LeagueSettings:
    if cfg is None:
        cfg = create_config()
    settings = LeagueSettings(
        name=str(cfg.get("league.name", "default")),
        team_count=_int(cfg, "league.team_count"),
        auction_budget=_float(cfg, "league.auction_budget"),
        total_roster_spots=_int(cfg, "league.total_roster_spots"),
        position_requirements=parse_position_requirements(
            _section(cfg, "league.position_requirements") or DEFAULT_POSITION_REQUIREMENTS
        ),
    )
    validate_league(settings)
    return settings


def load_scoring_format(cfg: ConfigurationSet | None = None) -> ScoringFormat:
    if cfg is None:
        cfg = create_config()
    scoring_type = _enum(ScoringType, cfg, "scoring.type")
    if scoring_type is ScoringType.H2H_POINTS:
        return PointsScoring(
            hitting_points=_number_map(
                _section(cfg, "scoring.hitting_points") or DEFAULT_HITTING_POINTS, "scoring.hitting_points"
            ),
            pitching_points=_number_map(
                _section(cfg, "scoring.pitching_points") or DEFAULT_PITCHING_POINTS, "scoring.pitching_points"
            ),
        )
    return CategoryScoring(
        hitting_categories=_string_list(cfg, "scoring.hitting_categories"),
        pitching_categories=_string_list(cfg, "scoring.pitching_categories"),
        type=scoring_type,
    )


def _budget_split(cfg: ConfigurationSet) -> BudgetSplit:
    method = _enum(SplitMethod, cfg, "valuation.split_method")
    hitter_percent = _float(cfg, "valuation.hitter_percent")
    if method is SplitMethod.MANUAL and not 0.0 <= hitter_percent <= 100.0:
        raise ConfigurationError(
            f"'valuation.hitter_percent' must be between 0 and 100, got {hitter_percent:g}",
            field="valuation.hitter_percent",
        )
    return BudgetSplit(
        method=method,
        hitter_percent=hitter_percent,
        preset=_enum(SplitPreset, cfg, "valuation.split_preset"),
    )


def _roster_allocation(cfg: ConfigurationSet) -> RosterAllocation:
    share = _float(cfg, "valuation.bench_hitter_share")
    if not 0.0 <= share <= 1.0:
        raise ConfigurationError(
            f"'valuation.bench_hitter_share' must be between 0 and 1, got {share:g}",
            field="valuation.bench_hitter_share",
        )
    allocation = RosterAllocation()
    weights = dict(allocation.flex_weights)
    weights["BENCH"] = {PlayerGroup.HITTERS: share, PlayerGroup.PITCHERS: 1.0 - share}
    return RosterAllocation(flex_weights=weights)


def load_value_settings(cfg: ConfigurationSet | None = None) -> ValueCalculationSettings:
    if cfg is None:
        cfg = create_config()
    min_bid = _float(cfg, "valuation.min_bid")
    if min_bid < 0:
        raise ConfigurationError(f"'valuation.min_bid' must be >= 0, got {min_bid:g}", field="valuation.min_bid")
    return ValueCalculationSettings(
        method=_enum(ValuationMethod, cfg, "valuation.method"),
        budget_split=_budget_split(cfg),
        replacement_method=_enum(ReplacementMethod, cfg, "valuation.replacement_method"),
        roster_allocation=_roster_allocation(cfg),
        apply_position_scarcity=_bool(cfg, "valuation.apply_position_scarcity"),
        position_scarcity_weights=_number_map(
            _section(cfg, "valuation.position_scarcity_weights"), "valuation.position_scarcity_weights", upper=True
        ),
        sgp_denominators=_number_map(
            _section(cfg, "valuation.sgp_denominators"), "valuation.sgp_denominators", upper=True
        ),
        min_bid=min_bid,
        smoothing_window=_int(cfg, "valuation.smoothing_window"),
        inflation_method=_enum(InflationMethod, cfg, "valuation.inflation_method"),
    )


def store_path(cfg: ConfigurationSet | None = None) -> Path:
    if cfg is None:
        cfg = create_config()
    return Path(str(cfg["store.db_path"])).expanduser()
