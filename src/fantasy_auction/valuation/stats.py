"""Recognized stat codes, input-key aliases and category definitions.

Projection stat maps are keyed by whatever the source used ("SO", "Home Run",
"hr"). Everything is mapped onto a closed set of canonical codes before
scoring; unrecognized keys are reported and ignored.
"""

from __future__ import annotations

from enum import StrEnum

from fantasy_auction.domain.projection import PlayerGroup


class Direction(StrEnum):
    HIGHER = "higher"
    LOWER = "lower"


HITTING_STATS: frozenset[str] = frozenset(
    {
        "G", "PA", "AB", "H", "1B", "2B", "3B", "HR", "R", "RBI", "BB", "IBB", "HBP", "K",
        "SF", "SH", "SB", "CS", "NSB", "TB", "XBH", "AVG", "OBP", "SLG", "OPS",
    }
)  # fmt: skip

PITCHING_STATS: frozenset[str] = frozenset(
    {
        "G", "GS", "IP", "W", "L", "SV", "HLD", "SVH", "BS", "QS", "CG", "SHO", "NH",
        "H", "ER", "HR", "BB", "HBP", "K", "ERA", "WHIP", "K/9", "BB/9", "K/BB",
    }
)  # fmt: skip

KNOWN_STATS: frozenset[str] = HITTING_STATS | PITCHING_STATS

# Lowercased input key -> canonical code. Canonical codes map to themselves.
STAT_ALIASES: dict[str, str] = {
    "so": "K",
    "strikeout": "K",
    "strikeouts": "K",
    "single": "1B",
    "singles": "1B",
    "double": "2B",
    "doubles": "2B",
    "triple": "3B",
    "triples": "3B",
    "home run": "HR",
    "home runs": "HR",
    "run": "R",
    "runs": "R",
    "hit": "H",
    "hits": "H",
    "hit allowed": "H",
    "hits allowed": "H",
    "walk": "BB",
    "walks": "BB",
    "walk allowed": "BB",
    "walks allowed": "BB",
    "hit by pitch": "HBP",
    "stolen base": "SB",
    "stolen bases": "SB",
    "caught stealing": "CS",
    "total bases": "TB",
    "inning pitched": "IP",
    "innings pitched": "IP",
    "win": "W",
    "wins": "W",
    "loss": "L",
    "losses": "L",
    "save": "SV",
    "saves": "SV",
    "hold": "HLD",
    "holds": "HLD",
    "blown save": "BS",
    "earned run": "ER",
    "earned runs": "ER",
    "quality start": "QS",
    "quality starts": "QS",
    "complete game": "CG",
    "shutout": "SHO",
    "no hitter": "NH",
    "k9": "K/9",
    "k_9": "K/9",
    "bb9": "BB/9",
    "bb_9": "BB/9",
    "kbb": "K/BB",
    "k_bb": "K/BB",
    "sv+hld": "SVH",
    "sv+h": "SVH",
}
STAT_ALIASES.update({code.lower(): code for code in KNOWN_STATS})

LOWER_IS_BETTER: dict[PlayerGroup, frozenset[str]] = {
    PlayerGroup.HITTERS: frozenset({"K", "CS"}),
    PlayerGroup.PITCHERS: frozenset({"ERA", "WHIP", "BB/9", "L", "BS", "ER", "H", "BB", "HR", "HBP"}),
}

# Stat delta worth one standings point in a typical 12-team 5x5 league.
DEFAULT_HITTING_SGP: dict[str, float] = {
    "R": 24.6,
    "HR": 9.4,
    "RBI": 24.6,
    "SB": 8.3,
    "NSB": 6.5,
    "H": 26.0,
    "TB": 38.0,
    "BB": 14.0,
    "K": 28.0,
    "AVG": 0.0019,
    "OBP": 0.0021,
    "SLG": 0.0040,
    "OPS": 0.0055,
}

DEFAULT_PITCHING_SGP: dict[str, float] = {
    "W": 3.0,
    "SV": 7.5,
    "HLD": 6.0,
    "SVH": 8.0,
    "K": 32.0,
    "QS": 3.0,
    "IP": 40.0,
    "ERA": 0.075,
    "WHIP": 0.0133,
    "K/9": 0.15,
    "BB/9": 0.10,
    "K/BB": 0.08,
    "L": 3.0,
}


def canonical_stat(key: str) -> str | None:
    return STAT_ALIASES.get(" ".join(key.strip().lower().split()))


def canonicalize(stats: dict[str, float]) -> tuple[dict[str, float], list[str]]:
    """Map raw stat keys onto canonical codes.

    Returns ``(canonical_stats, unrecognized_keys)``. When two raw keys map to
    the same code the first one wins.
    """
    canonical: dict[str, float] = {}
    unknown: list[str] = []
    for key, value in stats.items():
        code = canonical_stat(key)
        if code is None:
            unknown.append(key)
            continue
        canonical.setdefault(code, float(value))
    return canonical, unknown


def direction_for(code: str, group: PlayerGroup) -> Direction:
    return Direction.LOWER if code in LOWER_IS_BETTER[group] else Direction.HIGHER


def _ratio(numerator: float, denominator: float, scale: float = 1.0) -> float:
    if denominator == 0.0:
        return 0.0
    return numerator / denominator * scale


def _singles(stats: dict[str, float]) -> float:
    if "1B" in stats:
        return stats["1B"]
    return stats.get("H", 0.0) - stats.get("2B", 0.0) - stats.get("3B", 0.0) - stats.get("HR", 0.0)


def _total_bases(stats: dict[str, float]) -> float:
    if "TB" in stats:
        return stats["TB"]
    return _singles(stats) + 2 * stats.get("2B", 0.0) + 3 * stats.get("3B", 0.0) + 4 * stats.get("HR", 0.0)


def _plate_appearances(stats: dict[str, float]) -> float:
    if "PA" in stats:
        return stats["PA"]
    return stats.get("AB", 0.0) + stats.get("BB", 0.0) + stats.get("HBP", 0.0) + stats.get("SF", 0.0)


def _obp(stats: dict[str, float]) -> float:
    if "OBP" in stats:
        return stats["OBP"]
    return _ratio(stats.get("H", 0.0) + stats.get("BB", 0.0) + stats.get("HBP", 0.0), _plate_appearances(stats))


def _slg(stats: dict[str, float]) -> float:
    if "SLG" in stats:
        return stats["SLG"]
    return _ratio(_total_bases(stats), stats.get("AB", 0.0))


def stat_value(stats: dict[str, float], code: str) -> float:
    """Value of ``code`` in canonical ``stats``, deriving rates when not materialized.

    Missing components contribute 0.
    """
    if code in stats:
        return stats[code]
    match code:
        case "AVG":
            return _ratio(stats.get("H", 0.0), stats.get("AB", 0.0))
        case "OBP":
            return _obp(stats)
        case "SLG":
            return _slg(stats)
        case "OPS":
            return _obp(stats) + _slg(stats)
        case "1B":
            return _singles(stats)
        case "TB":
            return _total_bases(stats)
        case "XBH":
            return stats.get("2B", 0.0) + stats.get("3B", 0.0) + stats.get("HR", 0.0)
        case "NSB":
            return stats.get("SB", 0.0) - stats.get("CS", 0.0)
        case "SVH":
            return stats.get("SV", 0.0) + stats.get("HLD", 0.0)
        case "ERA":
            return _ratio(stats.get("ER", 0.0), stats.get("IP", 0.0), 9.0)
        case "WHIP":
            return _ratio(stats.get("H", 0.0) + stats.get("BB", 0.0), stats.get("IP", 0.0))
        case "K/9":
            return _ratio(stats.get("K", 0.0), stats.get("IP", 0.0), 9.0)
        case "BB/9":
            return _ratio(stats.get("BB", 0.0), stats.get("IP", 0.0), 9.0)
        case "K/BB":
            return _ratio(stats.get("K", 0.0), stats.get("BB", 0.0))
        case _:
            return 0.0


# Rate categories scored by volume-weighted contribution rather than by the raw rate.
RATE_STATS: frozenset[str] = frozenset({"AVG", "OBP", "SLG", "ERA", "WHIP", "K/9", "BB/9", "K/BB"})


def rate_components(stats: dict[str, float], code: str) -> tuple[float, float]:
    """Return (numerator, denominator) for a rate category, scale included.

    ERA is ``(9 * ER, IP)``, WHIP ``(H + BB, IP)`` and so on. A rate given
    directly in ``stats`` is turned back into a numerator against its
    denominator, so a missing denominator yields ``(0, 0)``.
    """
    match code:
        case "AVG":
            num, den = stats.get("H", 0.0), stats.get("AB", 0.0)
        case "OBP":
            num = stats.get("H", 0.0) + stats.get("BB", 0.0) + stats.get("HBP", 0.0)
            den = _plate_appearances(stats)
        case "SLG":
            num, den = _total_bases(stats), stats.get("AB", 0.0)
        case "ERA":
            num, den = 9.0 * stats.get("ER", 0.0), stats.get("IP", 0.0)
        case "WHIP":
            num, den = stats.get("H", 0.0) + stats.get("BB", 0.0), stats.get("IP", 0.0)
        case "K/9":
            num, den = 9.0 * stats.get("K", 0.0), stats.get("IP", 0.0)
        case "BB/9":
            num, den = 9.0 * stats.get("BB", 0.0), stats.get("IP", 0.0)
        case "K/BB":
            num, den = stats.get("K", 0.0), stats.get("BB", 0.0)
        case _:
            raise ValueError(f"{code} is not a rate category")
    if code in stats:
        num = stats[code] * den
    return num, den
