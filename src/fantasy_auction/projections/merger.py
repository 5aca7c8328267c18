import dataclasses
import logging
from collections.abc import Iterable

from fantasy_auction.domain.merge import ConflictKind, MatchConfidence, MergeConflict, MergeResult
from fantasy_auction.domain.projection import (
    HITTER_POSITIONS,
    PITCHER_POSITIONS,
    PlayerGroup,
    PlayerProjection,
    PlayerType,
)
from fantasy_auction.identity.resolver import resolve_identity

logger = logging.getLogger(__name__)


def is_hitter(positions: Iterable[str]) -> bool:
    return any(p.upper() in HITTER_POSITIONS for p in positions)


def is_pitcher(positions: Iterable[str]) -> bool:
    return any(p.upper() in PITCHER_POSITIONS for p in positions)


def classify_player(projection: PlayerProjection) -> PlayerType:
    hitter = is_hitter(projection.positions)
    pitcher = is_pitcher(projection.positions)
    if hitter and pitcher:
        return PlayerType.TWO_WAY
    if hitter:
        return PlayerType.HITTER
    if pitcher:
        return PlayerType.PITCHER
    return PlayerType.UNKNOWN


def player_groups(player_type: PlayerType) -> tuple[PlayerGroup, ...]:
    """Valuation groups a player of this type belongs to."""
    if player_type is PlayerType.TWO_WAY:
        return (PlayerGroup.HITTERS, PlayerGroup.PITCHERS)
    if player_type is PlayerType.PITCHER:
        return (PlayerGroup.PITCHERS,)
    if player_type is PlayerType.HITTER:
        return (PlayerGroup.HITTERS,)
    return ()


def merge_positions(first: Iterable[str], second: Iterable[str]) -> tuple[str, ...]:
    """Case-normalized union, keeping first-seen order."""
    combined: dict[str, None] = {}
    for position in (*first, *second):
        combined.setdefault(position.upper(), None)
    return tuple(combined)


def merge_stats(primary: dict[str, float], secondary: dict[str, float]) -> dict[str, float]:
    """Primary values win on key collision; secondary-only keys are added."""
    merged = dict(primary)
    for key, value in secondary.items():
        merged.setdefault(key, value)
    return merged


def _mismatched_stats(hitter: dict[str, float], pitcher: dict[str, float]) -> list[str]:
    return sorted(k for k in hitter.keys() & pitcher.keys() if hitter[k] != pitcher[k])


def merge_projections(
    hitters: list[PlayerProjection],
    pitchers: list[PlayerProjection],
) -> MergeResult:
    """Fold hitter and pitcher projection sets into one player set.

    Hitters seed the set. A pitcher whose key matches a hitter is a two-way
    player: positions are unioned, hitter stats take precedence, and a
    ``duplicate`` conflict records the resolution.
    """
    players: dict[str, PlayerProjection] = {}
    conflicts: list[MergeConflict] = []

    for hitter in hitters:
        players[resolve_identity(hitter).key] = hitter

    for pitcher in pitchers:
        identity = resolve_identity(pitcher)
        existing = players.get(identity.key)
        if existing is None:
            players[identity.key] = pitcher
            continue

        merged = dataclasses.replace(
            existing,
            positions=merge_positions(existing.positions, pitcher.positions),
            stats=merge_stats(existing.stats, pitcher.stats),
            external_id=existing.external_id or pitcher.external_id,
        )
        players[identity.key] = merged
        player_id = existing.external_id or identity.key

        resolution = "Merged hitter and pitcher stats (two-way player)"
        if identity.confidence is MatchConfidence.NAME_ONLY:
            resolution += "; matched on name only, verify identity"
        conflicts.append(
            MergeConflict(
                player_id=player_id,
                player_name=existing.name,
                kind=ConflictKind.DUPLICATE,
                resolution=resolution,
                confidence=identity.confidence,
            )
        )
        mismatched = _mismatched_stats(existing.stats, pitcher.stats)
        if mismatched:
            conflicts.append(
                MergeConflict(
                    player_id=player_id,
                    player_name=existing.name,
                    kind=ConflictKind.STATS_MISMATCH,
                    resolution=f"Kept hitter values for {', '.join(mismatched)}",
                    confidence=identity.confidence,
                )
            )
        logger.info("Merged two-way player %s (%s)", existing.name, identity.key)

    merged_projections = list(players.values())

    hitter_count = 0
    pitcher_count = 0
    dual_count = 0
    for projection in merged_projections:
        match classify_player(projection):
            case PlayerType.TWO_WAY:
                dual_count += 1
            case PlayerType.HITTER:
                hitter_count += 1
            case PlayerType.PITCHER:
                pitcher_count += 1
            case PlayerType.UNKNOWN:
                pass

    logger.debug(
        "Merged %d hitters and %d pitchers into %d players (%d two-way, %d conflicts)",
        len(hitters),
        len(pitchers),
        len(merged_projections),
        dual_count,
        len(conflicts),
    )
    return MergeResult(
        merged=merged_projections,
        conflicts=conflicts,
        hitter_count=hitter_count,
        pitcher_count=pitcher_count,
        dual_count=dual_count,
    )


def key_projections(projections: list[PlayerProjection]) -> dict[str, PlayerProjection]:
    """Index merged projections by resolved key, preserving order."""
    return {resolve_identity(p).key: p for p in projections}
