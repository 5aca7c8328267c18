"""Canonical player keys for matching projections across sources.

A projection carrying an external identifier resolves to ``"id:<value>"``.
Otherwise the key is built from the normalized name and team:
``"name:<normalized name>:<normalized team>"``. Name-based keys are a
best-effort match; two different players with the same normalized name and no
team collide, which is reported through ``MatchConfidence.NAME_ONLY``.

Usage:
    identity = resolve_identity(projection)
    if identity.confidence is MatchConfidence.NAME_ONLY:
        ...
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from typing import TYPE_CHECKING

from fantasy_auction.domain.merge import MatchConfidence

if TYPE_CHECKING:
    from fantasy_auction.domain.projection import PlayerProjection

_SOURCE_SUFFIX_RE = re.compile(r"\s*\((Batter|Pitcher)\)\s*$", re.IGNORECASE)
_PUNCTUATION_RE = re.compile(r"[^\w\s]")
_GENERATIONAL_RE = re.compile(r"\b(jr|sr|ii|iii|iv)\b")


@dataclass(frozen=True)
class ResolvedIdentity:
    key: str
    confidence: MatchConfidence


def normalize_name(name: str) -> str:
    """Normalize a player name for cross-source matching.

    - Strips provider-specific suffixes like (Batter)/(Pitcher)
    - Removes accents/diacritics via NFD decomposition
    - Converts to lowercase and removes punctuation
    - Drops generational suffixes (Jr, Sr, II, III, IV)
    - Collapses whitespace
    """
    name = _SOURCE_SUFFIX_RE.sub("", name)
    normalized = unicodedata.normalize("NFD", name)
    normalized = "".join(c for c in normalized if unicodedata.category(c) != "Mn")
    normalized = normalized.lower()
    normalized = _PUNCTUATION_RE.sub("", normalized)
    normalized = _GENERATIONAL_RE.sub("", normalized)
    return " ".join(normalized.split())


def normalize_team(team: str | None) -> str:
    if not team:
        return ""
    return team.strip().lower()


def resolve_identity(projection: PlayerProjection) -> ResolvedIdentity:
    external_id = (projection.external_id or "").strip()
    if external_id:
        return ResolvedIdentity(key=f"id:{external_id}", confidence=MatchConfidence.EXTERNAL_ID)

    team = normalize_team(projection.team)
    confidence = MatchConfidence.NAME_AND_TEAM if team else MatchConfidence.NAME_ONLY
    return ResolvedIdentity(key=f"name:{normalize_name(projection.name)}:{team}", confidence=confidence)


def resolve(projection: PlayerProjection) -> str:
    return resolve_identity(projection).key
