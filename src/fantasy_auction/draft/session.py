"""Draft sessions persisted through a key-value store.

A session stores the pre-draft baseline (league, inflation method and player
values) once, plus the ordered list of picks. Loading rebuilds the tracker by
replaying the picks against the baseline, so inflation is always recomputed
rather than trusted from storage.
"""

from __future__ import annotations

import dataclasses
import json
import logging
from typing import TYPE_CHECKING, Any

from fantasy_auction.domain.league_settings import InflationMethod, LeagueSettings
from fantasy_auction.domain.projection import PlayerProjection, PlayerType
from fantasy_auction.domain.valuation import PlayerValue, ValueTier
from fantasy_auction.draft.tracker import DraftTracker
from fantasy_auction.exceptions import SessionError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from fantasy_auction.domain.draft import DraftPick
    from fantasy_auction.store.protocol import KeyValueStore

logger = logging.getLogger(__name__)

NAMESPACE = "draft"


def _baseline_key(name: str) -> str:
    return f"{name}/baseline"


def _picks_key(name: str) -> str:
    return f"{name}/picks"


def value_to_dict(value: PlayerValue) -> dict[str, Any]:
    return dataclasses.asdict(value)


def value_from_dict(data: dict[str, Any]) -> PlayerValue:
    raw = dict(data)
    projection = dict(raw.pop("projection"))
    projection["positions"] = tuple(projection.get("positions", ()))
    return PlayerValue(
        **{
            **raw,
            "projection": PlayerProjection(**projection),
            "player_type": PlayerType(raw["player_type"]),
            "value_tier": ValueTier(raw["value_tier"]),
        }
    )


def _pick_to_dict(pick: DraftPick) -> dict[str, Any]:
    return {
        "player_key": pick.player_key,
        "price": pick.price,
        "team": pick.team,
        "is_my_bid": pick.is_my_bid,
    }


class DraftSession:
    def __init__(self, name: str, store: KeyValueStore, tracker: DraftTracker) -> None:
        self._name = name
        self._store = store
        self._tracker = tracker

    @property
    def name(self) -> str:
        return self._name

    @property
    def tracker(self) -> DraftTracker:
        return self._tracker

    @staticmethod
    def exists(name: str, store: KeyValueStore) -> bool:
        return store.get(NAMESPACE, _baseline_key(name)) is not None

    @classmethod
    def start(
        cls,
        name: str,
        store: KeyValueStore,
        values: Sequence[PlayerValue],
        league: LeagueSettings,
        inflation_method: InflationMethod = InflationMethod.DRAFTED_SPEND,
        *,
        overwrite: bool = False,
    ) -> DraftSession:
        if cls.exists(name, store) and not overwrite:
            raise SessionError(f"Draft session '{name}' already exists", name)
        baseline = {
            "league": dataclasses.asdict(league),
            "inflation_method": inflation_method.value,
            "values": [value_to_dict(v) for v in values],
        }
        store.set(NAMESPACE, _baseline_key(name), json.dumps(baseline))
        store.set(NAMESPACE, _picks_key(name), json.dumps([]))
        logger.info("Started draft session '%s' with %d players", name, len(values))
        return cls(name, store, DraftTracker(values, league, inflation_method))

    @classmethod
    def load(cls, name: str, store: KeyValueStore) -> DraftSession:
        raw_baseline = store.get(NAMESPACE, _baseline_key(name))
        if raw_baseline is None:
            raise SessionError(f"No draft session named '{name}'", name)
        try:
            baseline = json.loads(raw_baseline)
            league = LeagueSettings(**baseline["league"])
            method = InflationMethod(baseline["inflation_method"])
            values = [value_from_dict(v) for v in baseline["values"]]
            picks = json.loads(store.get(NAMESPACE, _picks_key(name)) or "[]")
        except (KeyError, TypeError, ValueError) as e:
            raise SessionError(f"Draft session '{name}' is corrupt: {e}", name) from e

        tracker = DraftTracker(values, league, method)
        for pick in picks:
            tracker.record_pick(pick["player_key"], pick["price"], pick["team"], is_my_bid=pick.get("is_my_bid", False))
        logger.debug("Loaded draft session '%s' with %d picks", name, len(picks))
        return cls(name, store, tracker)

    def record_pick(self, player_key: str, price: float, team: str, *, is_my_bid: bool = False) -> DraftPick:
        pick = self._tracker.record_pick(player_key, price, team, is_my_bid=is_my_bid)
        self._save_picks()
        return pick

    def _save_picks(self) -> None:
        picks = [_pick_to_dict(p) for p in self._tracker.state.picks]
        self._store.set(NAMESPACE, _picks_key(self._name), json.dumps(picks))

    def reset(self) -> None:
        """Forget the session entirely."""
        self.delete(self._name, self._store)

    @staticmethod
    def delete(name: str, store: KeyValueStore) -> None:
        store.clear(NAMESPACE, _baseline_key(name))
        store.clear(NAMESPACE, _picks_key(name))
        logger.info("Reset draft session '%s'", name)
