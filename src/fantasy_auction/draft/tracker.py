from __future__ import annotations

import dataclasses
import logging
import math
from typing import TYPE_CHECKING

from fantasy_auction.domain.draft import DraftMetrics, DraftPick, DraftState, TeamNeeds
from fantasy_auction.domain.league_settings import InflationMethod
from fantasy_auction.draft.inflation import inflate, inflation_rate
from fantasy_auction.draft.metrics import draft_metrics, positional_needs
from fantasy_auction.exceptions import AlreadyDraftedError, InvalidPickError, UnknownPlayerError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from fantasy_auction.domain.league_settings import LeagueSettings
    from fantasy_auction.domain.valuation import PlayerValue

logger = logging.getLogger(__name__)


class DraftTracker:
    """Live auction state: recorded picks, inflation and repriced player values.

    Not thread-safe. Callers in a concurrent host must serialize ``record_pick``.
    """

    def __init__(
        self,
        values: Iterable[PlayerValue],
        league: LeagueSettings,
        inflation_method: InflationMethod = InflationMethod.DRAFTED_SPEND,
    ) -> None:
        self._league = league
        self._inflation_method = inflation_method
        self._values: dict[str, PlayerValue] = {v.key: v for v in values}
        self._state = DraftState(total_players_available=len(self._values))

    @property
    def state(self) -> DraftState:
        return self._state

    @property
    def league(self) -> LeagueSettings:
        return self._league

    @property
    def values(self) -> list[PlayerValue]:
        return list(self._values.values())

    def get(self, player_key: str) -> PlayerValue | None:
        return self._values.get(player_key)

    def record_pick(
        self,
        player_key: str,
        price: float,
        team: str,
        *,
        is_my_bid: bool = False,
    ) -> DraftPick:
        """Apply one pick and reprice every undrafted player.

        Raises UnknownPlayerError, AlreadyDraftedError or InvalidPickError
        without touching any state.
        """
        value = self._values.get(player_key)
        if value is None:
            logger.warning("Rejected pick of unknown player %s at $%g", player_key, price)
            raise UnknownPlayerError(player_key, price)
        if value.is_drafted:
            logger.warning("Rejected pick of %s at $%g: already drafted by %s", player_key, price, value.drafted_by)
            raise AlreadyDraftedError(player_key, price, value.drafted_by)
        if not math.isfinite(price) or price < 0:
            logger.warning("Rejected pick of %s: invalid price $%g", player_key, price)
            raise InvalidPickError(player_key, price)

        values = dict(self._values)
        values[player_key] = dataclasses.replace(value, is_drafted=True, drafted_by=team, draft_price=price)
        budget_spent = self._state.total_budget_spent + price
        rate = inflation_rate(self._inflation_method, values.values(), budget_spent, self._league.total_budget)
        for key, other in values.items():
            if not other.is_drafted:
                values[key] = dataclasses.replace(other, adjusted_value=inflate(other.original_value, rate))

        pick = DraftPick(
            pick_number=len(self._state.picks) + 1,
            player_key=player_key,
            player_name=value.name,
            positions=value.positions,
            projected_value=value.original_value,
            price=price,
            team=team,
            is_my_bid=is_my_bid,
        )

        self._values = values
        self._state.picks.append(pick)
        self._state.total_players_available -= 1
        self._state.total_players_drafted += 1
        self._state.total_budget_spent = budget_spent
        self._state.current_inflation_rate = rate

        logger.info(
            "Pick %d: %s to %s for $%g (value $%.2f), inflation %+.1f%%",
            pick.pick_number,
            value.name,
            team,
            price,
            value.original_value,
            rate * 100,
        )
        return pick

    def available(self, position: str | None = None) -> list[PlayerValue]:
        """Undrafted players, best adjusted value first."""
        players = [v for v in self._values.values() if not v.is_drafted]
        if position is not None:
            code = position.upper()
            players = [v for v in players if code in (p.upper() for p in v.positions)]
        return sorted(players, key=lambda v: (-v.adjusted_value, v.name, v.key))

    def drafted(self, team: str | None = None) -> list[PlayerValue]:
        by_key = {v.key: v for v in self._values.values() if v.is_drafted}
        return [by_key[p.player_key] for p in self._state.picks if team is None or p.team == team]

    def metrics(self) -> DraftMetrics:
        return draft_metrics(self._league, self._state, self.values)

    def positional_needs(self, team: str) -> TeamNeeds:
        return positional_needs(self._league, team, self.drafted(team))
