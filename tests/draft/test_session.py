import json

import pytest

from fantasy_auction.domain.league_settings import InflationMethod, LeagueSettings
from fantasy_auction.domain.valuation import PlayerValue
from fantasy_auction.draft.session import NAMESPACE, DraftSession, value_from_dict, value_to_dict
from fantasy_auction.exceptions import AlreadyDraftedError, SessionError
from fantasy_auction.store.memory_store import MemoryStore

from tests.helpers import make_value


class TestValueSerialization:
    def test_value_survives_json(self) -> None:
        value = make_value("a", 12.5, positions=("2B", "SS"))
        restored = value_from_dict(json.loads(json.dumps(value_to_dict(value))))
        assert restored == value


class TestDraftSession:
    def test_start_and_load(self, league: LeagueSettings, values: list[PlayerValue]) -> None:
        store = MemoryStore()
        DraftSession.start("mock", store, values, league)

        loaded = DraftSession.load("mock", store)
        assert loaded.name == "mock"
        assert loaded.tracker.league == league
        assert [v.key for v in loaded.tracker.values] == [v.key for v in values]
        assert loaded.tracker.state.picks == []

    def test_load_replays_picks(self, league: LeagueSettings, values: list[PlayerValue]) -> None:
        store = MemoryStore()
        session = DraftSession.start("mock", store, values, league)
        session.record_pick("a", 60.0, "team1")
        session.record_pick("c", 10.0, "team2", is_my_bid=True)

        loaded = DraftSession.load("mock", store)
        state = loaded.tracker.state
        assert [p.player_key for p in state.picks] == ["a", "c"]
        assert state.picks[1].is_my_bid
        assert state.total_budget_spent == 70.0
        assert state.current_inflation_rate == pytest.approx(session.tracker.state.current_inflation_rate)
        assert loaded.tracker.get("b").adjusted_value == session.tracker.get("b").adjusted_value

    def test_inflation_method_is_kept(self, league: LeagueSettings, values: list[PlayerValue]) -> None:
        store = MemoryStore()
        session = DraftSession.start("mock", store, values, league, InflationMethod.REMAINING_BUDGET)
        session.record_pick("a", 40.0, "team1")

        loaded = DraftSession.load("mock", store)
        assert loaded.tracker.state.current_inflation_rate == pytest.approx(160.0 / 60.0 - 1.0)

    def test_rejected_pick_is_not_saved(self, league: LeagueSettings, values: list[PlayerValue]) -> None:
        store = MemoryStore()
        session = DraftSession.start("mock", store, values, league)
        session.record_pick("a", 40.0, "team1")
        with pytest.raises(AlreadyDraftedError):
            session.record_pick("a", 40.0, "team2")

        assert len(DraftSession.load("mock", store).tracker.state.picks) == 1

    def test_start_existing_session(self, league: LeagueSettings, values: list[PlayerValue]) -> None:
        store = MemoryStore()
        DraftSession.start("mock", store, values, league)
        with pytest.raises(SessionError) as exc_info:
            DraftSession.start("mock", store, values, league)
        assert exc_info.value.session == "mock"

    def test_overwrite_discards_picks(self, league: LeagueSettings, values: list[PlayerValue]) -> None:
        store = MemoryStore()
        session = DraftSession.start("mock", store, values, league)
        session.record_pick("a", 40.0, "team1")

        DraftSession.start("mock", store, values, league, overwrite=True)
        assert DraftSession.load("mock", store).tracker.state.picks == []

    def test_load_missing_session(self) -> None:
        with pytest.raises(SessionError, match="No draft session"):
            DraftSession.load("nope", MemoryStore())

    def test_load_corrupt_session(self) -> None:
        store = MemoryStore()
        store.set(NAMESPACE, "broken/baseline", "{not json")
        with pytest.raises(SessionError, match="corrupt"):
            DraftSession.load("broken", store)

    def test_reset(self, league: LeagueSettings, values: list[PlayerValue]) -> None:
        store = MemoryStore()
        session = DraftSession.start("mock", store, values, league)
        session.record_pick("a", 40.0, "team1")

        session.reset()
        assert not DraftSession.exists("mock", store)
        assert store.get(NAMESPACE, "mock/picks") is None

    def test_sessions_are_independent(self, league: LeagueSettings, values: list[PlayerValue]) -> None:
        store = MemoryStore()
        first = DraftSession.start("first", store, values, league)
        DraftSession.start("second", store, values, league)
        first.record_pick("a", 40.0, "team1")

        assert DraftSession.load("second", store).tracker.state.picks == []
