import pytest

from fantasy_auction.domain.league_settings import LeagueSettings, ReplacementMethod, RosterAllocation
from fantasy_auction.domain.projection import PlayerGroup
from fantasy_auction.valuation.replacement import (
    assign_positions,
    compute_group_replacement,
    group_slot_spots,
    is_eligible,
    rebase_replacement,
    replacement_value,
)


def _make_league(**requirements: int) -> LeagueSettings:
    return LeagueSettings(
        team_count=2,
        auction_budget=100,
        total_roster_spots=sum(requirements.values()) or 10,
        position_requirements={k.replace("_", ""): v for k, v in requirements.items()},
    )


class TestIsEligible:
    def test_primary_position(self) -> None:
        assert is_eligible("SS", ("SS", "2B"), PlayerGroup.HITTERS)
        assert not is_eligible("C", ("SS",), PlayerGroup.HITTERS)

    def test_middle_and_corner_infield(self) -> None:
        assert is_eligible("MI", ("2B",), PlayerGroup.HITTERS)
        assert is_eligible("CI", ("3B",), PlayerGroup.HITTERS)
        assert not is_eligible("MI", ("1B",), PlayerGroup.HITTERS)

    def test_outfield_covers_specific_fields(self) -> None:
        assert is_eligible("OF", ("CF",), PlayerGroup.HITTERS)

    def test_util_any_hitter(self) -> None:
        assert is_eligible("UTIL", ("C",), PlayerGroup.HITTERS)
        assert not is_eligible("UTIL", ("SP",), PlayerGroup.HITTERS)

    def test_pitcher_slot_and_bench(self) -> None:
        assert is_eligible("P", ("RP",), PlayerGroup.PITCHERS)
        assert is_eligible("BENCH", ("SP",), PlayerGroup.PITCHERS)
        assert not is_eligible("BENCH", ("SP",), PlayerGroup.HITTERS)


class TestGroupSlotSpots:
    def test_primary_positions_scale_by_team_count(self) -> None:
        league = _make_league(C=1, OF=3, SP=2)
        spots = group_slot_spots(PlayerGroup.HITTERS, league, RosterAllocation())
        assert spots == {"C": 2, "OF": 6}

    def test_scarcity_order_then_flex(self) -> None:
        league = _make_league(OF=1, C=1, UTIL=1, SS=1)
        spots = group_slot_spots(PlayerGroup.HITTERS, league, RosterAllocation())
        assert list(spots) == ["C", "SS", "OF", "UTIL"]

    def test_bench_is_shared_by_weight(self) -> None:
        league = _make_league(C=1, SP=1, BN=4)
        assert group_slot_spots(PlayerGroup.HITTERS, league, RosterAllocation())["BENCH"] == 4
        assert group_slot_spots(PlayerGroup.PITCHERS, league, RosterAllocation())["BENCH"] == 4

    def test_pitcher_flex(self) -> None:
        league = _make_league(SP=2, RP=1, P=2, UTIL=1)
        spots = group_slot_spots(PlayerGroup.PITCHERS, league, RosterAllocation())
        assert spots == {"SP": 4, "RP": 2, "P": 4}

    def test_custom_allocation(self) -> None:
        allocation = RosterAllocation(flex_weights={"BENCH": {PlayerGroup.HITTERS: 1.0}})
        league = _make_league(C=1, BENCH=3)
        assert group_slot_spots(PlayerGroup.HITTERS, league, allocation)["BENCH"] == 6
        assert "BENCH" not in group_slot_spots(PlayerGroup.PITCHERS, league, allocation)

    def test_no_requirements_shares_whole_roster(self) -> None:
        league = LeagueSettings(team_count=10, auction_budget=200, total_roster_spots=20)
        assert group_slot_spots(PlayerGroup.HITTERS, league, RosterAllocation()) == {"BENCH": 100}


class TestAssignPositions:
    def test_scarce_position_filled_first(self) -> None:
        scores = {"catcher": 1.0, "star_ss": 5.0, "utility": 3.0}
        positions = {"catcher": ("C",), "star_ss": ("SS", "C"), "utility": ("1B",)}
        assigned = assign_positions(scores, positions, {"C": 1, "SS": 1}, PlayerGroup.HITTERS)
        # C is filled first, so the shortstop-catcher is used there and SS stays empty
        assert assigned == {"star_ss": "C"}

    def test_best_players_fill_each_slot(self) -> None:
        scores = {"a": 5.0, "b": 4.0, "c": 3.0, "d": 2.0}
        positions = {k: ("OF",) for k in scores}
        assigned = assign_positions(scores, positions, {"OF": 2, "UTIL": 1}, PlayerGroup.HITTERS)
        assert assigned == {"a": "OF", "b": "OF", "c": "UTIL"}

    def test_tie_at_cut_takes_every_tied_player(self) -> None:
        scores = {"b": 1.0, "a": 1.0, "z": 0.5}
        positions = {k: ("C",) for k in scores}
        assert assign_positions(scores, positions, {"C": 1}, PlayerGroup.HITTERS) == {"a": "C", "b": "C"}

    def test_tie_above_cut_is_unaffected(self) -> None:
        scores = {"b": 2.0, "a": 2.0, "c": 1.0, "d": 0.5}
        positions = {k: ("OF",) for k in scores}
        assigned = assign_positions(scores, positions, {"OF": 3}, PlayerGroup.HITTERS)
        assert assigned == {"a": "OF", "b": "OF", "c": "OF"}


class TestReplacementValue:
    _SCORES = {"a": 5.0, "b": 4.0, "c": 3.0, "d": 2.0, "e": 1.0}

    def test_last_drafted(self) -> None:
        assert replacement_value(self._SCORES, frozenset({"a", "b", "c"}), ReplacementMethod.LAST_DRAFTED) == 3.0

    def test_first_undrafted(self) -> None:
        assert replacement_value(self._SCORES, frozenset({"a", "b", "c"}), ReplacementMethod.FIRST_UNDRAFTED) == 2.0

    def test_first_undrafted_without_remainder(self) -> None:
        pool = frozenset(self._SCORES)
        assert replacement_value(self._SCORES, pool, ReplacementMethod.FIRST_UNDRAFTED) == 1.0

    def test_blended_averages_window_around_boundary(self) -> None:
        value = replacement_value(self._SCORES, frozenset({"a", "b", "c"}), ReplacementMethod.BLENDED, 3)
        assert value == pytest.approx((3.0 + 2.0 + 1.0) / 3)

    def test_empty_pool_uses_best_score(self) -> None:
        assert replacement_value(self._SCORES, frozenset(), ReplacementMethod.LAST_DRAFTED) == 5.0


class TestComputeGroupReplacement:
    def test_pool_and_thresholds(self) -> None:
        league = _make_league(C=1, OF=1)
        scores = {"c1": 2.0, "c2": 1.0, "c3": 0.5, "of1": 4.0, "of2": 3.0, "of3": -1.0}
        positions = {k: ("C",) if k.startswith("c") else ("OF",) for k in scores}
        result = compute_group_replacement(PlayerGroup.HITTERS, scores, positions, league, RosterAllocation())
        assert result.pool == frozenset({"c1", "c2", "of1", "of2"})
        assert result.pool_size == 4
        assert result.replacement_value == 1.0
        thresholds = {t.position: t for t in result.thresholds}
        assert thresholds["C"].replacement_value == 1.0
        assert thresholds["OF"].replacement_value == 3.0
        assert thresholds["OF"].filled == 2

    def test_rebase_keeps_pool(self) -> None:
        league = _make_league(OF=1)
        scores = {"a": 3.0, "b": 2.0, "c": 1.0}
        positions = {k: ("OF",) for k in scores}
        first = compute_group_replacement(PlayerGroup.HITTERS, scores, positions, league, RosterAllocation())
        rebased = rebase_replacement(first, {"a": 10.0, "b": 8.0, "c": 9.0})
        assert rebased.pool == first.pool
        assert rebased.replacement_value == 8.0
