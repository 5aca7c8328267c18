import pytest

from fantasy_auction.domain.projection import PlayerGroup
from fantasy_auction.valuation.stats import (
    Direction,
    canonical_stat,
    canonicalize,
    direction_for,
    rate_components,
    stat_value,
)


class TestCanonicalStat:
    @pytest.mark.parametrize(
        ("key", "expected"),
        [
            ("HR", "HR"),
            ("hr", "HR"),
            ("Home Run", "HR"),
            ("SO", "K"),
            ("Strikeout", "K"),
            ("Inning Pitched", "IP"),
            ("k/9", "K/9"),
            ("  Stolen   Base ", "SB"),
        ],
    )
    def test_aliases(self, key: str, expected: str) -> None:
        assert canonical_stat(key) == expected

    def test_unknown(self) -> None:
        assert canonical_stat("WAR") is None


class TestCanonicalize:
    def test_maps_keys_and_reports_unknown(self) -> None:
        stats, unknown = canonicalize({"so": 120, "HR": 30, "WAR": 5.1, "xwOBA": 0.380})
        assert stats == {"K": 120.0, "HR": 30.0}
        assert unknown == ["WAR", "xwOBA"]

    def test_first_key_wins_on_alias_collision(self) -> None:
        stats, _ = canonicalize({"SO": 100, "K": 120})
        assert stats == {"K": 100.0}


class TestDirection:
    def test_lower_is_better_pitching(self) -> None:
        assert direction_for("ERA", PlayerGroup.PITCHERS) is Direction.LOWER
        assert direction_for("WHIP", PlayerGroup.PITCHERS) is Direction.LOWER

    def test_strikeouts_depend_on_group(self) -> None:
        assert direction_for("K", PlayerGroup.HITTERS) is Direction.LOWER
        assert direction_for("K", PlayerGroup.PITCHERS) is Direction.HIGHER

    def test_counting_stats_higher(self) -> None:
        assert direction_for("HR", PlayerGroup.HITTERS) is Direction.HIGHER


class TestStatValue:
    def test_materialized_value_used(self) -> None:
        assert stat_value({"AVG": 0.300, "H": 10.0, "AB": 100.0}, "AVG") == 0.300

    def test_avg_derived(self) -> None:
        assert stat_value({"H": 150.0, "AB": 500.0}, "AVG") == pytest.approx(0.300)

    def test_avg_without_at_bats_is_zero(self) -> None:
        assert stat_value({"H": 150.0}, "AVG") == 0.0

    def test_obp_derived(self) -> None:
        stats = {"H": 150.0, "BB": 60.0, "HBP": 5.0, "PA": 600.0}
        assert stat_value(stats, "OBP") == pytest.approx(215.0 / 600.0)

    def test_slg_from_components(self) -> None:
        stats = {"AB": 500.0, "H": 150.0, "2B": 30.0, "3B": 2.0, "HR": 30.0}
        # singles 88, total bases 88 + 60 + 6 + 120
        assert stat_value(stats, "TB") == pytest.approx(274.0)
        assert stat_value(stats, "SLG") == pytest.approx(274.0 / 500.0)

    def test_era_and_whip(self) -> None:
        stats = {"IP": 180.0, "ER": 60.0, "H": 150.0, "BB": 48.0}
        assert stat_value(stats, "ERA") == pytest.approx(3.0)
        assert stat_value(stats, "WHIP") == pytest.approx(1.1)

    def test_strikeout_rates(self) -> None:
        stats = {"IP": 180.0, "K": 200.0, "BB": 50.0}
        assert stat_value(stats, "K/9") == pytest.approx(10.0)
        assert stat_value(stats, "K/BB") == pytest.approx(4.0)

    def test_missing_counting_stat_is_zero(self) -> None:
        assert stat_value({}, "SV") == 0.0

    def test_saves_plus_holds(self) -> None:
        assert stat_value({"SV": 30.0, "HLD": 5.0}, "SVH") == 35.0


class TestRateComponents:
    def test_era_scaled_numerator(self) -> None:
        assert rate_components({"IP": 180.0, "ER": 60.0}, "ERA") == (540.0, 180.0)

    def test_whip(self) -> None:
        assert rate_components({"IP": 100.0, "H": 90.0, "BB": 30.0}, "WHIP") == (120.0, 100.0)

    def test_materialized_rate_uses_denominator(self) -> None:
        num, den = rate_components({"AVG": 0.300, "AB": 500.0}, "AVG")
        assert num == pytest.approx(150.0)
        assert den == 500.0

    def test_missing_denominator_is_empty(self) -> None:
        assert rate_components({"ERA": 2.10}, "ERA") == (0.0, 0.0)

    def test_counting_stat_rejected(self) -> None:
        with pytest.raises(ValueError):
            rate_components({"HR": 30.0}, "HR")
