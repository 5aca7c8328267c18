import pytest

from fantasy_auction.domain.league_settings import LeagueSettings
from fantasy_auction.domain.projection import PlayerType
from fantasy_auction.domain.valuation import PlayerValue
from tests.helpers import make_value


@pytest.fixture
def league() -> LeagueSettings:
    return LeagueSettings(
        team_count=2,
        auction_budget=100,
        total_roster_spots=4,
        position_requirements={"C": 1, "OF": 2, "SP": 1},
    )


@pytest.fixture
def values() -> list[PlayerValue]:
    return [
        make_value("a", 40.0),
        make_value("b", 30.0),
        make_value("c", 20.0, positions=("C",)),
        make_value("d", 10.0, positions=("SP",), player_type=PlayerType.PITCHER),
        make_value("e", 0.0),
    ]
