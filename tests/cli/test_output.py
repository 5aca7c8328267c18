from fantasy_auction.cli._output import console, print_metrics, print_pick, print_team_needs
from fantasy_auction.domain.draft import DraftMetrics, DraftPick, PositionNeed, TeamNeeds


class TestPrintPick:
    def test_shows_price_and_inflation(self) -> None:
        pick = DraftPick(
            pick_number=3,
            player_key="id:1",
            player_name="Player One",
            positions=("OF",),
            projected_value=25.0,
            price=31.0,
            team="team1",
            is_my_bid=True,
        )
        with console.capture() as capture:
            print_pick(pick, 0.125)
        output = capture.get()
        assert "Pick 3" in output
        assert "$31" in output
        assert "(mine)" in output
        assert "+12.5%" in output


class TestPrintMetrics:
    def test_direction(self) -> None:
        metrics = DraftMetrics(
            total_budget=200.0,
            budget_spent=60.0,
            budget_remaining=140.0,
            players_left_to_draft=7,
            average_cost_per_player=20.0,
            average_adjusted_value=22.5,
            inflation_rate=-0.1,
            inflation_direction="deflation",
        )
        with console.capture() as capture:
            print_metrics(metrics)
        output = capture.get()
        assert "$140" in output
        assert "-10.0%" in output
        assert "deflation" in output


class TestPrintTeamNeeds:
    def test_needs_table(self) -> None:
        needs = TeamNeeds(
            team="team1",
            budget_remaining=20.0,
            players_drafted=2,
            needs=(PositionNeed(position="SP", required=1, filled=0, remaining=1),),
        )
        with console.capture() as capture:
            print_team_needs(needs)
        output = capture.get()
        assert "team1" in output
        assert "SP" in output
        assert "0/1" in output
