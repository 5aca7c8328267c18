from rich.console import Console
from rich.table import Table

from fantasy_auction.domain.draft import DraftMetrics, DraftPick, TeamNeeds
from fantasy_auction.domain.merge import MergeResult
from fantasy_auction.domain.projection import PlayerGroup
from fantasy_auction.domain.valuation import PlayerValue
from fantasy_auction.valuation.engine import Valuation

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)

_TIER_STYLES = {
    "elite": "bold magenta",
    "star": "bold green",
    "starter": "green",
    "bench": "dim",
    "replacement": "dim",
}


def print_error(message: str) -> None:
    err_console.print(f"[red bold]Error:[/red bold] {message}")


def print_merge_result(result: MergeResult) -> None:
    console.print(
        f"[bold green]Merged[/bold green] {len(result.merged)} players: "
        f"{result.hitter_count} hitters, {result.pitcher_count} pitchers, {result.dual_count} two-way"
    )
    if not result.conflicts:
        return
    table = Table(show_edge=False, pad_edge=False)
    table.add_column("Player")
    table.add_column("ID")
    table.add_column("Kind")
    table.add_column("Match")
    table.add_column("Resolution")
    for conflict in result.conflicts:
        table.add_row(
            conflict.player_name,
            conflict.player_id,
            conflict.kind.value,
            conflict.confidence.value,
            conflict.resolution,
        )
    console.print(table)


def _value_table(values: list[PlayerValue], *, adjusted: bool) -> Table:
    table = Table(show_edge=False, pad_edge=False)
    table.add_column("Rank", justify="right")
    table.add_column("Player")
    table.add_column("Key", style="dim")
    table.add_column("Pos")
    table.add_column("Slot")
    table.add_column("Tier")
    table.add_column("Score", justify="right")
    table.add_column("Value", justify="right")
    if adjusted:
        table.add_column("Adjusted", justify="right")
    for val in values:
        style = _TIER_STYLES.get(val.value_tier.value, "")
        row = [
            str(val.rank),
            val.name,
            val.key,
            ",".join(val.positions),
            val.assigned_position or "-",
            f"[{style}]{val.value_tier.value}[/{style}]" if style else val.value_tier.value,
            f"{val.score:.2f}",
            f"${val.original_value:.1f}",
        ]
        if adjusted:
            row.append(f"${val.adjusted_value:.1f}")
        table.add_row(*row)
    return table


def print_valuation(valuation: Valuation, top: int | None = None) -> None:
    """Print the dollar pool split and a value leaderboard."""
    budgets = valuation.group_budgets
    console.print(
        f"Dollar pool: [bold]${valuation.dollar_pool:,.0f}[/bold]"
        f" (hitters ${budgets.get(PlayerGroup.HITTERS, 0.0):,.0f},"
        f" pitchers ${budgets.get(PlayerGroup.PITCHERS, 0.0):,.0f})"
    )
    for group, replacement in valuation.replacements.items():
        console.print(
            f"  {group.value}: {replacement.pool_size} in pool, replacement score {replacement.replacement_value:.2f}"
        )
    values = valuation.values[:top] if top else valuation.values
    if not values:
        console.print("No players to value.")
        return
    console.print(_value_table(values, adjusted=False))


def print_board(values: list[PlayerValue]) -> None:
    if not values:
        console.print("No players available.")
        return
    console.print(_value_table(values, adjusted=True))


def print_pick(pick: DraftPick, inflation_rate: float) -> None:
    mine = " [bold cyan](mine)[/bold cyan]" if pick.is_my_bid else ""
    console.print(
        f"[bold green]Pick {pick.pick_number}[/bold green]: {pick.player_name} to {pick.team}"
        f" for ${pick.price:g} (value ${pick.projected_value:.1f}){mine}"
    )
    console.print(f"  Inflation: {inflation_rate * 100:+.1f}%")


def print_metrics(metrics: DraftMetrics) -> None:
    color = {"inflation": "red", "deflation": "green"}.get(metrics.inflation_direction, "white")
    console.print(
        f"Budget remaining: [bold]${metrics.budget_remaining:,.0f}[/bold] of ${metrics.total_budget:,.0f}"
        f"  Players left: {metrics.players_left_to_draft}"
        f"  Avg $/player: ${metrics.average_cost_per_player:.1f}"
    )
    console.print(
        f"Inflation: [{color}]{metrics.inflation_rate * 100:+.1f}%[/{color}] ({metrics.inflation_direction})"
        f"  Avg adjusted value: ${metrics.average_adjusted_value:.1f}"
    )


def print_team_needs(needs: TeamNeeds) -> None:
    console.print(
        f"[bold]{needs.team}[/bold]: {needs.players_drafted} drafted,"
        f" ${needs.budget_remaining:g} left (${needs.budget_per_spot:.1f} per open spot)"
    )
    table = Table(show_edge=False, pad_edge=False)
    table.add_column("Pos")
    table.add_column("Filled", justify="right")
    table.add_column("Need", justify="right")
    for need in needs.needs:
        table.add_row(need.position, f"{need.filled}/{need.required}", str(need.remaining))
    console.print(table)
