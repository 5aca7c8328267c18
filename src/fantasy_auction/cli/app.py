import dataclasses
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated

import typer
from config import ConfigurationSet

from fantasy_auction.cli._logging import configure_logging
from fantasy_auction.cli._output import (
    console,
    print_board,
    print_error,
    print_merge_result,
    print_metrics,
    print_pick,
    print_team_needs,
    print_valuation,
)
from fantasy_auction.config import (
    create_config,
    load_league_settings,
    load_scoring_format,
    load_value_settings,
    store_path,
)
from fantasy_auction.domain.league_settings import ValuationMethod
from fantasy_auction.draft.session import DraftSession
from fantasy_auction.exceptions import AuctionException
from fantasy_auction.projections.json_source import load_projections
from fantasy_auction.projections.merger import merge_projections
from fantasy_auction.store.sqlite_store import SqliteStore
from fantasy_auction.valuation.calculator import calculate_player_values
from fantasy_auction.valuation.engine import Valuation

app = typer.Typer(name="auction", help="Fantasy baseball auction values and live draft inflation")
draft_app = typer.Typer(help="Track a live auction draft")
app.add_typer(draft_app, name="draft")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable DEBUG logging")] = False,
) -> None:
    """Fantasy baseball auction values and live draft inflation."""
    configure_logging(verbose=verbose)
    if ctx.invoked_subcommand is None:
        raise typer.Exit()


_HittersArg = Annotated[Path, typer.Argument(help="JSON file of hitter projections")]
_PitchersArg = Annotated[Path, typer.Argument(help="JSON file of pitcher projections")]
_SessionArg = Annotated[str, typer.Argument(help="Draft session name")]
_ConfigOpt = Annotated[Path | None, typer.Option("--config", help="YAML config file (default: ./auction.yaml)")]
_DbOpt = Annotated[Path | None, typer.Option("--db", help="Session database (default: store.db_path)")]
_MethodOpt = Annotated[ValuationMethod | None, typer.Option("--method", help="Override valuation.method")]
_TopOpt = Annotated[int | None, typer.Option("--top", help="Show only the top N players")]


def _config(config_path: Path | None) -> ConfigurationSet:
    return create_config(yaml_path=str(config_path) if config_path else "auction.yaml")


@contextmanager
def _store(cfg: ConfigurationSet, db: Path | None) -> Iterator[SqliteStore]:
    store = SqliteStore(db if db is not None else store_path(cfg))
    try:
        yield store
    finally:
        store.close()


def _valuation(
    hitters: Path,
    pitchers: Path,
    cfg: ConfigurationSet,
    method: ValuationMethod | None,
) -> Valuation:
    result = merge_projections(load_projections(hitters), load_projections(pitchers))
    league = load_league_settings(cfg)
    settings = load_value_settings(cfg)
    if method is not None:
        settings = dataclasses.replace(settings, method=method)
    return calculate_player_values(result.merged, load_scoring_format(cfg), settings, league)


@app.command()
def merge(hitters: _HittersArg, pitchers: _PitchersArg) -> None:
    """Merge hitter and pitcher projections and report two-way conflicts."""
    try:
        result = merge_projections(load_projections(hitters), load_projections(pitchers))
    except AuctionException as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    print_merge_result(result)


@app.command()
def values(
    hitters: _HittersArg,
    pitchers: _PitchersArg,
    method: _MethodOpt = None,
    top: _TopOpt = None,
    config: _ConfigOpt = None,
) -> None:
    """Compute pre-draft auction values."""
    try:
        valuation = _valuation(hitters, pitchers, _config(config), method)
    except AuctionException as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    print_valuation(valuation, top=top)


@draft_app.command("start")
def draft_start(
    session: _SessionArg,
    hitters: _HittersArg,
    pitchers: _PitchersArg,
    method: _MethodOpt = None,
    overwrite: Annotated[bool, typer.Option("--overwrite", help="Replace an existing session")] = False,
    config: _ConfigOpt = None,
    db: _DbOpt = None,
) -> None:
    """Value the player pool and open a draft session."""
    cfg = _config(config)
    try:
        valuation = _valuation(hitters, pitchers, cfg, method)
        settings = load_value_settings(cfg)
        with _store(cfg, db) as store:
            DraftSession.start(
                session,
                store,
                valuation.values,
                load_league_settings(cfg),
                settings.inflation_method,
                overwrite=overwrite,
            )
    except AuctionException as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    draftable = sum(1 for v in valuation.values if v.original_value > 0)
    console.print(f"Started draft '{session}' with {len(valuation.values)} players ({draftable} valued above $0)")


@draft_app.command("pick")
def draft_pick(
    session: _SessionArg,
    player_key: Annotated[str, typer.Argument(help="Player key, e.g. id:660271")],
    price: Annotated[float, typer.Argument(help="Winning bid")],
    team: Annotated[str, typer.Argument(help="Team that won the player")],
    mine: Annotated[bool, typer.Option("--mine", help="Mark as your own bid")] = False,
    config: _ConfigOpt = None,
    db: _DbOpt = None,
) -> None:
    """Record a pick and reprice the remaining players."""
    cfg = _config(config)
    try:
        with _store(cfg, db) as store:
            draft = DraftSession.load(session, store)
            pick = draft.record_pick(player_key, price, team, is_my_bid=mine)
    except AuctionException as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    print_pick(pick, draft.tracker.state.current_inflation_rate)


@draft_app.command("board")
def draft_board(
    session: _SessionArg,
    position: Annotated[str | None, typer.Option("--position", help="Filter by position")] = None,
    team: Annotated[str | None, typer.Option("--team", help="Show positional needs for a team")] = None,
    top: Annotated[int, typer.Option("--top", help="Number of players to show")] = 20,
    config: _ConfigOpt = None,
    db: _DbOpt = None,
) -> None:
    """Show draft metrics and the best available players."""
    cfg = _config(config)
    try:
        with _store(cfg, db) as store:
            tracker = DraftSession.load(session, store).tracker
    except AuctionException as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    print_metrics(tracker.metrics())
    if team is not None:
        print_team_needs(tracker.positional_needs(team))
    print_board(tracker.available(position)[:top])


@draft_app.command("reset")
def draft_reset(
    session: _SessionArg,
    config: _ConfigOpt = None,
    db: _DbOpt = None,
) -> None:
    """Delete a draft session and its picks."""
    cfg = _config(config)
    with _store(cfg, db) as store:
        if not DraftSession.exists(session, store):
            print_error(f"No draft session named '{session}'")
            raise typer.Exit(code=1)
        DraftSession.delete(session, store)
    console.print(f"Reset draft '{session}'")
