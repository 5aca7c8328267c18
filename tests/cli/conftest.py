import json
import logging
from collections.abc import Iterator
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _restore_root_logger() -> Iterator[None]:
    """The CLI callback replaces root handlers; put pytest's back afterwards."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def hitters_file(tmp_path: Path) -> Path:
    players = [
        {
            "name": f"Hitter {i}",
            "team": "NYY",
            "positions": ["OF"],
            "mlbam_id": i,
            "stats": {"R": 100 - 10 * i, "HR": 40 - 5 * i, "RBI": 100 - 10 * i, "SB": 20 - 2 * i, "AVG": 0.3 - 0.01 * i},
        }
        for i in range(1, 5)
    ]
    path = tmp_path / "hitters.json"
    path.write_text(json.dumps(players))
    return path


@pytest.fixture
def pitchers_file(tmp_path: Path) -> Path:
    players = [
        {
            "name": f"Pitcher {i}",
            "team": "BOS",
            "positions": ["SP"],
            "mlbam_id": 10 + i,
            "stats": {"W": 16 - i, "SV": 0, "K": 220 - 20 * i, "ERA": 2.8 + 0.3 * i, "WHIP": 1.0 + 0.05 * i},
        }
        for i in range(1, 5)
    ]
    path = tmp_path / "pitchers.json"
    path.write_text(json.dumps({"players": players}))
    return path


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "auction.yaml"
    path.write_text(
        "league:\n"
        "  team_count: 2\n"
        "  auction_budget: 20\n"
        "  total_roster_spots: 2\n"
        "  position_requirements:\n"
        "    OF: 1\n"
        "    SP: 1\n"
    )
    return path
