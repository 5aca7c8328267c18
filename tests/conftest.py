import os

import pytest


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove all AUCTION__ env vars so tests are isolated from the shell environment."""
    for key in list(os.environ):
        if key.startswith("AUCTION__"):
            monkeypatch.delenv(key)
