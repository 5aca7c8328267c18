from __future__ import annotations

from typing import Protocol


class KeyValueStore(Protocol):
    """String values grouped by namespace. Draft sessions persist through this."""

    def get(self, namespace: str, key: str) -> str | None: ...

    def set(self, namespace: str, key: str, value: str) -> None: ...

    def clear(self, namespace: str, key: str | None = None) -> None: ...
