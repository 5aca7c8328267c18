from __future__ import annotations


class MemoryStore:
    def __init__(self) -> None:
        self._data: dict[str, dict[str, str]] = {}

    def get(self, namespace: str, key: str) -> str | None:
        return self._data.get(namespace, {}).get(key)

    def set(self, namespace: str, key: str, value: str) -> None:
        self._data.setdefault(namespace, {})[key] = value

    def clear(self, namespace: str, key: str | None = None) -> None:
        if key is None:
            self._data.pop(namespace, None)
        else:
            self._data.get(namespace, {}).pop(key, None)
