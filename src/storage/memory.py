"""In-process key-value store. Used by tests and as the degraded-mode overlay."""

from __future__ import annotations

from src.core.interfaces import KeyValueStore


class MemoryStore(KeyValueStore):
    """Dict-backed store; contents vanish with the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data
