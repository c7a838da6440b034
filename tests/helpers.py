"""Test doubles shared across the unit suite."""

from __future__ import annotations

from datetime import datetime

from src.core.exceptions import StorageUnavailableError
from src.core.interfaces import KeyValueStore
from src.storage.memory import MemoryStore


class FixedClock:
    """Settable clock for period-policy tests."""

    def __init__(self, moment: datetime) -> None:
        self.moment = moment

    def __call__(self) -> datetime:
        return self.moment


class FailingStore(KeyValueStore):
    """Backend that is unreachable for every operation."""

    def __init__(self) -> None:
        self.attempts = 0

    def get(self, key: str) -> str | None:
        self.attempts += 1
        raise StorageUnavailableError("backend down", context={"key": key})

    def set(self, key: str, value: str) -> None:
        self.attempts += 1
        raise StorageUnavailableError("backend down", context={"key": key})

    def delete(self, key: str) -> None:
        self.attempts += 1
        raise StorageUnavailableError("backend down", context={"key": key})


class FlakyStore(MemoryStore):
    """In-memory backend that raises on the next ``failures`` operations."""

    def __init__(self) -> None:
        super().__init__()
        self.failures = 0
        self.attempts = 0

    def _check(self, key: str) -> None:
        self.attempts += 1
        if self.failures > 0:
            self.failures -= 1
            raise StorageUnavailableError("backend blip", context={"key": key})

    def get(self, key: str) -> str | None:
        self._check(key)
        return super().get(key)

    def set(self, key: str, value: str) -> None:
        self._check(key)
        super().set(key, value)

    def delete(self, key: str) -> None:
        self._check(key)
        super().delete(key)
