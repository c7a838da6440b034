"""Redis-backed key-value store for shared deployments."""

from __future__ import annotations

import redis

from src.core.exceptions import StorageUnavailableError
from src.core.interfaces import KeyValueStore
from src.core.logging import get_logger

log = get_logger(__name__)

_KEY_PREFIX = "reviewdesk:"


class RedisStore(KeyValueStore):
    """Plain SET/GET over redis-py. Each SET replaces the value atomically."""

    def __init__(self, client: redis.Redis) -> None:
        self._redis = client

    @classmethod
    def from_url(cls, url: str) -> RedisStore:
        client = redis.Redis.from_url(url, decode_responses=True)
        log.info("redis_store_created")
        return cls(client)

    def get(self, key: str) -> str | None:
        try:
            return self._redis.get(_KEY_PREFIX + key)
        except redis.RedisError as exc:
            raise StorageUnavailableError(
                "Redis read failed", context={"key": key, "error": str(exc)},
            ) from exc

    def set(self, key: str, value: str) -> None:
        try:
            self._redis.set(_KEY_PREFIX + key, value)
        except redis.RedisError as exc:
            raise StorageUnavailableError(
                "Redis write failed", context={"key": key, "error": str(exc)},
            ) from exc

    def delete(self, key: str) -> None:
        try:
            self._redis.delete(_KEY_PREFIX + key)
        except redis.RedisError as exc:
            raise StorageUnavailableError(
                "Redis delete failed", context={"key": key, "error": str(exc)},
            ) from exc

    def ping(self) -> bool:
        """Check Redis connectivity."""
        try:
            return bool(self._redis.ping())
        except redis.RedisError:
            return False

    def close(self) -> None:
        self._redis.close()
