"""Storage backends for tenant workspaces and session markers."""

from src.storage.factory import build_session_marker, build_store
from src.storage.file_store import JsonFileStore
from src.storage.memory import MemoryStore
from src.storage.redis_store import RedisStore
from src.storage.session_marker import FileSessionMarker, MemorySessionMarker

__all__ = [
    "FileSessionMarker",
    "JsonFileStore",
    "MemorySessionMarker",
    "MemoryStore",
    "RedisStore",
    "build_session_marker",
    "build_store",
]
