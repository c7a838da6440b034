"""Build storage backends from settings."""

from __future__ import annotations

from config.settings import Settings
from src.core.interfaces import KeyValueStore, SessionMarker
from src.core.logging import get_logger
from src.storage.file_store import JsonFileStore
from src.storage.memory import MemoryStore
from src.storage.redis_store import RedisStore
from src.storage.session_marker import FileSessionMarker, MemorySessionMarker

log = get_logger(__name__)


def build_store(settings: Settings) -> KeyValueStore:
    """Return the workspace backend selected by ``settings.storage_backend``."""
    backend = settings.storage_backend
    if backend == "memory":
        store: KeyValueStore = MemoryStore()
    elif backend == "redis":
        store = RedisStore.from_url(settings.redis_url.get_secret_value())
    else:
        store = JsonFileStore(settings.storage_dir)

    log.info("storage_backend_selected", backend=backend)
    return store


def build_session_marker(persistent: bool) -> SessionMarker:
    """File marker for the CLI (survives between runs), memory marker otherwise."""
    return FileSessionMarker() if persistent else MemorySessionMarker()
