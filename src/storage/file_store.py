"""File-backed key-value store.

One file per key under ``root``::

    data/workspaces/
    ├── reviews%3Apilot_01.json
    ├── identity%3Apilot_01.json
    └── usage%3Apilot_01%3A2026-10.json

Writes go to a temporary file in the same directory and are moved into place
with ``os.replace``, so a failed write never truncates the previous value.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from urllib.parse import quote

from src.core.exceptions import StorageUnavailableError
from src.core.interfaces import KeyValueStore
from src.core.logging import get_logger

log = get_logger(__name__)


class JsonFileStore(KeyValueStore):
    """Durable store with atomic per-key overwrite."""

    def __init__(self, root: Path) -> None:
        self._root = root

    @property
    def root(self) -> Path:
        return self._root

    def _path_for(self, key: str) -> Path:
        return self._root / f"{quote(key, safe='')}.json"

    def get(self, key: str) -> str | None:
        path = self._path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StorageUnavailableError(
                f"Cannot read {path}", context={"key": key, "error": str(exc)},
            ) from exc

    def set(self, key: str, value: str) -> None:
        path = self._path_for(key)
        tmp_name: str | None = None
        try:
            self._root.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._root, prefix=".tmp-", suffix=".json")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(value)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, path)
            tmp_name = None
        except OSError as exc:
            raise StorageUnavailableError(
                f"Cannot write {path}", context={"key": key, "error": str(exc)},
            ) from exc
        finally:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)

        log.debug("file_store_written", key=key, bytes=len(value))

    def delete(self, key: str) -> None:
        try:
            self._path_for(key).unlink(missing_ok=True)
        except OSError as exc:
            raise StorageUnavailableError(
                f"Cannot delete {key}", context={"key": key, "error": str(exc)},
            ) from exc
