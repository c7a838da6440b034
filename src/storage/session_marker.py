"""Session marker holders — remember which tenant is logged in.

The marker is ephemeral and kept apart from the durable workspace store:
logging out clears the marker, never the workspace.
"""

from __future__ import annotations

import tempfile
from pathlib import Path

from src.core.constants import SESSION_MARKER_FILENAME
from src.core.interfaces import SessionMarker
from src.core.logging import get_logger

log = get_logger(__name__)


class MemorySessionMarker(SessionMarker):
    """Marker that lives as long as the process (one browsing context)."""

    def __init__(self) -> None:
        self._tenant_id: str | None = None

    def get(self) -> str | None:
        return self._tenant_id

    def set(self, tenant_id: str) -> None:
        self._tenant_id = tenant_id

    def clear(self) -> None:
        self._tenant_id = None


class FileSessionMarker(SessionMarker):
    """Marker kept in the system temp directory so consecutive CLI runs share a session.

    The temp directory is wiped on reboot, which ends the session.
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or Path(tempfile.gettempdir()) / SESSION_MARKER_FILENAME

    @property
    def path(self) -> Path:
        return self._path

    def get(self) -> str | None:
        try:
            value = self._path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        except OSError as exc:
            log.warning("session_marker_unreadable", path=str(self._path), error=str(exc))
            return None
        return value or None

    def set(self, tenant_id: str) -> None:
        try:
            self._path.write_text(tenant_id, encoding="utf-8")
        except OSError as exc:
            # The session still works for this run; it just won't be restored.
            log.warning("session_marker_unwritable", path=str(self._path), error=str(exc))

    def clear(self) -> None:
        try:
            self._path.unlink(missing_ok=True)
        except OSError as exc:
            log.warning("session_marker_not_cleared", path=str(self._path), error=str(exc))
