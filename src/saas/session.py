"""Session resolver — binds the running client to at most one tenant.

States::

    ANONYMOUS --login(code)--> AUTHENTICATED(tenant_id)
    AUTHENTICATED --logout--> ANONYMOUS
    (start) --restore() with a live marker--> AUTHENTICATED
"""

from __future__ import annotations

from enum import Enum

from src.core.exceptions import InvalidCredentialError, NotAuthenticatedError
from src.core.interfaces import SessionMarker, TenantDirectory
from src.core.logging import bind_tenant, get_logger
from src.saas.workspace import TenantWorkspace, WorkspaceStore

log = get_logger(__name__)


class SessionState(str, Enum):
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"


class SessionResolver:
    """Owns the login / restore / logout transitions and the active workspace."""

    def __init__(
        self,
        directory: TenantDirectory,
        store: WorkspaceStore,
        marker: SessionMarker,
    ) -> None:
        self._directory = directory
        self._store = store
        self._marker = marker
        self._workspace: TenantWorkspace | None = None

    @property
    def state(self) -> SessionState:
        if self._workspace is None:
            return SessionState.ANONYMOUS
        return SessionState.AUTHENTICATED

    @property
    def is_authenticated(self) -> bool:
        return self._workspace is not None

    @property
    def workspace(self) -> TenantWorkspace | None:
        return self._workspace

    def require_workspace(self) -> TenantWorkspace:
        """Active workspace, or ``NotAuthenticatedError`` if nobody is logged in."""
        if self._workspace is None:
            raise NotAuthenticatedError("Not logged in")
        return self._workspace

    def _enter(self, workspace: TenantWorkspace) -> TenantWorkspace:
        self._workspace = workspace
        bind_tenant(workspace.tenant_id)
        return workspace

    def login(self, code: str) -> TenantWorkspace:
        """Authenticate with an access code and load that tenant's workspace."""
        tenant = self._directory.find_by_code(code)
        if tenant is None:
            log.warning("login_failed")
            raise InvalidCredentialError("Invalid access code")

        if self._workspace is not None and self._workspace.tenant_id != tenant.tenant_id:
            self.logout()

        # Fully built before it becomes visible through ``workspace``.
        workspace = self._store.load_workspace(tenant)
        self._marker.set(tenant.tenant_id)
        log.info("tenant_login", tenant_id=tenant.tenant_id, plan=tenant.plan_name.value)
        return self._enter(workspace)

    def restore(self) -> TenantWorkspace | None:
        """Silently resume a previous session if its marker still names a known tenant."""
        tenant_id = self._marker.get()
        if tenant_id is None:
            return None

        tenant = self._directory.find_by_id(tenant_id)
        if tenant is None:
            log.warning("stale_session_marker", tenant_id=tenant_id)
            self._marker.clear()
            return None

        workspace = self._store.load_workspace(tenant)
        log.info("session_restored", tenant_id=tenant_id)
        return self._enter(workspace)

    def logout(self) -> None:
        """Drop the in-memory workspace and marker. Persisted data is kept."""
        tenant_id = self._workspace.tenant_id if self._workspace else None
        self._marker.clear()
        self._workspace = None
        bind_tenant(None)
        if tenant_id is not None:
            log.info("tenant_logout", tenant_id=tenant_id)
