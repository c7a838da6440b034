"""Multi-tenant core — tenant directory, sessions, workspaces, quota and review lifecycle."""

from src.saas.period import CalendarMonthPeriod
from src.saas.reviews import ReviewLifecycleManager, filter_by
from src.saas.session import SessionResolver, SessionState
from src.saas.tenant import PILOT_TENANTS, StaticTenantDirectory, load_directory
from src.saas.usage import ChargePolicy, QuotaMeter
from src.saas.workspace import TenantWorkspace, WorkspaceStore, seed_reviews

__all__ = [
    "CalendarMonthPeriod",
    "ChargePolicy",
    "PILOT_TENANTS",
    "QuotaMeter",
    "ReviewLifecycleManager",
    "SessionResolver",
    "SessionState",
    "StaticTenantDirectory",
    "TenantWorkspace",
    "WorkspaceStore",
    "filter_by",
    "load_directory",
    "seed_reviews",
]
