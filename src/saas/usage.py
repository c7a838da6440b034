"""Usage metering and quota enforcement for tenants.

Every AI-backed operation costs one credit. The credit is checked and
consumed *before* the AI collaborator is called; what happens to it when the
call then fails is decided by ``ChargePolicy``.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from enum import Enum
from typing import TypeVar

from src.core.exceptions import QuotaExhaustedError
from src.core.interfaces import PeriodPolicy
from src.core.logging import get_logger
from src.core.types import Tenant
from src.saas.workspace import TenantWorkspace, WorkspaceStore

log = get_logger(__name__)

T = TypeVar("T")


class ChargePolicy(str, Enum):
    CHARGE_BEFORE_ATTEMPT = "charge_before_attempt"  # failed calls still cost a credit
    REFUND_ON_FAILURE = "refund_on_failure"


class QuotaMeter:
    """Tracks and enforces monthly credit quotas per tenant."""

    def __init__(
        self,
        store: WorkspaceStore,
        period_policy: PeriodPolicy | None = None,
        charge_policy: ChargePolicy = ChargePolicy.CHARGE_BEFORE_ATTEMPT,
    ) -> None:
        self._store = store
        self._period = period_policy or store.period_policy
        self._charge_policy = charge_policy

    @property
    def charge_policy(self) -> ChargePolicy:
        return self._charge_policy

    def try_consume(
        self,
        tenant: Tenant,
        current_usage: int,
        period_key: str | None = None,
    ) -> tuple[bool, int]:
        """Check-and-increment one credit.

        Returns ``(allowed, new_usage)``. When the tenant is at or above its
        plan limit nothing is written and ``(False, current_usage)`` is returned.
        """
        period = period_key or self._period.current_key()

        if current_usage >= tenant.plan_limit:
            log.warning(
                "quota_exceeded",
                tenant_id=tenant.tenant_id,
                current=current_usage,
                limit=tenant.plan_limit,
                period=period,
            )
            return False, current_usage

        new_usage = current_usage + 1
        self._store.save_usage(tenant.tenant_id, period, new_usage)
        log.debug(
            "credit_consumed",
            tenant_id=tenant.tenant_id,
            used=new_usage,
            limit=tenant.plan_limit,
            period=period,
        )
        return True, new_usage

    def _roll_period(self, workspace: TenantWorkspace) -> None:
        """Switch the workspace to the current period's counter if the month changed."""
        period = self._period.current_key()
        if workspace.period_key != period:
            workspace.credits_used = self._store.load_usage(workspace.tenant_id, period)
            log.info(
                "usage_period_rolled",
                tenant_id=workspace.tenant_id,
                old=workspace.period_key,
                new=period,
                credits_used=workspace.credits_used,
            )
            workspace.period_key = period

    def consume(self, workspace: TenantWorkspace, operation: str = "ai_call") -> int:
        """Consume one credit for ``workspace`` or raise ``QuotaExhaustedError``.

        Returns the new usage count.
        """
        self._roll_period(workspace)
        allowed, new_usage = self.try_consume(
            workspace.tenant, workspace.credits_used, workspace.period_key,
        )
        if not allowed:
            raise QuotaExhaustedError(
                f"Monthly credits exhausted ({workspace.credits_used}/{workspace.tenant.plan_limit})",
                context={
                    "tenant_id": workspace.tenant_id,
                    "operation": operation,
                    "period": workspace.period_key,
                },
            )
        workspace.credits_used = new_usage
        return new_usage

    def refund(self, workspace: TenantWorkspace, operation: str = "ai_call") -> int:
        """Give back one credit in the workspace's current period."""
        if workspace.credits_used <= 0:
            return 0
        workspace.credits_used -= 1
        self._store.save_usage(workspace.tenant_id, workspace.period_key, workspace.credits_used)
        log.info(
            "credit_refunded",
            tenant_id=workspace.tenant_id,
            operation=operation,
            used=workspace.credits_used,
        )
        return workspace.credits_used

    async def run_metered(
        self,
        workspace: TenantWorkspace,
        operation: str,
        capability: Callable[[], Awaitable[T]],
    ) -> T:
        """Consume a credit, then await ``capability``.

        The capability is never invoked when the quota check fails. Exceptions
        from the capability propagate unchanged after the charge policy is
        applied.
        """
        self.consume(workspace, operation)
        try:
            return await capability()
        except Exception:
            if self._charge_policy == ChargePolicy.REFUND_ON_FAILURE:
                self.refund(workspace, operation)
            else:
                log.info(
                    "credit_kept_after_failure",
                    tenant_id=workspace.tenant_id,
                    operation=operation,
                )
            raise

    def summary(self, workspace: TenantWorkspace) -> dict[str, int | str]:
        """Current usage snapshot for display."""
        self._roll_period(workspace)
        return {
            "tenant_id": workspace.tenant_id,
            "plan": workspace.tenant.plan_name.value,
            "period": workspace.period_key,
            "credits_used": workspace.credits_used,
            "credits_limit": workspace.tenant.plan_limit,
            "credits_remaining": workspace.credits_remaining,
        }
