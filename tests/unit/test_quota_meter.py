"""Tests for QuotaMeter — credit checks, charge policies and period rollover."""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from src.core.exceptions import GenerationError, QuotaExhaustedError
from src.core.types import Tenant
from src.saas.usage import ChargePolicy, QuotaMeter
from src.saas.workspace import WorkspaceStore
from tests.helpers import FixedClock


class TestTryConsume:
    def test_allows_below_limit(self, store: WorkspaceStore, tenant: Tenant) -> None:
        meter = QuotaMeter(store)
        allowed, new_usage = meter.try_consume(tenant, 0)
        assert allowed is True
        assert new_usage == 1
        assert store.load_usage(tenant.tenant_id, "2026-10") == 1

    def test_last_credit_then_blocked(self, store: WorkspaceStore, tenant: Tenant) -> None:
        meter = QuotaMeter(store)
        limit = tenant.plan_limit

        assert meter.try_consume(tenant, limit - 1) == (True, limit)
        assert meter.try_consume(tenant, limit) == (False, limit)
        assert store.load_usage(tenant.tenant_id, "2026-10") == limit

    def test_above_limit_is_blocked_without_write(
        self, store: WorkspaceStore, tenant: Tenant,
    ) -> None:
        meter = QuotaMeter(store)
        assert meter.try_consume(tenant, tenant.plan_limit + 5) == (False, tenant.plan_limit + 5)
        assert store.load_usage(tenant.tenant_id, "2026-10") == 0

    def test_zero_limit_always_blocked(self, store: WorkspaceStore) -> None:
        frozen = Tenant(tenant_id="z", name="Zero", access_code="Z", plan_limit=0)
        assert QuotaMeter(store).try_consume(frozen, 0) == (False, 0)

    def test_explicit_period(self, store: WorkspaceStore, tenant: Tenant) -> None:
        QuotaMeter(store).try_consume(tenant, 0, period_key="2026-03")
        assert store.load_usage(tenant.tenant_id, "2026-03") == 1
        assert store.load_usage(tenant.tenant_id, "2026-10") == 0


class TestConsume:
    def test_limit_two_scenario(self, store: WorkspaceStore, other_tenant: Tenant) -> None:
        ws = store.load_workspace(other_tenant)
        meter = QuotaMeter(store)

        assert meter.consume(ws) == 1
        assert meter.consume(ws) == 2
        with pytest.raises(QuotaExhaustedError):
            meter.consume(ws)

        assert ws.credits_used == 2
        assert store.load_usage(other_tenant.tenant_id, "2026-10") == 2

    def test_usage_survives_reload(self, store: WorkspaceStore, tenant: Tenant) -> None:
        meter = QuotaMeter(store)
        meter.consume(store.load_workspace(tenant))
        assert store.load_workspace(tenant).credits_used == 1

    def test_month_rollover_resets(
        self, store: WorkspaceStore, clock: FixedClock, other_tenant: Tenant,
    ) -> None:
        meter = QuotaMeter(store)
        ws = store.load_workspace(other_tenant)
        meter.consume(ws)
        meter.consume(ws)

        clock.moment = datetime(2026, 11, 1, 0, 5, tzinfo=timezone.utc)

        assert meter.consume(ws) == 1
        assert ws.period_key == "2026-11"
        assert store.load_usage(other_tenant.tenant_id, "2026-10") == 2
        assert store.load_usage(other_tenant.tenant_id, "2026-11") == 1

    def test_summary(self, store: WorkspaceStore, tenant: Tenant) -> None:
        meter = QuotaMeter(store)
        ws = store.load_workspace(tenant)
        meter.consume(ws)
        summary = meter.summary(ws)
        assert summary["credits_used"] == 1
        assert summary["credits_limit"] == 3
        assert summary["credits_remaining"] == 2
        assert summary["period"] == "2026-10"
        assert summary["plan"] == "Basic"


class TestRunMetered:
    @pytest.mark.asyncio
    async def test_success_charges_once(self, store: WorkspaceStore, tenant: Tenant) -> None:
        meter = QuotaMeter(store)
        ws = store.load_workspace(tenant)
        capability = AsyncMock(return_value="ok")

        result = await meter.run_metered(ws, "reply", capability)

        assert result == "ok"
        capability.assert_awaited_once()
        assert ws.credits_used == 1

    @pytest.mark.asyncio
    async def test_blocked_never_invokes_capability(
        self, store: WorkspaceStore, tenant: Tenant,
    ) -> None:
        store.save_usage(tenant.tenant_id, "2026-10", tenant.plan_limit)
        meter = QuotaMeter(store)
        ws = store.load_workspace(tenant)
        capability = AsyncMock(return_value="never")

        with pytest.raises(QuotaExhaustedError):
            await meter.run_metered(ws, "reply", capability)

        capability.assert_not_awaited()
        assert ws.credits_used == tenant.plan_limit

    @pytest.mark.asyncio
    async def test_failure_keeps_charge_by_default(
        self, store: WorkspaceStore, tenant: Tenant,
    ) -> None:
        meter = QuotaMeter(store)
        ws = store.load_workspace(tenant)
        capability = AsyncMock(side_effect=GenerationError("boom"))

        with pytest.raises(GenerationError):
            await meter.run_metered(ws, "reply", capability)

        assert ws.credits_used == 1
        assert store.load_usage(tenant.tenant_id, "2026-10") == 1

    @pytest.mark.asyncio
    async def test_failure_refunded_under_refund_policy(
        self, store: WorkspaceStore, tenant: Tenant,
    ) -> None:
        meter = QuotaMeter(store, charge_policy=ChargePolicy.REFUND_ON_FAILURE)
        ws = store.load_workspace(tenant)
        capability = AsyncMock(side_effect=GenerationError("boom"))

        with pytest.raises(GenerationError):
            await meter.run_metered(ws, "reply", capability)

        assert ws.credits_used == 0
        assert store.load_usage(tenant.tenant_id, "2026-10") == 0


class TestRefund:
    def test_never_below_zero(self, store: WorkspaceStore, tenant: Tenant) -> None:
        meter = QuotaMeter(store)
        ws = store.load_workspace(tenant)
        assert meter.refund(ws) == 0
        assert ws.credits_used == 0
