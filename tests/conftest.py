"""Pytest configuration, shared fixtures and compatibility helpers.

Async tests are marked with ``@pytest.mark.asyncio``. When ``pytest-asyncio``
is not installed the ``pytest_pyfunc_call`` hook below runs them on a fresh
event loop instead.
"""

from __future__ import annotations

import asyncio
import inspect
from datetime import datetime, timezone
from typing import Any

import pytest

from src.core.types import PlanName, Tenant
from src.saas.period import CalendarMonthPeriod
from src.saas.tenant import StaticTenantDirectory
from src.saas.workspace import WorkspaceStore
from src.storage.memory import MemoryStore
from tests.helpers import FixedClock


def pytest_configure(config: pytest.Config) -> None:
    """Register local markers used in the suite."""
    config.addinivalue_line("markers", "asyncio: mark test as asyncio-compatible")


def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool | None:
    """Run ``@pytest.mark.asyncio`` tests without external plugins."""
    if pyfuncitem.get_closest_marker("asyncio") is None:
        return None

    test_func = pyfuncitem.obj
    if not inspect.iscoroutinefunction(test_func):
        return None

    kwargs: dict[str, Any] = {
        arg: pyfuncitem.funcargs[arg]
        for arg in pyfuncitem._fixtureinfo.argnames
    }
    loop = asyncio.new_event_loop()
    try:
        asyncio.set_event_loop(loop)
        loop.run_until_complete(test_func(**kwargs))
    finally:
        loop.close()
        asyncio.set_event_loop(asyncio.new_event_loop())
    return True


# ── Fixtures ─────────────────────────────────────────────────────


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2026, 10, 15, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def period(clock: FixedClock) -> CalendarMonthPeriod:
    return CalendarMonthPeriod(clock=clock)


@pytest.fixture
def backend() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def store(backend: MemoryStore, period: CalendarMonthPeriod) -> WorkspaceStore:
    return WorkspaceStore(backend, period_policy=period)


@pytest.fixture
def tenant() -> Tenant:
    return Tenant(
        tenant_id="t_alpha",
        name="Trattoria Alpha",
        access_code="ALPHA-1",
        plan_limit=3,
        plan_name=PlanName.BASIC,
        location="Bolzano",
        cuisine_type="Cucina Italiana",
    )


@pytest.fixture
def other_tenant() -> Tenant:
    return Tenant(
        tenant_id="t_beta",
        name="Osteria Beta",
        access_code="BETA-2",
        plan_limit=2,
        plan_name=PlanName.PRO,
    )


@pytest.fixture
def directory(tenant: Tenant, other_tenant: Tenant) -> StaticTenantDirectory:
    return StaticTenantDirectory([tenant, other_tenant])
