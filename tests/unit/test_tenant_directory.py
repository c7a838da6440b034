"""Tests for the static tenant directory and YAML roster loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from config.settings import PROJECT_ROOT
from src.core.types import PlanName, Tenant
from src.saas.tenant import PILOT_TENANTS, StaticTenantDirectory, load_directory


class TestTenant:
    def test_negative_plan_limit_rejected(self) -> None:
        with pytest.raises(ValueError, match="negative"):
            Tenant(tenant_id="x", name="X", access_code="c", plan_limit=-1)

    def test_zero_limit_allowed(self) -> None:
        t = Tenant(tenant_id="x", name="X", access_code="c", plan_limit=0)
        assert t.plan_limit == 0

    def test_frozen(self) -> None:
        t = Tenant(tenant_id="x", name="X", access_code="c", plan_limit=5)
        with pytest.raises(AttributeError):
            t.plan_limit = 10  # type: ignore[misc]


class TestStaticTenantDirectory:
    def test_find_by_code(self, directory: StaticTenantDirectory, tenant: Tenant) -> None:
        assert directory.find_by_code("ALPHA-1") == tenant

    def test_surrounding_whitespace_ignored(
        self, directory: StaticTenantDirectory, tenant: Tenant,
    ) -> None:
        assert directory.find_by_code("  ALPHA-1\n") == tenant

    def test_case_sensitive(self, directory: StaticTenantDirectory) -> None:
        assert directory.find_by_code("alpha-1") is None

    def test_unknown_code(self, directory: StaticTenantDirectory) -> None:
        assert directory.find_by_code("nope") is None
        assert directory.find_by_code("") is None

    def test_find_by_id(self, directory: StaticTenantDirectory, other_tenant: Tenant) -> None:
        assert directory.find_by_id("t_beta") == other_tenant
        assert directory.find_by_id("missing") is None

    def test_duplicate_code_rejected(self) -> None:
        a = Tenant(tenant_id="a", name="A", access_code="same", plan_limit=1)
        b = Tenant(tenant_id="b", name="B", access_code=" same ", plan_limit=1)
        with pytest.raises(ValueError, match="duplicate access code"):
            StaticTenantDirectory([a, b])

    def test_duplicate_id_rejected(self) -> None:
        a = Tenant(tenant_id="a", name="A", access_code="one", plan_limit=1)
        b = Tenant(tenant_id="a", name="B", access_code="two", plan_limit=1)
        with pytest.raises(ValueError, match="duplicate tenant_id"):
            StaticTenantDirectory([a, b])

    def test_blank_code_rejected(self) -> None:
        with pytest.raises(ValueError, match="empty access code"):
            StaticTenantDirectory([Tenant(tenant_id="a", name="A", access_code="  ", plan_limit=1)])

    def test_default_roster(self) -> None:
        directory = StaticTenantDirectory()
        assert len(directory) == len(PILOT_TENANTS)
        demo = directory.find_by_code("2424")
        assert demo is not None
        assert demo.tenant_id == "demo_internal"
        assert demo.plan_name == PlanName.ENTERPRISE


class TestLoadDirectory:
    def test_no_path_uses_builtin_roster(self) -> None:
        assert len(load_directory()) == len(PILOT_TENANTS)

    def test_bundled_yaml_matches_builtin(self) -> None:
        directory = load_directory(PROJECT_ROOT / "config" / "tenants.yaml")
        builtin = StaticTenantDirectory()
        assert len(directory) == len(builtin)
        for t in builtin.list_tenants():
            assert directory.find_by_id(t.tenant_id) == t

    def test_unknown_plan_defaults_to_basic(self, tmp_path: Path) -> None:
        roster = tmp_path / "tenants.yaml"
        roster.write_text(
            "tenants:\n"
            "  - tenant_id: x1\n"
            "    name: Bar X\n"
            "    access_code: 'XX-1'\n"
            "    plan_limit: 7\n"
            "    plan_name: Platinum\n",
            encoding="utf-8",
        )
        directory = load_directory(roster)
        t = directory.find_by_code("XX-1")
        assert t is not None
        assert t.plan_name == PlanName.BASIC
        assert t.plan_limit == 7
        assert t.location is None

    def test_empty_file(self, tmp_path: Path) -> None:
        roster = tmp_path / "tenants.yaml"
        roster.write_text("", encoding="utf-8")
        assert len(load_directory(roster)) == 0
