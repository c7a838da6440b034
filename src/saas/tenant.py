"""Tenant directory — static registry of customer workspaces.

Each tenant has:
- Unique tenant_id and access code
- A monthly credit quota for AI operations
- Isolated reviews, brand identity and usage history (see workspace.py)

The roster is read-only at runtime; there is no self-registration.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml

from src.core.interfaces import TenantDirectory
from src.core.logging import get_logger
from src.core.types import PlanName, Tenant

log = get_logger(__name__)


PILOT_TENANTS: tuple[Tenant, ...] = (
    # ── Pro ──────────────────────────────────────────────────────
    Tenant("pilot_01", "Ristorante Da Mario", "MARIO24", 300, PlanName.PRO,
           "Roma Centro", "Cucina Romana Tradizionale"),
    Tenant("pilot_02", "Sushi Zen Experience", "ZEN24", 300, PlanName.PRO,
           "Milano", "Giapponese Fusion"),
    Tenant("pilot_03", "Osteria del Porto", "PORTO24", 300, PlanName.PRO,
           "Genova", "Pesce Fresco"),
    # ── Basic ────────────────────────────────────────────────────
    Tenant("pilot_04", "Pizzeria Bella Napoli", "PIZZA24", 100, PlanName.BASIC,
           "Napoli", "Pizza Napoletana"),
    Tenant("pilot_05", "Burger Station", "BURGER24", 100, PlanName.BASIC,
           "Torino", "Hamburger Gourmet"),
    Tenant("pilot_06", "Trattoria I Nonni", "NONNI24", 100, PlanName.BASIC,
           "Firenze", "Cucina Toscana"),
    Tenant("pilot_07", "Gelateria Blu", "GELO24", 100, PlanName.BASIC,
           "Rimini", "Gelato Artigianale"),
    Tenant("pilot_08", "Bar Centrale", "BAR24", 50, PlanName.BASIC,
           "Bologna", "Caffetteria & Aperitivi"),
    Tenant("pilot_09", "Bistrot 99", "BISTROT24", 50, PlanName.BASIC,
           "Verona", "Cucina Moderna"),
    Tenant("pilot_10", "Agriturismo Verde", "VERDE24", 150, PlanName.PRO,
           "Chianti", "Agriturismo"),
    # ── Demo / internal ──────────────────────────────────────────
    Tenant("demo_internal", "ReiterStube (Demo)", "2424", 999, PlanName.ENTERPRISE,
           "Vipiteno", "Cucina Tirolese"),
)


class StaticTenantDirectory(TenantDirectory):
    """In-memory, read-only tenant roster. Swap for a DB-backed directory in production."""

    def __init__(self, tenants: Iterable[Tenant] = PILOT_TENANTS) -> None:
        self._by_id: dict[str, Tenant] = {}
        self._by_code: dict[str, Tenant] = {}

        for tenant in tenants:
            code = tenant.access_code.strip()
            if not code:
                msg = f"tenant {tenant.tenant_id} has an empty access code"
                raise ValueError(msg)
            if tenant.tenant_id in self._by_id:
                msg = f"duplicate tenant_id: {tenant.tenant_id}"
                raise ValueError(msg)
            if code in self._by_code:
                msg = f"duplicate access code for tenant {tenant.tenant_id}"
                raise ValueError(msg)
            self._by_id[tenant.tenant_id] = tenant
            self._by_code[code] = tenant

    def find_by_code(self, code: str) -> Tenant | None:
        tenant = self._by_code.get(code.strip())
        if tenant is None:
            log.warning("tenant_lookup_failed_unknown_code")
        return tenant

    def find_by_id(self, tenant_id: str) -> Tenant | None:
        return self._by_id.get(tenant_id)

    def list_tenants(self) -> list[Tenant]:
        return list(self._by_id.values())

    def __len__(self) -> int:
        return len(self._by_id)


def _tenant_from_mapping(raw: dict[str, Any]) -> Tenant:
    """Convert one YAML roster entry to a Tenant."""
    plan_str = str(raw.get("plan_name", PlanName.BASIC.value))
    try:
        plan = PlanName(plan_str)
    except ValueError:
        log.warning("unknown_plan_defaulting_basic", tenant_id=raw.get("tenant_id"), plan=plan_str)
        plan = PlanName.BASIC

    return Tenant(
        tenant_id=str(raw["tenant_id"]),
        name=str(raw["name"]),
        access_code=str(raw["access_code"]),
        plan_limit=int(raw["plan_limit"]),
        plan_name=plan,
        location=raw.get("location"),
        cuisine_type=raw.get("cuisine_type"),
    )


def load_directory(path: Path | None = None) -> StaticTenantDirectory:
    """Build a directory from a YAML roster, or the built-in pilot roster when no path is given."""
    if path is None:
        return StaticTenantDirectory()

    with path.open(encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}

    entries = data.get("tenants", [])
    directory = StaticTenantDirectory(_tenant_from_mapping(e) for e in entries)
    log.info("tenant_directory_loaded", path=str(path), tenants=len(directory))
    return directory
