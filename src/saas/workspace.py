"""Persisted workspace store — durable per-tenant reviews, identity and usage.

Key layout (one string value per key)::

    reviews:{tenant_id}                 JSON list of reviews, newest first
    identity:{tenant_id}                JSON object (vision / values / history)
    usage:{tenant_id}:{period_key}      decimal credit count

This module is the only one that talks to the storage backend.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field

from src.core.constants import KEY_SEPARATOR, NS_IDENTITY, NS_REVIEWS, NS_USAGE
from src.core.exceptions import StorageUnavailableError
from src.core.interfaces import KeyValueStore, PeriodPolicy
from src.core.logging import get_logger
from src.core.types import BrandIdentity, Review, ReviewSource, ReviewStatus, Tenant
from src.saas.period import CalendarMonthPeriod
from src.storage.memory import MemoryStore

log = get_logger(__name__)


def reviews_key(tenant_id: str) -> str:
    return KEY_SEPARATOR.join((NS_REVIEWS, tenant_id))


def identity_key(tenant_id: str) -> str:
    return KEY_SEPARATOR.join((NS_IDENTITY, tenant_id))


def usage_key(tenant_id: str, period_key: str) -> str:
    return KEY_SEPARATOR.join((NS_USAGE, tenant_id, period_key))


def seed_reviews(tenant_name: str) -> list[Review]:
    """Fixture shown on a tenant's very first load."""
    return [
        Review(
            review_id="seed-1",
            source=ReviewSource.GOOGLE,
            author="Hans Müller",
            rating=5,
            text=f"Cibo eccellente e atmosfera autentica da {tenant_name}! Torneremo sicuramente.",
            date="2 giorni fa",
        ),
        Review(
            review_id="seed-2",
            source=ReviewSource.TRIPADVISOR,
            author="Giulia Bianchi",
            rating=3,
            text="Il posto è carino ma il servizio è stato un po' lento. Forse perché era domenica.",
            date="1 settimana fa",
        ),
    ]


@dataclass
class TenantWorkspace:
    """Mutable per-session state of one tenant. Published only when fully loaded."""

    tenant: Tenant
    reviews: list[Review] = field(default_factory=list)
    identity: BrandIdentity | None = None
    credits_used: int = 0
    period_key: str = ""

    @property
    def tenant_id(self) -> str:
        return self.tenant.tenant_id

    @property
    def credits_remaining(self) -> int:
        return max(0, self.tenant.plan_limit - self.credits_used)

    @property
    def quota_exhausted(self) -> bool:
        return self.credits_used >= self.tenant.plan_limit

    @property
    def pending_count(self) -> int:
        return sum(1 for r in self.reviews if r.status == ReviewStatus.PENDING)

    @property
    def replied_count(self) -> int:
        return sum(1 for r in self.reviews if r.status == ReviewStatus.REPLIED)


class WorkspaceStore:
    """Tenant-scoped persistence over a ``KeyValueStore``.

    Every value read from or written to the backend is mirrored in an
    in-memory overlay. If the backend raises ``StorageUnavailableError`` the
    store sets ``degraded``: known keys are then served from the overlay,
    unseen keys are still fetched from the backend, and writes stay in memory.
    Edits made while degraded are lost when the process exits.
    """

    def __init__(
        self,
        backend: KeyValueStore,
        period_policy: PeriodPolicy | None = None,
    ) -> None:
        self._backend = backend
        self._period = period_policy or CalendarMonthPeriod()
        self._overlay = MemoryStore()
        self._degraded = False

    @property
    def degraded(self) -> bool:
        return self._degraded

    @property
    def period_policy(self) -> PeriodPolicy:
        return self._period

    # ── Raw access ───────────────────────────────────────────────

    def _degrade(self, exc: StorageUnavailableError, op: str, key: str) -> None:
        if not self._degraded:
            log.error("storage_degraded_to_memory", op=op, key=key, error=str(exc))
        self._degraded = True

    def _get(self, key: str) -> str | None:
        # Overlay mirrors every value seen on the backend; it is authoritative
        # only once degraded, and only for keys it already holds.
        if self._degraded and key in self._overlay:
            return self._overlay.get(key)
        try:
            value = self._backend.get(key)
        except StorageUnavailableError as exc:
            self._degrade(exc, "get", key)
            return self._overlay.get(key)
        if value is None:
            self._overlay.delete(key)
        else:
            self._overlay.set(key, value)
        return value

    def _set(self, key: str, value: str) -> None:
        self._overlay.set(key, value)
        if self._degraded:
            return
        try:
            self._backend.set(key, value)
        except StorageUnavailableError as exc:
            self._degrade(exc, "set", key)

    # ── Reviews ──────────────────────────────────────────────────

    def load_reviews(self, tenant: Tenant) -> list[Review]:
        """Stored reviews, or the seed set if this tenant has never been saved."""
        raw = self._get(reviews_key(tenant.tenant_id))
        if raw is None:
            log.info("reviews_seeded", tenant_id=tenant.tenant_id)
            return seed_reviews(tenant.name)

        try:
            items = json.loads(raw)
        except ValueError as exc:
            log.error("reviews_corrupt", tenant_id=tenant.tenant_id, error=str(exc))
            return []
        if not isinstance(items, list):
            log.error("reviews_corrupt", tenant_id=tenant.tenant_id, error="not a list")
            return []

        reviews: list[Review] = []
        for position, item in enumerate(items):
            try:
                reviews.append(Review.from_dict(item))
            except (ValueError, KeyError, TypeError, AttributeError) as exc:
                log.error(
                    "review_entry_skipped",
                    tenant_id=tenant.tenant_id,
                    position=position,
                    error=str(exc),
                )
        return reviews

    def save_reviews(self, tenant_id: str, reviews: list[Review]) -> None:
        payload = json.dumps([r.to_dict() for r in reviews], ensure_ascii=False)
        self._set(reviews_key(tenant_id), payload)
        log.debug("reviews_saved", tenant_id=tenant_id, count=len(reviews))

    # ── Identity ─────────────────────────────────────────────────

    def load_identity(self, tenant_id: str) -> BrandIdentity | None:
        raw = self._get(identity_key(tenant_id))
        if raw is None:
            return None
        try:
            return BrandIdentity.from_dict(json.loads(raw))
        except (ValueError, AttributeError) as exc:
            log.error("identity_corrupt", tenant_id=tenant_id, error=str(exc))
            return None

    def save_identity(self, tenant_id: str, identity: BrandIdentity) -> None:
        self._set(identity_key(tenant_id), json.dumps(identity.to_dict(), ensure_ascii=False))
        log.info("identity_saved", tenant_id=tenant_id)

    # ── Usage ────────────────────────────────────────────────────

    def load_usage(self, tenant_id: str, period_key: str) -> int:
        raw = self._get(usage_key(tenant_id, period_key))
        if raw is None:
            return 0
        try:
            return max(0, int(raw))
        except ValueError:
            log.error("usage_corrupt", tenant_id=tenant_id, period=period_key, raw=raw[:20])
            return 0

    def save_usage(self, tenant_id: str, period_key: str, value: int) -> None:
        if value < 0:
            msg = f"usage cannot be negative: {value}"
            raise ValueError(msg)
        self._set(usage_key(tenant_id, period_key), str(value))

    # ── Aggregate ────────────────────────────────────────────────

    def load_workspace(self, tenant: Tenant) -> TenantWorkspace:
        """Load reviews, identity and usage together; nothing is returned half-built."""
        period_key = self._period.current_key()
        reviews = self.load_reviews(tenant)
        identity = self.load_identity(tenant.tenant_id)
        credits_used = self.load_usage(tenant.tenant_id, period_key)

        workspace = TenantWorkspace(
            tenant=tenant,
            reviews=reviews,
            identity=identity,
            credits_used=credits_used,
            period_key=period_key,
        )
        log.info(
            "workspace_loaded",
            tenant_id=tenant.tenant_id,
            reviews=len(reviews),
            has_identity=identity is not None,
            credits_used=credits_used,
            period=period_key,
        )
        return workspace
