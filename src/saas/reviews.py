"""Review lifecycle — state transitions and entry of reviews in a tenant workspace.

Per-review states::

    pending --mark_replied(reply)--> replied --reopen()--> pending

``reopen`` keeps the previous reply text so it can be reused. The collection
is newest-first and append-only; every mutation is persisted immediately.
"""

from __future__ import annotations

import dataclasses
import random
from typing import Any

from uuid_extensions import uuid7

from src.core.constants import DATE_LABEL_NOW, DATE_LABEL_TODAY
from src.core.logging import get_logger
from src.core.types import (
    ParsedReview,
    Review,
    ReviewFilter,
    ReviewSource,
    ReviewStatus,
)
from src.saas.workspace import TenantWorkspace, WorkspaceStore

log = get_logger(__name__)

_UPDATABLE_FIELDS = frozenset({"source", "author", "rating", "text", "date", "status", "reply"})

# Reviews handed out by the demo "sync" action.
SYNC_POOL: tuple[dict[str, Any], ...] = (
    {
        "source": ReviewSource.GOOGLE,
        "author": "Marco Verdi",
        "rating": 5,
        "text": "Ottima birra e canederli fatti in casa buonissimi. Consigliato!",
    },
    {
        "source": ReviewSource.TRIPADVISOR,
        "author": "Tourist_UK_99",
        "rating": 4,
        "text": "Great location near the sports zone. The garden is beautiful in winter too.",
    },
    {
        "source": ReviewSource.THEFORK,
        "author": "Anna S.",
        "rating": 5,
        "text": "Prenotato con sconto, ma avrei pagato prezzo pieno. Qualità altissima.",
    },
)


def filter_by(reviews: list[Review], predicate: ReviewFilter) -> list[Review]:
    """Pure projection of ``reviews``; order is preserved."""
    if predicate == ReviewFilter.ALL:
        return list(reviews)
    status = ReviewStatus(predicate.value)
    return [r for r in reviews if r.status == status]


class ReviewLifecycleManager:
    """Mutates the review collection of one loaded workspace."""

    def __init__(
        self,
        workspace: TenantWorkspace,
        store: WorkspaceStore,
        rng: random.Random | None = None,
    ) -> None:
        self._workspace = workspace
        self._store = store
        self._rng = rng or random.Random()

    @property
    def reviews(self) -> list[Review]:
        return self._workspace.reviews

    @property
    def pending_count(self) -> int:
        return self._workspace.pending_count

    @property
    def replied_count(self) -> int:
        return self._workspace.replied_count

    def get(self, review_id: str) -> Review | None:
        return next((r for r in self._workspace.reviews if r.review_id == review_id), None)

    def filter_by(self, predicate: ReviewFilter) -> list[Review]:
        return filter_by(self._workspace.reviews, predicate)

    def _persist(self) -> None:
        self._store.save_reviews(self._workspace.tenant_id, self._workspace.reviews)

    def _prepend(self, review: Review) -> Review:
        self._workspace.reviews = [review, *self._workspace.reviews]
        self._persist()
        log.info(
            "review_added",
            review_id=review.review_id,
            source=review.source.value,
            rating=review.rating,
        )
        return review

    def add(
        self,
        text: str,
        source: ReviewSource,
        author: str,
        rating: int,
        date: str = DATE_LABEL_TODAY,
    ) -> Review | None:
        """Create a pending review at the top of the list.

        Returns ``None`` without touching the collection when author or text
        is blank. Raises ``ValueError`` for a rating outside 1–5.
        """
        if not text.strip() or not author.strip():
            log.debug("review_add_rejected_blank_fields")
            return None

        review = Review(
            review_id=str(uuid7()),
            source=source,
            author=author,
            rating=rating,
            text=text,
            date=date,
        )
        return self._prepend(review)

    def add_parsed(self, parsed: ParsedReview) -> Review | None:
        """Add a review from fields extracted by the raw-text parser."""
        return self.add(parsed.text, parsed.source, parsed.author, parsed.rating, parsed.date)

    def simulate_sync(self) -> Review:
        """Pull one review from the demo pool, as if fetched from a platform."""
        template = self._rng.choice(SYNC_POOL)
        review = Review(
            review_id=str(uuid7()),
            source=template["source"],
            author=template["author"],
            rating=template["rating"],
            text=template["text"],
            date=DATE_LABEL_NOW,
        )
        return self._prepend(review)

    def update(self, review_id: str, **fields: Any) -> Review | None:
        """Merge ``fields`` into the review with ``review_id``.

        Unknown ids are a no-op and return ``None``. Fields outside the
        review's editable set are ignored.
        """
        changes = {k: v for k, v in fields.items() if k in _UPDATABLE_FIELDS}
        ignored = set(fields) - set(changes)
        if ignored:
            log.warning("review_update_ignored_fields", fields=sorted(ignored))

        for idx, review in enumerate(self._workspace.reviews):
            if review.review_id != review_id:
                continue
            if "source" in changes:
                changes["source"] = ReviewSource(changes["source"])
            if "status" in changes:
                changes["status"] = ReviewStatus(changes["status"])
            updated = dataclasses.replace(review, **changes)
            self._workspace.reviews[idx] = updated
            self._persist()
            log.debug("review_updated", review_id=review_id, fields=sorted(changes))
            return updated

        log.debug("review_update_unknown_id", review_id=review_id)
        return None

    def mark_replied(self, review_id: str, reply: str) -> Review | None:
        return self.update(review_id, status=ReviewStatus.REPLIED, reply=reply)

    def reopen(self, review_id: str) -> Review | None:
        """Back to pending; the previous reply text is kept."""
        return self.update(review_id, status=ReviewStatus.PENDING)
