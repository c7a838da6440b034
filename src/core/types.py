"""System-wide shared types — the single source of truth for all data structures."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any


# ── Enums ────────────────────────────────────────────────────────

class ReviewSource(str, Enum):
    GOOGLE = "Google"
    TRIPADVISOR = "TripAdvisor"
    THEFORK = "TheFork"
    MANUAL = "Manual"


class ReviewStatus(str, Enum):
    PENDING = "pending"
    REPLIED = "replied"


class ReviewFilter(str, Enum):
    PENDING = "pending"
    REPLIED = "replied"
    ALL = "all"


class ReplyTone(str, Enum):
    FORMAL = "formal"
    INFORMAL = "informal"
    FRIENDLY = "friendly"
    CONCISE = "concise"


class ReplyLanguage(str, Enum):
    IT = "it"
    EN = "en"
    DE = "de"


class PhotoStyle(str, Enum):
    NATURAL = "natural"
    WARM = "warm"
    BRIGHT = "bright"
    DRAMATIC = "dramatic"
    HDR = "hdr"


class DishStyle(str, Enum):
    GOURMET = "gourmet"
    RUSTIC = "rustic"
    SIMPLE = "simple"


class PostTopic(str, Enum):
    UPDATE = "update"
    OFFER = "offer"
    EVENT = "event"


class PlanName(str, Enum):
    BASIC = "Basic"
    PRO = "Pro"
    ENTERPRISE = "Enterprise"


# ── Tenancy ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class Tenant:
    """Directory record for one customer workspace.

    Immutable: mutable per-tenant state (reviews, identity, usage) lives in
    ``TenantWorkspace``.
    """

    tenant_id: str
    name: str
    access_code: str
    plan_limit: int
    plan_name: PlanName = PlanName.BASIC
    location: str | None = None
    cuisine_type: str | None = None

    def __post_init__(self) -> None:
        if self.plan_limit < 0:
            msg = f"plan_limit cannot be negative: {self.plan_limit}"
            raise ValueError(msg)


# ── Workspace Data ───────────────────────────────────────────────

MIN_RATING = 1
MAX_RATING = 5


@dataclass
class Review:
    """A single piece of customer feedback owned by one tenant."""

    review_id: str
    source: ReviewSource
    author: str
    rating: int
    text: str
    date: str  # display label, e.g. "Oggi" or "2 giorni fa"
    status: ReviewStatus = ReviewStatus.PENDING
    reply: str | None = None

    def __post_init__(self) -> None:
        if not MIN_RATING <= self.rating <= MAX_RATING:
            msg = f"rating must be between {MIN_RATING} and {MAX_RATING}: {self.rating}"
            raise ValueError(msg)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["source"] = self.source.value
        data["status"] = self.status.value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Review:
        return cls(
            review_id=str(data["review_id"]),
            source=ReviewSource(data.get("source", ReviewSource.MANUAL.value)),
            author=data["author"],
            rating=int(data["rating"]),
            text=data["text"],
            date=data.get("date", ""),
            status=ReviewStatus(data.get("status", ReviewStatus.PENDING.value)),
            reply=data.get("reply"),
        )


@dataclass
class BrandIdentity:
    """Free-text description of the tenant's voice, used as reply context."""

    vision: str = ""
    values: str = ""
    history: str = ""

    @property
    def is_empty(self) -> bool:
        return not (self.vision.strip() or self.values.strip() or self.history.strip())

    def to_dict(self) -> dict[str, str]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BrandIdentity:
        return cls(
            vision=data.get("vision", ""),
            values=data.get("values", ""),
            history=data.get("history", ""),
        )

    def to_prompt_summary(self) -> str:
        """Compact block appended to reply prompts."""
        lines: list[str] = []
        if self.vision.strip():
            lines.append(f"- Vision: {self.vision.strip()}")
        if self.values.strip():
            lines.append(f"- Values: {self.values.strip()}")
        if self.history.strip():
            lines.append(f"- History: {self.history.strip()}")
        return "\n".join(lines)


# ── AI Collaborator Payloads ─────────────────────────────────────

@dataclass
class ReplyRequest:
    """Input for reply generation."""

    review_text: str
    author_name: str
    rating: int
    tone: ReplyTone = ReplyTone.FORMAL
    language: ReplyLanguage = ReplyLanguage.IT
    tenant_name: str = ""
    identity: BrandIdentity | None = None


@dataclass
class ParsedReview:
    """Structured fields extracted from pasted review text."""

    author: str = "Cliente"
    rating: int = 5
    text: str = ""
    source: ReviewSource = ReviewSource.MANUAL
    date: str = "Oggi"

    def __post_init__(self) -> None:
        self.rating = max(MIN_RATING, min(MAX_RATING, self.rating))


@dataclass
class ProfileOptimization:
    """Suggested Google Business Profile content."""

    description: str
    keywords: list[str] = field(default_factory=list)
    categories: list[str] = field(default_factory=list)


@dataclass
class QnAPair:
    question: str
    answer: str
