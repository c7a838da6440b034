"""Operation boundary — every user action enters the core through here.

Each public method returns an ``OperationResult``. Domain errors
(``ReviewDeskError`` subclasses) are caught and turned into a user-visible
message; nothing raised by the core ends the session.
"""

from __future__ import annotations

import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, TypeVar

from config.settings import Settings, get_settings
from src.core.constants import MAX_PHOTO_BYTES
from src.core.exceptions import (
    GenerationError,
    InvalidCredentialError,
    NotAuthenticatedError,
    ParseError,
    QuotaExhaustedError,
    ReviewDeskError,
    StorageUnavailableError,
)
from src.core.interfaces import ReviewAssistant, SessionMarker, TenantDirectory
from src.core.logging import get_logger
from src.core.types import (
    BrandIdentity,
    DishStyle,
    PhotoStyle,
    PostTopic,
    ReplyLanguage,
    ReplyRequest,
    ReplyTone,
    ReviewFilter,
    ReviewSource,
)
from src.saas.reviews import ReviewLifecycleManager
from src.saas.session import SessionResolver
from src.saas.tenant import load_directory
from src.saas.usage import ChargePolicy, QuotaMeter
from src.saas.workspace import TenantWorkspace, WorkspaceStore
from src.storage.factory import build_session_marker, build_store

log = get_logger(__name__)

T = TypeVar("T")

_MESSAGES: dict[type[ReviewDeskError], str] = {
    InvalidCredentialError: "Invalid access code. Please try again.",
    NotAuthenticatedError: "Please log in with your access code first.",
    QuotaExhaustedError: (
        "Monthly credits exhausted. Wait for the reset next month or upgrade your plan."
    ),
    GenerationError: "AI generation failed. Please retry.",
    ParseError: "Could not analyse the text automatically. Fill in the fields manually.",
    StorageUnavailableError: "Storage is unavailable; changes are kept for this session only.",
}

STORAGE_WARNING = "Storage unavailable: changes will be lost when you close the app."


@dataclass
class OperationResult:
    """Outcome of one user action."""

    ok: bool
    message: str = ""
    data: Any = None
    warnings: list[str] = field(default_factory=list)


def _message_for(exc: ReviewDeskError) -> str:
    for cls in type(exc).__mro__:
        if cls in _MESSAGES:
            return _MESSAGES[cls]
    return str(exc)


class ReviewDeskController:
    """Wires directory, session, workspace store, quota meter and AI assistant."""

    def __init__(
        self,
        directory: TenantDirectory,
        store: WorkspaceStore,
        marker: SessionMarker,
        assistant: ReviewAssistant | None = None,
        charge_policy: ChargePolicy = ChargePolicy.CHARGE_BEFORE_ATTEMPT,
        rng: random.Random | None = None,
    ) -> None:
        self._store = store
        self._session = SessionResolver(directory, store, marker)
        self._meter = QuotaMeter(store, charge_policy=charge_policy)
        self._assistant = assistant
        self._rng = rng or random.Random()

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        persistent_session: bool = False,
        assistant: ReviewAssistant | None = None,
    ) -> ReviewDeskController:
        settings = settings or get_settings()
        if assistant is None and settings.gemini_api_key.get_secret_value():
            from src.llm.gemini_adapter import GeminiReviewAssistant

            assistant = GeminiReviewAssistant(settings)

        return cls(
            directory=load_directory(settings.tenants_file),
            store=WorkspaceStore(build_store(settings)),
            marker=build_session_marker(persistent_session),
            assistant=assistant,
            charge_policy=ChargePolicy(settings.charge_policy),
        )

    @property
    def session(self) -> SessionResolver:
        return self._session

    @property
    def meter(self) -> QuotaMeter:
        return self._meter

    # ── Helpers ──────────────────────────────────────────────────

    def _ok(self, message: str = "", data: Any = None) -> OperationResult:
        result = OperationResult(ok=True, message=message, data=data)
        if self._store.degraded:
            result.warnings.append(STORAGE_WARNING)
        return result

    def _fail(self, exc: ReviewDeskError, operation: str, data: Any = None) -> OperationResult:
        log.warning(
            "operation_failed",
            operation=operation,
            error_type=type(exc).__name__,
            error=str(exc),
        )
        result = OperationResult(ok=False, message=_message_for(exc), data=data)
        if self._store.degraded:
            result.warnings.append(STORAGE_WARNING)
        return result

    def _workspace(self) -> TenantWorkspace:
        return self._session.require_workspace()

    def _reviews(self) -> ReviewLifecycleManager:
        return ReviewLifecycleManager(self._workspace(), self._store, rng=self._rng)

    def _require_assistant(self) -> ReviewAssistant:
        if self._assistant is None:
            raise GenerationError("AI assistant is not configured (missing GEMINI_API_KEY)")
        return self._assistant

    async def _metered(
        self, operation: str, capability: Callable[[ReviewAssistant], Awaitable[T]],
    ) -> T:
        """Quota check first, AI call second."""
        assistant = self._require_assistant()
        workspace = self._workspace()
        return await self._meter.run_metered(workspace, operation, lambda: capability(assistant))

    # ── Session ──────────────────────────────────────────────────

    def restore_session(self) -> OperationResult:
        workspace = self._session.restore()
        if workspace is None:
            return OperationResult(ok=False, message="No previous session.")
        return self._ok(f"Welcome back, {workspace.tenant.name}.", workspace)

    def login(self, code: str) -> OperationResult:
        try:
            workspace = self._session.login(code)
        except InvalidCredentialError as exc:
            return self._fail(exc, "login")
        return self._ok(f"Welcome, {workspace.tenant.name}.", workspace)

    def logout(self) -> OperationResult:
        self._session.logout()
        return OperationResult(ok=True, message="Logged out.")

    # ── Reviews ──────────────────────────────────────────────────

    def list_reviews(self, predicate: ReviewFilter = ReviewFilter.PENDING) -> OperationResult:
        try:
            manager = self._reviews()
        except ReviewDeskError as exc:
            return self._fail(exc, "list_reviews")
        message = f"{manager.pending_count} to reply, {manager.replied_count} completed"
        return self._ok(message, manager.filter_by(predicate))

    def add_review(
        self,
        text: str,
        source: ReviewSource = ReviewSource.MANUAL,
        author: str = "",
        rating: int = 5,
    ) -> OperationResult:
        try:
            review = self._reviews().add(text, source, author, rating)
        except ReviewDeskError as exc:
            return self._fail(exc, "add_review")
        except ValueError as exc:
            return OperationResult(ok=False, message=str(exc))
        if review is None:
            return OperationResult(ok=False, message="Author and text are required.")
        return self._ok("Review added.", review)

    async def smart_import(self, raw_text: str, auto_add: bool = True) -> OperationResult:
        """Extract review fields from pasted text; on failure the raw text is handed back."""
        try:
            manager = self._reviews()
            parsed = await self._require_assistant().parse_raw_review(raw_text)
        except ReviewDeskError as exc:
            return self._fail(exc, "smart_import", data={"raw_text": raw_text})

        if not auto_add:
            return self._ok("Fields extracted.", parsed)

        review = manager.add_parsed(parsed)
        if review is None:
            return OperationResult(
                ok=False,
                message="The extracted review is missing author or text. Complete it manually.",
                data={"raw_text": raw_text, "parsed": parsed},
            )
        return self._ok("Review imported.", review)

    def simulate_sync(self) -> OperationResult:
        try:
            workspace = self._workspace()
            review = self._reviews().simulate_sync()
        except ReviewDeskError as exc:
            return self._fail(exc, "simulate_sync")
        return self._ok(f"Sync complete! New review found for {workspace.tenant.name}.", review)

    async def generate_reply(
        self,
        review_id: str,
        tone: ReplyTone = ReplyTone.FORMAL,
        language: ReplyLanguage = ReplyLanguage.IT,
    ) -> OperationResult:
        """Draft a reply. The review stays pending until ``mark_replied``."""
        try:
            workspace = self._workspace()
            review = self._reviews().get(review_id)
            if review is None:
                return OperationResult(ok=False, message="Review not found.")
            request = ReplyRequest(
                review_text=review.text,
                author_name=review.author,
                rating=review.rating,
                tone=tone,
                language=language,
                tenant_name=workspace.tenant.name,
                identity=workspace.identity,
            )
            reply = await self._metered("reply", lambda a: a.generate_reply(request))
        except ReviewDeskError as exc:
            return self._fail(exc, "generate_reply")
        return self._ok("Reply drafted.", reply)

    def mark_replied(self, review_id: str, reply: str) -> OperationResult:
        try:
            review = self._reviews().mark_replied(review_id, reply)
        except ReviewDeskError as exc:
            return self._fail(exc, "mark_replied")
        if review is None:
            return OperationResult(ok=False, message="Review not found.")
        return self._ok("Marked as replied.", review)

    def reopen(self, review_id: str) -> OperationResult:
        try:
            review = self._reviews().reopen(review_id)
        except ReviewDeskError as exc:
            return self._fail(exc, "reopen")
        if review is None:
            return OperationResult(ok=False, message="Review not found.")
        return self._ok("Review reopened.", review)

    # ── Identity & usage ─────────────────────────────────────────

    def save_identity(self, vision: str, values: str, history: str) -> OperationResult:
        try:
            workspace = self._workspace()
        except ReviewDeskError as exc:
            return self._fail(exc, "save_identity")
        identity = BrandIdentity(vision=vision, values=values, history=history)
        self._store.save_identity(workspace.tenant_id, identity)
        workspace.identity = identity
        return self._ok("Brand identity saved.", identity)

    def usage(self) -> OperationResult:
        try:
            summary = self._meter.summary(self._workspace())
        except ReviewDeskError as exc:
            return self._fail(exc, "usage")
        message = f"Credits: {summary['credits_used']}/{summary['credits_limit']}"
        return self._ok(message, summary)

    # ── Photo & marketing ────────────────────────────────────────

    async def enhance_photo(self, image: bytes, mime_type: str, style: PhotoStyle) -> OperationResult:
        """On failure ``data`` holds the original image."""
        if not image:
            return OperationResult(ok=False, message="No image selected.")
        if len(image) > MAX_PHOTO_BYTES:
            return OperationResult(ok=False, message="Image too large (max 5MB).", data=image)
        try:
            enhanced = await self._metered(
                "enhance_photo", lambda a: a.enhance_photo(image, mime_type, style),
            )
        except ReviewDeskError as exc:
            return self._fail(exc, "enhance_photo", data=image)
        return self._ok("Photo enhanced.", enhanced)

    async def optimize_profile(
        self, location: str | None = None, cuisine_type: str | None = None,
    ) -> OperationResult:
        try:
            tenant = self._workspace().tenant
            result = await self._metered(
                "optimize_profile",
                lambda a: a.optimize_profile(
                    tenant.name,
                    cuisine_type or tenant.cuisine_type or "",
                    location or tenant.location or "",
                ),
            )
        except ReviewDeskError as exc:
            return self._fail(exc, "optimize_profile")
        return self._ok("Profile suggestions ready.", result)

    async def describe_dish(
        self, dish_name: str, ingredients: str = "", style: DishStyle = DishStyle.RUSTIC,
    ) -> OperationResult:
        if not dish_name.strip():
            return OperationResult(ok=False, message="Enter the dish name.")
        try:
            text = await self._metered(
                "describe_dish", lambda a: a.describe_dish(dish_name, ingredients, style),
            )
        except ReviewDeskError as exc:
            return self._fail(exc, "describe_dish")
        return self._ok("Menu description ready.", text)

    async def write_google_post(self, topic: PostTopic, details: str) -> OperationResult:
        if not details.strip():
            return OperationResult(ok=False, message="Add a few details for the post.")
        try:
            tenant = self._workspace().tenant
            text = await self._metered(
                "google_post", lambda a: a.write_google_post(tenant.name, topic, details),
            )
        except ReviewDeskError as exc:
            return self._fail(exc, "write_google_post")
        return self._ok("Post ready.", text)

    async def generate_qna(self, cuisine_type: str | None = None) -> OperationResult:
        try:
            tenant = self._workspace().tenant
            pairs = await self._metered(
                "qna",
                lambda a: a.generate_qna(tenant.name, cuisine_type or tenant.cuisine_type or ""),
            )
        except ReviewDeskError as exc:
            return self._fail(exc, "generate_qna")
        return self._ok("Q&A ready.", pairs)
