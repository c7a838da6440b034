"""Custom exception hierarchy for ReviewDesk.

Every error below is recoverable: the controller converts it into a
user-visible message and the session keeps running.
"""

from __future__ import annotations

from typing import Any


class ReviewDeskError(Exception):
    """Base exception for all ReviewDesk errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.context: dict[str, Any] = context or {}


# ── Access Layer ─────────────────────────────────────────────────

class InvalidCredentialError(ReviewDeskError):
    """Submitted access code does not match any tenant."""


class NotAuthenticatedError(ReviewDeskError):
    """Operation needs a logged-in tenant and the session is anonymous."""


class QuotaExhaustedError(ReviewDeskError):
    """Tenant has no credits left in the current period."""


# ── LLM Layer ────────────────────────────────────────────────────

class GenerationError(ReviewDeskError):
    """External AI call failed (network, provider or empty response)."""


class ParseError(ReviewDeskError):
    """Raw review text could not be turned into structured fields."""


# ── Storage Layer ────────────────────────────────────────────────

class StorageUnavailableError(ReviewDeskError):
    """Persistence backend is unreachable or refused a read/write."""
