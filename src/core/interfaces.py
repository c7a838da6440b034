"""Abstract base classes — all modules must implement these interfaces."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from src.core.types import (
    DishStyle,
    ParsedReview,
    PhotoStyle,
    PostTopic,
    ProfileOptimization,
    QnAPair,
    ReplyRequest,
    Tenant,
)


class TenantDirectory(ABC):
    """Read-only tenant registry."""

    @abstractmethod
    def find_by_code(self, code: str) -> Tenant | None:
        """Exact access-code lookup (surrounding whitespace ignored)."""
        ...

    @abstractmethod
    def find_by_id(self, tenant_id: str) -> Tenant | None:
        ...


class KeyValueStore(ABC):
    """String-keyed durable storage.

    Implementations raise ``StorageUnavailableError`` when the substrate
    cannot be reached. A failed ``set`` must leave the previous value intact.
    """

    @abstractmethod
    def get(self, key: str) -> str | None:
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        ...


class SessionMarker(ABC):
    """Ephemeral holder of the authenticated tenant id."""

    @abstractmethod
    def get(self) -> str | None:
        ...

    @abstractmethod
    def set(self, tenant_id: str) -> None:
        ...

    @abstractmethod
    def clear(self) -> None:
        ...


class PeriodPolicy(ABC):
    """Maps a moment in time to the usage bucket it is billed against."""

    @abstractmethod
    def key_for(self, moment: datetime) -> str:
        ...

    @abstractmethod
    def current_key(self) -> str:
        ...


class ReviewAssistant(ABC):
    """Interface for the AI collaborators behind every metered operation.

    Implementations raise ``GenerationError`` (or ``ParseError`` for
    ``parse_raw_review``) on any provider failure.
    """

    @abstractmethod
    async def generate_reply(self, request: ReplyRequest) -> str:
        ...

    @abstractmethod
    async def parse_raw_review(self, raw_text: str) -> ParsedReview:
        ...

    @abstractmethod
    async def enhance_photo(
        self, image: bytes, mime_type: str, style: PhotoStyle,
    ) -> bytes:
        ...

    @abstractmethod
    async def optimize_profile(
        self, tenant_name: str, cuisine_type: str, location: str,
    ) -> ProfileOptimization:
        ...

    @abstractmethod
    async def describe_dish(
        self, dish_name: str, ingredients: str, style: DishStyle,
    ) -> str:
        ...

    @abstractmethod
    async def write_google_post(
        self, tenant_name: str, topic: PostTopic, details: str,
    ) -> str:
        ...

    @abstractmethod
    async def generate_qna(
        self, tenant_name: str, cuisine_type: str,
    ) -> list[QnAPair]:
        ...
