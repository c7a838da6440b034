"""Base review assistant with common logic (prompting, retry, timeout, call logging).

Subclasses implement ``_call_text()`` and ``_call_image()`` for the
provider-specific API calls.
"""

from __future__ import annotations

import asyncio
from abc import abstractmethod
from collections.abc import Awaitable, Callable
from typing import TypeVar

from src.core.constants import REPLY_TEMPERATURE
from src.core.exceptions import GenerationError, ParseError
from src.core.interfaces import ReviewAssistant
from src.core.logging import get_logger
from src.core.types import (
    DishStyle,
    ParsedReview,
    PhotoStyle,
    PostTopic,
    ProfileOptimization,
    QnAPair,
    ReplyRequest,
)
from src.llm.call_logger import CallAccumulator, LLMCallLogger
from src.llm.prompt_templates.marketing import (
    build_dish_prompt,
    build_post_prompt,
    build_profile_prompt,
    build_qna_prompt,
)
from src.llm.prompt_templates.photo import build_photo_prompt
from src.llm.prompt_templates.reply import build_reply_prompt
from src.llm.prompt_templates.review_parser import build_parse_prompt
from src.llm.response_parser import ResponseParser

log = get_logger(__name__)

T = TypeVar("T")


class BaseAssistantImpl(ReviewAssistant):
    """Shared implementation of every ``ReviewAssistant`` operation."""

    def __init__(
        self,
        model_name: str,
        call_logger: LLMCallLogger | None = None,
        timeout_seconds: int = 60,
        max_retries: int = 2,
        backoff_seconds: float = 1.0,
    ) -> None:
        self._model_name = model_name
        self._call_logger = call_logger or LLMCallLogger()
        self._timeout = timeout_seconds
        self._max_retries = max(1, max_retries)
        self._backoff = backoff_seconds
        self._parser = ResponseParser()

    @property
    def call_logger(self) -> LLMCallLogger:
        return self._call_logger

    # ── Provider hooks ───────────────────────────────────────────

    @abstractmethod
    async def _call_text(
        self,
        prompt: str,
        json_mode: bool = False,
        temperature: float | None = None,
    ) -> tuple[str, int, int]:
        """Provider-specific text generation.

        Returns:
            Tuple of (response_text, input_tokens, output_tokens)
        """
        ...

    @abstractmethod
    async def _call_image(self, prompt: str, image: bytes, mime_type: str) -> bytes:
        """Provider-specific image-to-image generation. Returns image bytes."""
        ...

    # ── Retry loop ───────────────────────────────────────────────

    async def _with_retries(
        self,
        operation: str,
        attempt_fn: Callable[[CallAccumulator], Awaitable[T]],
        prompt: str,
    ) -> T:
        last_error: Exception | None = None

        for attempt in range(1, self._max_retries + 1):
            try:
                async with self._call_logger.log_call(self._model_name, operation) as acc:
                    acc.set_prompt(prompt)
                    return await asyncio.wait_for(attempt_fn(acc), timeout=self._timeout)

            except asyncio.TimeoutError:
                last_error = GenerationError(
                    f"Timeout after {self._timeout}s",
                    context={"operation": operation, "attempt": attempt},
                )
                log.warning("llm_timeout", operation=operation, attempt=attempt, timeout=self._timeout)

            except Exception as exc:
                last_error = exc
                log.warning("llm_call_failed", operation=operation, attempt=attempt, error=str(exc))

            # Exponential backoff between retries
            if attempt < self._max_retries:
                await asyncio.sleep(self._backoff * 2 ** (attempt - 1))

        log.error("llm_all_retries_exhausted", operation=operation, error=str(last_error))
        raise GenerationError(
            f"AI generation failed for {operation}",
            context={"operation": operation, "error": str(last_error)},
        ) from last_error

    async def _run_text(
        self,
        operation: str,
        prompt: str,
        json_mode: bool = False,
        temperature: float | None = None,
    ) -> str:
        async def attempt(acc: CallAccumulator) -> str:
            text, in_tok, out_tok = await self._call_text(
                prompt, json_mode=json_mode, temperature=temperature,
            )
            acc.set_usage(in_tok, out_tok)
            if not text or not text.strip():
                acc.set_response(0, success=False)
                raise GenerationError("Empty response", context={"operation": operation})
            acc.set_response(len(text))
            return text

        return await self._with_retries(operation, attempt, prompt)

    async def _run_image(
        self, operation: str, prompt: str, image: bytes, mime_type: str,
    ) -> bytes:
        async def attempt(acc: CallAccumulator) -> bytes:
            data = await self._call_image(prompt, image, mime_type)
            if not data:
                acc.set_response(0, success=False)
                raise GenerationError("No image in response", context={"operation": operation})
            acc.set_response(len(data))
            return data

        return await self._with_retries(operation, attempt, prompt)

    # ── ReviewAssistant ──────────────────────────────────────────

    async def generate_reply(self, request: ReplyRequest) -> str:
        prompt = build_reply_prompt(request)
        text = await self._run_text("reply", prompt, temperature=REPLY_TEMPERATURE)
        return text.strip()

    async def parse_raw_review(self, raw_text: str) -> ParsedReview:
        if not raw_text.strip():
            raise ParseError("Nothing to parse")
        try:
            text = await self._run_text("parse_review", build_parse_prompt(raw_text), json_mode=True)
        except GenerationError as exc:
            raise ParseError("Could not analyse the pasted text", context=exc.context) from exc
        return self._parser.parse_review(text)

    async def enhance_photo(self, image: bytes, mime_type: str, style: PhotoStyle) -> bytes:
        return await self._run_image("enhance_photo", build_photo_prompt(style), image, mime_type)

    async def optimize_profile(
        self, tenant_name: str, cuisine_type: str, location: str,
    ) -> ProfileOptimization:
        prompt = build_profile_prompt(tenant_name, cuisine_type, location)
        text = await self._run_text("optimize_profile", prompt, json_mode=True)
        try:
            return self._parser.parse_profile(text)
        except ParseError as exc:
            raise GenerationError("Unusable profile suggestion", context=exc.context) from exc

    async def describe_dish(self, dish_name: str, ingredients: str, style: DishStyle) -> str:
        text = await self._run_text("describe_dish", build_dish_prompt(dish_name, ingredients, style))
        return text.strip()

    async def write_google_post(self, tenant_name: str, topic: PostTopic, details: str) -> str:
        text = await self._run_text("google_post", build_post_prompt(tenant_name, topic, details))
        return text.strip()

    async def generate_qna(self, tenant_name: str, cuisine_type: str) -> list[QnAPair]:
        prompt = build_qna_prompt(tenant_name, cuisine_type)
        text = await self._run_text("qna", prompt, json_mode=True)
        try:
            return self._parser.parse_qna(text)
        except ParseError as exc:
            raise GenerationError("Unusable Q&A suggestion", context=exc.context) from exc
