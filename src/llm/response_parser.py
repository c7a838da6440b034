"""Unified LLM response parser — converts raw model output to ReviewDesk types."""

from __future__ import annotations

import json
import re
from typing import Any

from src.core.constants import DATE_LABEL_TODAY, DEFAULT_AUTHOR, DEFAULT_RATING
from src.core.exceptions import ParseError
from src.core.logging import get_logger
from src.core.types import ParsedReview, ProfileOptimization, QnAPair, ReviewSource

log = get_logger(__name__)


class ResponseParser:
    """Parse JSON-mode responses.

    Parsing strategy:
    - Direct ``json.loads``
    - JSON inside a markdown code fence
    - First bare object/array in the text

    Missing or invalid fields fall back to defaults; unparseable text raises
    ``ParseError``.
    """

    def load_json(self, raw: str) -> Any:
        """Extract the JSON payload from a model response."""
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            pass

        fence_match = re.search(r"```(?:json)?\s*([\[{].*?[\]}])\s*```", raw, re.DOTALL)
        if fence_match:
            try:
                return json.loads(fence_match.group(1))
            except json.JSONDecodeError:
                pass

        bare_match = re.search(r"(\{.*\}|\[.*\])", raw, re.DOTALL)
        if bare_match:
            try:
                return json.loads(bare_match.group(1))
            except json.JSONDecodeError:
                pass

        log.warning("json_parse_failed", response_preview=raw[:200])
        raise ParseError("Response is not valid JSON", context={"preview": raw[:200]})

    # ── Review extraction ────────────────────────────────────────

    def parse_review(self, raw: str) -> ParsedReview:
        data = self.load_json(raw)
        if not isinstance(data, dict):
            raise ParseError("Expected a JSON object", context={"preview": raw[:200]})

        source_str = str(data.get("source") or "")
        try:
            source = ReviewSource(source_str)
        except ValueError:
            source = ReviewSource.MANUAL

        parsed = ParsedReview(
            author=str(data.get("author") or DEFAULT_AUTHOR),
            rating=self._coerce_rating(data.get("rating")),
            text=str(data.get("text") or ""),
            source=source,
            date=str(data.get("date") or DATE_LABEL_TODAY),
        )
        log.info("review_parsed", source=parsed.source.value, rating=parsed.rating)
        return parsed

    @staticmethod
    def _coerce_rating(value: object) -> int:
        """Numeric rating, or the default when missing, zero or not a number."""
        try:
            rating = round(float(value))  # type: ignore[arg-type]
        except (TypeError, ValueError, OverflowError):
            return DEFAULT_RATING
        if rating == 0:
            return DEFAULT_RATING
        return rating

    # ── Marketing payloads ───────────────────────────────────────

    def parse_profile(self, raw: str) -> ProfileOptimization:
        data = self.load_json(raw)
        if not isinstance(data, dict) or not data.get("description"):
            raise ParseError("Profile response has no description", context={"preview": raw[:200]})
        return ProfileOptimization(
            description=str(data["description"]),
            keywords=[str(k) for k in data.get("keywords") or []],
            categories=[str(c) for c in data.get("categories") or []],
        )

    def parse_qna(self, raw: str) -> list[QnAPair]:
        data = self.load_json(raw)
        if isinstance(data, dict):
            data = data.get("pairs") or data.get("items") or []
        if not isinstance(data, list):
            raise ParseError("Q&A response is not a list", context={"preview": raw[:200]})

        pairs = [
            QnAPair(question=str(item["question"]), answer=str(item["answer"]))
            for item in data
            if isinstance(item, dict) and item.get("question") and item.get("answer")
        ]
        if not pairs:
            raise ParseError("Q&A response contained no pairs", context={"preview": raw[:200]})
        return pairs
