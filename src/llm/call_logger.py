"""LLM call logger — keeps a bounded record of every AI call for auditing."""

from __future__ import annotations

import time
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import AsyncIterator

from uuid_extensions import uuid7

from src.core.logging import get_logger

log = get_logger(__name__)


@dataclass
class CallRecord:
    """Complete record of a single LLM call."""

    call_id: str
    timestamp: datetime
    model: str
    operation: str  # 'reply', 'parse_review', 'enhance_photo', ...
    prompt_text: str
    response_len: int
    success: bool
    latency_ms: float
    input_tokens: int
    output_tokens: int


@dataclass
class CallAccumulator:
    """Mutable accumulator used during a logged call."""

    model: str
    operation: str
    prompt_text: str = ""
    response_len: int = 0
    success: bool = False
    input_tokens: int = 0
    output_tokens: int = 0
    start_time: float = field(default_factory=time.monotonic)

    def set_prompt(self, text: str) -> None:
        self.prompt_text = text

    def set_response(self, length: int, success: bool = True) -> None:
        self.response_len = length
        self.success = success

    def set_usage(self, input_tokens: int, output_tokens: int) -> None:
        self.input_tokens = input_tokens
        self.output_tokens = output_tokens

    def elapsed_ms(self) -> float:
        return (time.monotonic() - self.start_time) * 1000


class LLMCallLogger:
    """Record prompt size, outcome and latency for every LLM call.

    Usage:
        call_logger = LLMCallLogger()
        async with call_logger.log_call("gemini-2.5-flash", "reply") as acc:
            acc.set_prompt(prompt_text)
            text = await llm_call(prompt_text)
            acc.set_response(len(text))
    """

    _MAX_RECORDS = 1_000  # Prevent unbounded memory growth

    def __init__(self) -> None:
        self._records: list[CallRecord] = []
        self._total_calls: int = 0

    @asynccontextmanager
    async def log_call(self, model: str, operation: str) -> AsyncIterator[CallAccumulator]:
        """Context manager to log a complete LLM call."""
        acc = CallAccumulator(model=model, operation=operation)
        try:
            yield acc
        finally:
            record = CallRecord(
                call_id=str(uuid7()),
                timestamp=datetime.now(timezone.utc),
                model=model,
                operation=operation,
                prompt_text=acc.prompt_text[:2000],
                response_len=acc.response_len,
                success=acc.success,
                latency_ms=acc.elapsed_ms(),
                input_tokens=acc.input_tokens,
                output_tokens=acc.output_tokens,
            )
            self._records.append(record)
            self._total_calls += 1
            if len(self._records) > self._MAX_RECORDS:
                self._records = self._records[-self._MAX_RECORDS:]

            log.info(
                "llm_call_logged",
                model=model,
                operation=operation,
                success=acc.success,
                latency_ms=f"{acc.elapsed_ms():.0f}",
                prompt_len=len(acc.prompt_text),
                response_len=acc.response_len,
            )

    def get_records(self) -> list[CallRecord]:
        return list(self._records)

    @property
    def total_calls(self) -> int:
        return self._total_calls

    @property
    def success_rate(self) -> float:
        if not self._records:
            return 1.0
        successes = sum(1 for r in self._records if r.success)
        return successes / len(self._records)
