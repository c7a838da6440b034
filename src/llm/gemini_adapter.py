"""Gemini review assistant using the google-genai SDK."""

from __future__ import annotations

from google import genai
from google.genai import types as genai_types

from config.settings import Settings, get_settings
from src.core.constants import REPLY_TOP_K, REPLY_TOP_P
from src.core.logging import get_logger
from src.llm.base import BaseAssistantImpl
from src.llm.call_logger import LLMCallLogger

log = get_logger(__name__)


class GeminiReviewAssistant(BaseAssistantImpl):
    """Gemini Flash adapter.

    Text operations use ``gemini_model`` (JSON mode for structured output);
    photo enhancement uses the image-capable ``gemini_image_model``.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        call_logger: LLMCallLogger | None = None,
        client: genai.Client | None = None,
    ) -> None:
        settings = settings or get_settings()
        super().__init__(
            model_name=settings.gemini_model,
            call_logger=call_logger,
            timeout_seconds=settings.llm_timeout_seconds,
            max_retries=settings.llm_max_retries,
        )
        self._client = client or genai.Client(
            api_key=settings.gemini_api_key.get_secret_value(),
        )
        self._image_model = settings.gemini_image_model

    async def _call_text(
        self,
        prompt: str,
        json_mode: bool = False,
        temperature: float | None = None,
    ) -> tuple[str, int, int]:
        config = genai_types.GenerateContentConfig(
            temperature=temperature,
            top_k=REPLY_TOP_K if temperature is not None else None,
            top_p=REPLY_TOP_P if temperature is not None else None,
            response_mime_type="application/json" if json_mode else None,
        )
        response = await self._client.aio.models.generate_content(
            model=self._model_name,
            contents=prompt,
            config=config,
        )

        content = response.text or ""

        usage = response.usage_metadata
        input_tokens = (usage.prompt_token_count or 0) if usage else 0
        output_tokens = (usage.candidates_token_count or 0) if usage else 0

        return content, input_tokens, output_tokens

    async def _call_image(self, prompt: str, image: bytes, mime_type: str) -> bytes:
        response = await self._client.aio.models.generate_content(
            model=self._image_model,
            contents=[
                genai_types.Part.from_bytes(data=image, mime_type=mime_type),
                prompt,
            ],
        )

        for candidate in response.candidates or []:
            if candidate.content is None:
                continue
            for part in candidate.content.parts or []:
                if part.inline_data is not None and part.inline_data.data:
                    return part.inline_data.data

        log.warning("gemini_image_missing", model=self._image_model)
        return b""
