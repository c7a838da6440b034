"""Tests for GeminiReviewAssistant with a mocked google-genai client."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from config.settings import Settings
from src.core.exceptions import GenerationError
from src.core.types import DishStyle, PhotoStyle, ReplyRequest
from src.llm.gemini_adapter import GeminiReviewAssistant


def _client(response: object) -> MagicMock:
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(return_value=response)
    return client


def _text_response(text: str | None) -> SimpleNamespace:
    usage = SimpleNamespace(prompt_token_count=30, candidates_token_count=12)
    return SimpleNamespace(text=text, usage_metadata=usage, candidates=[])


@pytest.fixture
def settings() -> Settings:
    return Settings(
        gemini_api_key="test-key",
        gemini_model="gemini-test",
        gemini_image_model="gemini-image-test",
        llm_max_retries=1,
    )


class TestTextCalls:
    @pytest.mark.asyncio
    async def test_reply_uses_sampling_params(self, settings: Settings) -> None:
        client = _client(_text_response("Grazie mille!"))
        assistant = GeminiReviewAssistant(settings, client=client)

        reply = await assistant.generate_reply(
            ReplyRequest(review_text="Ottimo", author_name="Ugo", rating=5),
        )

        assert reply == "Grazie mille!"
        kwargs = client.aio.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-test"
        assert kwargs["config"].temperature == 0.7
        assert kwargs["config"].top_k == 40
        assert kwargs["config"].top_p == 0.95
        assert kwargs["config"].response_mime_type is None

    @pytest.mark.asyncio
    async def test_parse_uses_json_mode(self, settings: Settings) -> None:
        client = _client(_text_response('{"author": "Ugo", "rating": 3, "text": "Ok"}'))
        assistant = GeminiReviewAssistant(settings, client=client)

        parsed = await assistant.parse_raw_review("Ugo 3 stelle Ok")

        assert parsed.author == "Ugo"
        config = client.aio.models.generate_content.call_args.kwargs["config"]
        assert config.response_mime_type == "application/json"
        assert config.temperature is None

    @pytest.mark.asyncio
    async def test_none_text_is_failure(self, settings: Settings) -> None:
        client = _client(_text_response(None))
        assistant = GeminiReviewAssistant(settings, client=client)
        with pytest.raises(GenerationError):
            await assistant.describe_dish("Strudel", "", DishStyle.SIMPLE)

    @pytest.mark.asyncio
    async def test_token_usage_recorded(self, settings: Settings) -> None:
        client = _client(_text_response("ok"))
        assistant = GeminiReviewAssistant(settings, client=client)
        await assistant.generate_reply(ReplyRequest(review_text="x", author_name="y", rating=4))

        record = assistant.call_logger.get_records()[0]
        assert record.input_tokens == 30
        assert record.output_tokens == 12
        assert record.model == "gemini-test"


class TestImageCalls:
    @pytest.mark.asyncio
    async def test_returns_inline_data(self, settings: Settings) -> None:
        part_text = SimpleNamespace(inline_data=None, text="here")
        part_image = SimpleNamespace(inline_data=SimpleNamespace(data=b"PNGDATA"), text=None)
        response = SimpleNamespace(
            candidates=[SimpleNamespace(content=SimpleNamespace(parts=[part_text, part_image]))],
        )
        client = _client(response)
        assistant = GeminiReviewAssistant(settings, client=client)

        data = await assistant.enhance_photo(b"raw", "image/png", PhotoStyle.BRIGHT)

        assert data == b"PNGDATA"
        kwargs = client.aio.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-image-test"
        assert len(kwargs["contents"]) == 2

    @pytest.mark.asyncio
    async def test_no_image_raises(self, settings: Settings) -> None:
        client = _client(SimpleNamespace(candidates=[]))
        assistant = GeminiReviewAssistant(settings, client=client)
        with pytest.raises(GenerationError):
            await assistant.enhance_photo(b"raw", "image/png", PhotoStyle.NATURAL)
