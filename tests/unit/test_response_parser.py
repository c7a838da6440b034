"""Tests for LLM response parser."""

from __future__ import annotations

import pytest

from src.core.exceptions import ParseError
from src.core.types import ReviewSource
from src.llm.response_parser import ResponseParser


@pytest.fixture
def parser() -> ResponseParser:
    return ResponseParser()


class TestLoadJSON:
    def test_plain(self, parser: ResponseParser) -> None:
        assert parser.load_json('{"a": 1}') == {"a": 1}

    def test_code_fence(self, parser: ResponseParser) -> None:
        raw = 'Here you go:\n```json\n{"author": "Anna"}\n```'
        assert parser.load_json(raw) == {"author": "Anna"}

    def test_bare_object_in_prose(self, parser: ResponseParser) -> None:
        raw = 'Sure! {"author": "Anna", "rating": 4} Hope it helps.'
        assert parser.load_json(raw) == {"author": "Anna", "rating": 4}

    def test_garbage(self, parser: ResponseParser) -> None:
        with pytest.raises(ParseError):
            parser.load_json("no json at all")


class TestParseReview:
    def test_full_payload(self, parser: ResponseParser) -> None:
        raw = (
            '{"author": "Mark T.", "rating": 2, "text": "Slow service", '
            '"source": "TripAdvisor", "date": "3 days ago"}'
        )
        parsed = parser.parse_review(raw)
        assert parsed.author == "Mark T."
        assert parsed.rating == 2
        assert parsed.text == "Slow service"
        assert parsed.source == ReviewSource.TRIPADVISOR
        assert parsed.date == "3 days ago"

    def test_defaults_for_missing_fields(self, parser: ResponseParser) -> None:
        parsed = parser.parse_review('{"text": "Buono"}')
        assert parsed.author == "Cliente"
        assert parsed.rating == 5
        assert parsed.source == ReviewSource.MANUAL
        assert parsed.date == "Oggi"

    def test_unknown_source_is_manual(self, parser: ResponseParser) -> None:
        parsed = parser.parse_review('{"text": "x", "source": "Yelp"}')
        assert parsed.source == ReviewSource.MANUAL

    @pytest.mark.parametrize(
        ("rating", "expected"),
        [('"4"', 4), ("3.6", 4), ("0", 5), ('"five"', 5), ("null", 5), ("9", 5), ("-2", 1)],
    )
    def test_rating_coercion(self, parser: ResponseParser, rating: str, expected: int) -> None:
        parsed = parser.parse_review(f'{{"text": "x", "rating": {rating}}}')
        assert parsed.rating == expected

    def test_array_rejected(self, parser: ResponseParser) -> None:
        with pytest.raises(ParseError):
            parser.parse_review("[1, 2]")


class TestMarketingPayloads:
    def test_profile(self, parser: ResponseParser) -> None:
        raw = '{"description": "Cucina tipica", "keywords": ["canederli"], "categories": ["Ristorante"]}'
        profile = parser.parse_profile(raw)
        assert profile.description == "Cucina tipica"
        assert profile.keywords == ["canederli"]
        assert profile.categories == ["Ristorante"]

    def test_profile_without_description(self, parser: ResponseParser) -> None:
        with pytest.raises(ParseError):
            parser.parse_profile('{"keywords": []}')

    def test_qna_list(self, parser: ResponseParser) -> None:
        raw = '[{"question": "Parcheggio?", "answer": "Sì"}, {"question": "", "answer": "x"}]'
        pairs = parser.parse_qna(raw)
        assert len(pairs) == 1
        assert pairs[0].question == "Parcheggio?"

    def test_qna_wrapped(self, parser: ResponseParser) -> None:
        raw = '{"pairs": [{"question": "Cani ammessi?", "answer": "Certo"}]}'
        assert parser.parse_qna(raw)[0].answer == "Certo"

    def test_qna_empty(self, parser: ResponseParser) -> None:
        with pytest.raises(ParseError):
            parser.parse_qna("[]")
