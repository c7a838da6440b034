"""Prompt templates for review reply generation."""

from __future__ import annotations

from src.core.types import ReplyLanguage, ReplyRequest, ReplyTone

_TONE_INSTRUCTIONS: dict[ReplyTone, str] = {
    ReplyTone.FORMAL: (
        "Use a strictly professional, respectful, and institutional tone. Avoid slang."
    ),
    ReplyTone.INFORMAL: (
        "Use a casual, relaxed, and conversational tone. "
        "Be polite but friendly, like talking to an acquaintance."
    ),
    ReplyTone.FRIENDLY: (
        "Use a very warm, welcoming, and enthusiastic tone. "
        "Use a few appropriate emojis. Make the customer feel like family."
    ),
    ReplyTone.CONCISE: (
        "Be extremely brief, direct, and concise. Max 2 sentences. "
        "Thank and say goodbye without fluff."
    ),
}

_LANGUAGE_NAMES: dict[ReplyLanguage, str] = {
    ReplyLanguage.IT: "Italian",
    ReplyLanguage.EN: "English",
    ReplyLanguage.DE: "German (Deutsch)",
}


def tone_instruction(tone: ReplyTone) -> str:
    return _TONE_INSTRUCTIONS.get(tone, "Maintain a professional but hospitable tone.")


def language_name(language: ReplyLanguage) -> str:
    return _LANGUAGE_NAMES.get(language, "Italian")


def build_reply_prompt(request: ReplyRequest) -> str:
    """Build the single-turn prompt for a review reply."""
    restaurant = request.tenant_name or "the restaurant"

    identity_block = ""
    if request.identity is not None and not request.identity.is_empty:
        identity_block = f"""
Brand Identity (stay consistent with it):
{request.identity.to_prompt_summary()}
"""

    return f"""Review Details:
- Author: {request.author_name}
- Rating: {request.rating}/5 stars
- Review Content: "{request.review_text}"

Task: Write a response on behalf of "{restaurant}" management.

Tone Instructions: {tone_instruction(request.tone)}
{identity_block}
General Guidelines:
If the review is positive, thank them and invite them back.
If the review is negative, apologize sincerely for the specific issues mentioned, explain we take feedback seriously, and ask them to give us another chance.

IMPORTANT: Write the response in {language_name(request.language)}. Return only the reply text."""
