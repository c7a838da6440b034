"""Prompt templates for restaurant photo enhancement."""

from __future__ import annotations

from src.core.types import PhotoStyle

_STYLE_INSTRUCTIONS: dict[PhotoStyle, str] = {
    PhotoStyle.NATURAL: "Correct exposure and white balance, keep colours true to life.",
    PhotoStyle.WARM: "Add warm, golden evening light for a cosy, inviting mood.",
    PhotoStyle.BRIGHT: "Make the scene bright and airy, like daylight through large windows.",
    PhotoStyle.DRAMATIC: "Use deep contrast and moody low-key lighting, like a fine-dining menu shot.",
    PhotoStyle.HDR: "Balance highlights and shadows with a vivid high-dynamic-range look.",
}


def build_photo_prompt(style: PhotoStyle) -> str:
    return (
        "You are a professional food and hospitality photo editor. "
        "Enhance this photo for a restaurant's Google and social media profile. "
        f"{_STYLE_INSTRUCTIONS[style]} "
        "Do not add or remove dishes, people or objects. Return only the edited image."
    )
