"""Prompt templates for local-search marketing copy (profile, menu, posts, Q&A)."""

from __future__ import annotations

from src.core.types import DishStyle, PostTopic

_DISH_STYLES: dict[DishStyle, str] = {
    DishStyle.GOURMET: "refined and evocative, fine-dining vocabulary",
    DishStyle.RUSTIC: "warm and homely, highlight tradition and local ingredients",
    DishStyle.SIMPLE: "plain and clear, one short sentence",
}

_POST_TOPICS: dict[PostTopic, str] = {
    PostTopic.UPDATE: "a news update",
    PostTopic.OFFER: "a special offer",
    PostTopic.EVENT: "an upcoming event",
}


def build_profile_prompt(tenant_name: str, cuisine_type: str, location: str) -> str:
    return f"""You are a local SEO expert for restaurants on Google Maps.
Restaurant: "{tenant_name}"
Cuisine: {cuisine_type or "not specified"}
Location: {location or "not specified"}

Return a JSON object with:
- description: a Google Business Profile description in Italian, max 750 characters, naturally including local search keywords.
- keywords: a list of 8-12 search keywords customers would use.
- categories: a list of 3-5 suggested Google Business categories.

Return ONLY raw JSON."""


def build_dish_prompt(dish_name: str, ingredients: str, style: DishStyle) -> str:
    return f"""Write a menu description in Italian for the dish "{dish_name}".
Ingredients: {ingredients or "not specified"}
Style: {_DISH_STYLES[style]}
Max 40 words. Return only the description."""


def build_post_prompt(tenant_name: str, topic: PostTopic, details: str) -> str:
    return f"""Write a Google Business Profile post in Italian for "{tenant_name}" announcing {_POST_TOPICS[topic]}.
Details: {details}
Max 1500 characters, end with a short call to action. Return only the post text."""


def build_qna_prompt(tenant_name: str, cuisine_type: str) -> str:
    return f"""Generate the 5 questions customers most often ask on Google Maps about "{tenant_name}" ({cuisine_type or "restaurant"}), with short helpful answers in Italian from the owner.
Return a JSON array of objects with keys "question" and "answer". Return ONLY raw JSON."""
