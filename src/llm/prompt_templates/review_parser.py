"""Prompt template for extracting a review from pasted text."""

from __future__ import annotations


def build_parse_prompt(raw_text: str) -> str:
    return f"""Analyze the following raw text which contains a copied review from a platform (like Google Maps, TripAdvisor, TheFork).
Extract the following fields into a JSON object:
- author: The name of the reviewer. If unknown, use "Cliente".
- rating: The rating as a number (1-5). If not found, default to 5.
- text: The actual review content (remove dates, UI elements, "Read more", etc.).
- source: Best guess of the source based on text markers ('Google', 'TripAdvisor', 'TheFork'). Default to 'Manual'.
- date: The date string if present (e.g., "2 days ago", "12/05/2024").

Raw Text:
\"\"\"
{raw_text}
\"\"\"

Return ONLY raw JSON."""
