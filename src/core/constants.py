"""System-wide constants. All magic numbers and strings live here."""

from __future__ import annotations

# ── Storage Namespaces ───────────────────────────────────────────
NS_REVIEWS = "reviews"
NS_IDENTITY = "identity"
NS_USAGE = "usage"
KEY_SEPARATOR = ":"

# ── Session Marker ───────────────────────────────────────────────
SESSION_MARKER_FILENAME = "reviewdesk_session"

# ── Review Defaults ──────────────────────────────────────────────
DEFAULT_AUTHOR = "Cliente"
DEFAULT_RATING = 5
DATE_LABEL_TODAY = "Oggi"
DATE_LABEL_NOW = "Adesso"

# ── LLM ──────────────────────────────────────────────────────────
REPLY_TEMPERATURE = 0.7
REPLY_TOP_K = 40
REPLY_TOP_P = 0.95
MAX_PHOTO_BYTES = 5 * 1024 * 1024  # 5 MB upload ceiling
