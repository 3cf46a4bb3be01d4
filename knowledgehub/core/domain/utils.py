"""Pure helpers shared by the domain models and services.

Tag handling contract
---------------------
Tags are compared as plain strings, so every tag that enters the client
goes through :func:`normalize_tag` first:

* Surrounding whitespace is removed and the value is lowercased.
* Empty results are discarded.
* A tag list never holds the same value twice; the first occurrence wins
  and order is otherwise preserved.

Helpers here return new lists instead of mutating their inputs.
"""

import unicodedata
from collections.abc import Iterable
from datetime import datetime

MAX_RECENT_SEARCHES = 5
PREVIEW_LENGTH = 150
PREVIEW_TAG_COUNT = 3


def clean_text(text: str) -> str:
    """Remove BOM markers and apply NFKC normalization."""
    if not text:
        return ""
    cleaned = text.replace("\ufeff", "").replace("\ufffd", "")
    return unicodedata.normalize("NFKC", cleaned)


def normalize_tag(raw: str) -> str:
    """Trim and lowercase a user-entered tag. May return an empty string."""
    return clean_text(raw).strip().lower()


def normalize_tags(raw_tags: Iterable[str]) -> list[str]:
    """Normalize and deduplicate a tag sequence, keeping first-seen order."""
    tags: list[str] = []
    for raw in raw_tags:
        tag = normalize_tag(str(raw))
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def add_tag(tags: list[str], raw: str) -> list[str]:
    """Append ``raw`` to ``tags`` when it normalizes to a new, non-empty tag.

    Returns:
        A new list; equal to ``tags`` when nothing was added.
    """
    tag = normalize_tag(raw)
    if not tag or tag in tags:
        return list(tags)
    return [*tags, tag]


def remove_tag(tags: list[str], tag: str) -> list[str]:
    return [t for t in tags if t != tag]


def toggle_tag(selected: list[str], tag: str) -> list[str]:
    """Deselect ``tag`` if selected, otherwise append it."""
    if tag in selected:
        return remove_tag(selected, tag)
    return [*selected, tag]


def merge_tags(tags: list[str], incoming: Iterable[str]) -> list[str]:
    """Append every new tag from ``incoming``, in order."""
    merged = list(tags)
    for raw in incoming:
        merged = add_tag(merged, raw)
    return merged


def push_recent(recent: list[str], query: str, limit: int = MAX_RECENT_SEARCHES) -> list[str]:
    """Move ``query`` to the front of a bounded, duplicate-free history."""
    return [query, *(q for q in recent if q != query)][:limit]


def truncate_content(text: str, max_length: int = PREVIEW_LENGTH) -> str:
    """Shorten text for previews, marking the cut with an ellipsis."""
    if len(text) > max_length:
        return text[:max_length] + "..."
    return text


def preview_tags(tags: list[str], count: int = PREVIEW_TAG_COUNT) -> list[str]:
    """First ``count`` tags plus a ``+N more`` marker when some are hidden."""
    shown = tags[:count]
    if len(tags) > count:
        shown.append(f"+{len(tags) - count} more")
    return shown


def parse_timestamp(value: object) -> datetime | None:
    """Parse an ISO-8601 timestamp, returning None when absent or unparseable."""
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def format_date(value: datetime | None) -> str:
    """Render a date like ``Mar 7, 2025``."""
    if value is None:
        return ""
    return f"{value:%b} {value.day}, {value.year}"
