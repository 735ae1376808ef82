"""
Extract Step Utilities

Helpers that normalize backend output to each extract type's shape.
"""

import re
from typing import List

# Leading bullet or numbering ("- ", "• ", "* ", "1. ", "2) ")
_LIST_MARKER = re.compile(r"^\s*(?:[-•*]\s*|\d+[.)]\s+)")


def split_items(text: str) -> List[str]:
    """
    Split a list-like model response into clean items.

    Accepts comma-separated lines and bulleted/numbered lines.

    Example:
        >>> split_items("- AI\\n- robotics, automation")
        ['AI', 'robotics', 'automation']
    """
    items = []
    for line in text.splitlines():
        line = _LIST_MARKER.sub("", line).strip()
        if not line:
            continue
        # Drop a "Keywords:" style label the model sometimes adds
        if ":" in line and line.split(":", 1)[0].strip().lower() in {"keywords", "key phrases"}:
            line = line.split(":", 1)[1]
        items.extend(part.strip() for part in line.split(",") if part.strip())
    return items


def format_keywords(text: str) -> str:
    """
    Return keywords as one comma-separated line, de-duplicated case-insensitively.

    Example:
        >>> format_keywords("AI\\nai\\n- Machine learning")
        'AI, Machine learning'
    """
    seen = set()
    keywords = []
    for item in split_items(text):
        key = item.lower()
        if key not in seen:
            seen.add(key)
            keywords.append(item)
    return ", ".join(keywords) if keywords else text.strip()


def format_itemized(text: str) -> str:
    """Return one "- item" per line. Lines are kept whole (entity types may contain commas)."""
    lines = [_LIST_MARKER.sub("", line).strip() for line in text.splitlines()]
    lines = [line for line in lines if line]
    if not lines:
        return text.strip()
    return "\n".join(f"- {line}" for line in lines)
