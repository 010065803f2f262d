"""
Shared utility functions for query analysis.

Provides small, total text helpers used across extractors and checkers.
"""

import re
from typing import Iterable, List, Optional

_WHITESPACE = re.compile(r'\s+')


def normalize_whitespace(text: Optional[str]) -> str:
    """Collapse every whitespace run to a single space and trim."""
    if not text or not isinstance(text, str):
        return ''
    return _WHITESPACE.sub(' ', text).strip()


def truncate_expression(text: Optional[str], max_length: int) -> str:
    """
    Shorten an expression for display.

    Args:
        text: Expression text (any whitespace layout)
        max_length: Maximum length of the returned string, ellipsis included

    Returns:
        Whitespace-normalized text, cut with '...' when longer than max_length
    """
    normalized = normalize_whitespace(text)
    if len(normalized) <= max_length:
        return normalized
    return normalized[:max(max_length - 3, 1)] + '...'


def dedupe(items: Iterable[str]) -> List[str]:
    """Remove duplicates, keeping first-seen order."""
    seen = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


def count_newlines(text: str, end: int) -> int:
    """Number of newlines in text before offset end."""
    return text.count('\n', 0, max(end, 0))
