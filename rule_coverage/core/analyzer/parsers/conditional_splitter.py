"""
Conditional splitter.

Splits a compound condition into independently checkable parts at top-level
boolean keywords. A keyword is a split point only outside string literals,
outside any bracket nesting and with whitespace (or a string edge) on both
sides. Malformed input never raises: an unterminated literal or bracket just
means no further split points.
"""

import logging
from typing import List

logger = logging.getLogger(__name__)


class ConditionalSplitter:
    """Single-pass, quote and bracket aware keyword splitter."""

    QUOTES = ('"', "'")
    OPENERS = '(['
    CLOSERS = ')]'

    def split(self, expression: str, keyword: str = 'and') -> List[str]:
        """
        Split expression at top-level occurrences of keyword.

        Args:
            expression: Condition text, e.g. "@A = 'x' and (@B or @C)"
            keyword: Boolean keyword to split on

        Returns:
            Trimmed, non-empty parts in order; [expression] when there is
            no split point or every part is blank, [] only for empty input
        """
        if not expression or not isinstance(expression, str):
            return []

        segments = []
        segment_start = 0
        quote = None
        depth = 0
        i = 0
        n = len(expression)

        while i < n:
            c = expression[i]
            if quote:
                if c == quote and not self._is_escaped(expression, i):
                    quote = None
            elif c in self.QUOTES and not self._is_escaped(expression, i):
                quote = c
            elif c in self.OPENERS:
                depth += 1
            elif c in self.CLOSERS:
                depth = max(depth - 1, 0)
            elif depth == 0 and self._is_keyword_at(expression, i, keyword):
                segments.append(expression[segment_start:i])
                i += len(keyword)
                segment_start = i
                continue
            i += 1

        if not segments:
            return [expression]

        segments.append(expression[segment_start:])
        parts = [s.strip() for s in segments if s.strip()]
        return parts or [expression]

    @staticmethod
    def _is_escaped(text: str, index: int) -> bool:
        backslashes = 0
        j = index - 1
        while j >= 0 and text[j] == '\\':
            backslashes += 1
            j -= 1
        return backslashes % 2 == 1

    @staticmethod
    def _is_keyword_at(text: str, index: int, keyword: str) -> bool:
        if not text.startswith(keyword, index):
            return False
        end = index + len(keyword)
        before_ok = index == 0 or text[index - 1].isspace()
        after_ok = end == len(text) or text[end].isspace()
        return before_ok and after_ok


_default_splitter = ConditionalSplitter()


def split_conditions(expression: str, keyword: str = 'and') -> List[str]:
    """Split expression at top-level keyword occurrences (see ConditionalSplitter.split)."""
    return _default_splitter.split(expression, keyword)
