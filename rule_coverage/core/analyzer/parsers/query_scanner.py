"""
Lexical scanner for XPath rule queries.

The query language is never parsed into a grammar. The scanner only knows
enough to tell structure from text:
- string literals and (: comments :) are masked so nothing inside them counts
- inline function bodies { ... } are opaque to conditional detection
- () and [] pairs form scopes, with a nesting depth for every offset
"""

import re
import logging
from typing import Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)


class QueryScanner:
    """
    Masked, bracket-aware view of one query text.

    All offsets refer to the original query; masking preserves length and
    newlines, so an offset found in a masked view is valid in the query.
    """

    KEYWORD_TEMPLATE = r'(?<![\w$@\-]){keyword}(?![\w\-])'
    LET_PATTERN = re.compile(r'(?<![\w$\-])let\s+\$')
    UNION_PATTERN = re.compile(r'\||(?<![\w$@\-])union(?![\w\-])')

    OPENERS = '(['
    CLOSERS = {')': '(', ']': '['}

    def __init__(self, query: str):
        self.query = query if isinstance(query, str) else ''
        self.masked, self.literals = self._mask_literals(self.query)
        self.function_bodies = self._find_function_bodies(self.masked)
        self.structural = self._blank_ranges(self.masked, self.function_bodies)
        self.groups = self._find_groups(self.structural)
        self._group_by_start: Dict[int, Tuple[int, int, str]] = {g[0]: g for g in self.groups}
        self._depths = self._compute_depths(self.structural)
        self._keyword_patterns: Dict[str, 're.Pattern'] = {}

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _blank(chars: List[str], start: int, end: int) -> None:
        for j in range(start, end):
            if chars[j] != '\n':
                chars[j] = ' '

    @classmethod
    def _mask_literals(cls, query: str) -> Tuple[str, List[Tuple[int, int]]]:
        """
        Blank out string literals (quotes included) and comments.

        Returns:
            Tuple of (masked text, literal spans as (open quote, end) offsets)
        """
        chars = list(query)
        literals = []
        n = len(query)
        i = 0
        while i < n:
            c = query[i]
            if c in ('"', "'"):
                # A doubled quote simply closes and reopens the literal
                end = query.find(c, i + 1)
                end = n if end == -1 else end + 1
                literals.append((i, end))
                cls._blank(chars, i, end)
                i = end
            elif query.startswith('(:', i):
                depth = 1
                j = i + 2
                while j < n and depth:
                    if query.startswith('(:', j):
                        depth += 1
                        j += 2
                    elif query.startswith(':)', j):
                        depth -= 1
                        j += 2
                    else:
                        j += 1
                cls._blank(chars, i, j)
                i = j
            else:
                i += 1
        return ''.join(chars), literals

    @staticmethod
    def _find_function_bodies(text: str) -> List[Tuple[int, int]]:
        """Outermost {...} ranges as (open, close) offsets."""
        bodies = []
        depth = 0
        start = None
        for i, c in enumerate(text):
            if c == '{':
                if depth == 0:
                    start = i
                depth += 1
            elif c == '}' and depth:
                depth -= 1
                if depth == 0:
                    bodies.append((start, i))
        if depth and start is not None:
            bodies.append((start, len(text) - 1))
        return bodies

    @classmethod
    def _blank_ranges(cls, text: str, ranges: List[Tuple[int, int]]) -> str:
        if not ranges:
            return text
        chars = list(text)
        for start, end in ranges:
            cls._blank(chars, start + 1, end)
        return ''.join(chars)

    @classmethod
    def _find_groups(cls, text: str) -> List[Tuple[int, int, str]]:
        """Matched bracket pairs as (open, close, opener), sorted by open offset."""
        stack: List[Tuple[str, int]] = []
        groups = []
        for i, c in enumerate(text):
            if c in cls.OPENERS:
                stack.append((c, i))
            elif c in cls.CLOSERS:
                opener = cls.CLOSERS[c]
                for k in range(len(stack) - 1, -1, -1):
                    if stack[k][0] == opener:
                        groups.append((stack[k][1], i, opener))
                        del stack[k:]
                        break
        groups.sort()
        return groups

    @classmethod
    def _compute_depths(cls, text: str) -> List[int]:
        """Bracket depth in effect at every offset (never negative)."""
        depths = [0] * (len(text) + 1)
        depth = 0
        for i, c in enumerate(text):
            depths[i] = depth
            if c in cls.OPENERS:
                depth += 1
            elif c in cls.CLOSERS:
                depth = max(depth - 1, 0)
        depths[len(text)] = depth
        return depths

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def has_let_expressions(self) -> bool:
        return bool(self.LET_PATTERN.search(self.masked))

    @property
    def has_unions(self) -> bool:
        return bool(self.UNION_PATTERN.search(self.masked))

    def depth_at(self, offset: int) -> int:
        return self._depths[min(max(offset, 0), len(self._depths) - 1)]

    def scopes(self) -> List[Tuple[int, int]]:
        """
        Every region a boolean keyword can bind in.

        Returns:
            The whole query followed by the inside of each bracket pair,
            as (start, end) offsets with end exclusive
        """
        return [(0, len(self.query))] + [(start + 1, end) for start, end, _ in self.groups]

    def group_at(self, open_offset: int) -> Optional[Tuple[int, int, str]]:
        """Bracket pair opened at the given offset, if any."""
        return self._group_by_start.get(open_offset)

    def enclosing_scope_end(self, offset: int) -> int:
        """End offset of the innermost bracket pair containing offset."""
        best = None
        for start, end, _ in self.groups:
            if start < offset < end and (best is None or start > best[0]):
                best = (start, end)
        return best[1] if best else len(self.query)

    def keyword_pattern(self, keyword: str) -> 're.Pattern':
        """Compiled whole-word pattern for a keyword, cached per scanner."""
        if keyword not in self._keyword_patterns:
            self._keyword_patterns[keyword] = re.compile(
                self.KEYWORD_TEMPLATE.format(keyword=re.escape(keyword))
            )
        return self._keyword_patterns[keyword]

    def first_top_level_keyword(self, keyword: str, start: int, end: int) -> Optional['re.Match']:
        """
        First occurrence of keyword at the scope's own depth.

        Args:
            keyword: Word to find (e.g. 'and')
            start: Scope start offset
            end: Scope end offset (exclusive)

        Returns:
            Match object or None
        """
        base_depth = self.depth_at(start)
        for match in self.keyword_pattern(keyword).finditer(self.structural, start, end):
            if self.depth_at(match.start()) == base_depth:
                return match
        return None
