"""Conditional extractor - boolean branches of a query."""

import re
import logging
from typing import List, Tuple

from rule_coverage.core.analyzer.base import BaseQueryExtractor
from rule_coverage.core.analyzer.parsers.query_scanner import QueryScanner
from rule_coverage.core.analyzer import constants
from rule_coverage.core.types.query_features import Conditional, ConditionalType

logger = logging.getLogger(__name__)

_WORD_START = r'(?<![\w$@\-])'


class ConditionalExtractor(BaseQueryExtractor):
    """
    Extract the conditional branches of a query.

    Scopes are the query body (after a top-level `return`) plus the inside of
    every [...] predicate and (...) group. A scope with a top-level `and`
    yields one AND branch holding the whole chain (`a and b and c`), and
    likewise for `or`, so the splitter sees every operand. Other branch kinds:
    - not(...): the negated expression
    - if (...): the test expression
    - some/every $x in ...: the whole quantified expression
    - exists(...), contains(...) and friends: the function call
    - @A op @B: attribute-to-attribute comparisons

    Inline function bodies are opaque. Branches are ordered by position.
    """

    BOOLEAN_KEYWORDS = (
        ('and', ConditionalType.AND),
        ('or', ConditionalType.OR),
    )

    NOT_PATTERN = re.compile(_WORD_START + r'not\s*\(')
    IF_PATTERN = re.compile(_WORD_START + r'if\s*\(')
    QUANTIFIED_PATTERN = re.compile(
        _WORD_START + r'(?:' + '|'.join(constants.QUANTIFIERS) + r')\s+\$'
    )
    BOOLEAN_FUNCTION_PATTERN = re.compile(
        _WORD_START + r'(?:fn:)?(?:' + '|'.join(re.escape(f) for f in constants.BOOLEAN_FUNCTIONS) + r')\s*\('
    )
    RETURN_PATTERN = re.compile(_WORD_START + r'return(?![\w\-])')
    COMPARISON_PATTERN = re.compile(
        r'@[A-Za-z]\w*\s*(?:!=|<=|>=|=|<|>|\b(?:eq|ne|lt|le|gt|ge)\b)\s*(?:[\w$.:\-]*/)?@[A-Za-z]\w*'
    )

    def extract(self, scanner: QueryScanner) -> List[Conditional]:
        query = scanner.query
        found: List[Conditional] = []

        for start, end in self._scopes(scanner):
            for keyword, conditional_type in self.BOOLEAN_KEYWORDS:
                if scanner.first_top_level_keyword(keyword, start, end) is None:
                    continue
                text = query[start:end]
                expression = text.strip()
                if expression:
                    position = start + len(text) - len(text.lstrip())
                    found.append(Conditional(conditional_type, expression, position))

        found.extend(self._call_branches(scanner, self.NOT_PATTERN, ConditionalType.NOT, inner_only=True))
        found.extend(self._call_branches(scanner, self.IF_PATTERN, ConditionalType.IF, inner_only=True))
        found.extend(self._call_branches(scanner, self.BOOLEAN_FUNCTION_PATTERN,
                                         ConditionalType.BOOLEAN_FUNCTION, inner_only=False))

        for match in self.QUANTIFIED_PATTERN.finditer(scanner.structural):
            end = scanner.enclosing_scope_end(match.start())
            expression = query[match.start():end].strip()
            if expression:
                found.append(Conditional(ConditionalType.QUANTIFIED, expression, match.start()))

        for match in self.COMPARISON_PATTERN.finditer(scanner.structural):
            found.append(Conditional(ConditionalType.COMPARISON, query[match.start():match.end()], match.start()))

        found.sort(key=lambda c: c.position)
        return found

    @classmethod
    def _scopes(cls, scanner: QueryScanner) -> List[Tuple[int, int]]:
        """Scanner scopes, with the root scope starting after its last top-level `return`."""
        scopes = scanner.scopes()
        root_start, root_end = scopes[0]
        for match in cls.RETURN_PATTERN.finditer(scanner.structural):
            if scanner.depth_at(match.start()) == 0:
                root_start = match.end()
        scopes[0] = (root_start, root_end)
        return scopes

    @staticmethod
    def _call_branches(scanner: QueryScanner, pattern: 're.Pattern',
                       conditional_type: ConditionalType, inner_only: bool) -> List[Conditional]:
        """Branches for keyword( ... ) constructs, using the matched bracket pair."""
        query = scanner.query
        branches = []
        for match in pattern.finditer(scanner.structural):
            group = scanner.group_at(match.end() - 1)
            if group is None:
                continue
            _, close, _ = group
            if inner_only:
                expression = query[match.end():close].strip()
            else:
                expression = query[match.start():close + 1].strip()
            if expression:
                branches.append(Conditional(conditional_type, expression, match.start()))
        return branches
