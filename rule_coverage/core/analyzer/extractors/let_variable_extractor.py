"""Let variable extractor - `let $name := value` declarations."""

import re
import logging
from typing import List, Tuple

from rule_coverage.core.analyzer.base import BaseQueryExtractor
from rule_coverage.core.analyzer.parsers.query_scanner import QueryScanner
from rule_coverage.core.types.query_features import LetVariable

logger = logging.getLogger(__name__)


class LetVariableExtractor(BaseQueryExtractor):
    """
    Extract variables bound by let clauses.

    A let clause runs from `let` to the next `let` or `return` at the same
    bracket depth. Declarations inside it are separated by top-level commas;
    both `:=` and `=` bindings are accepted.
    """

    LET_PATTERN = re.compile(r'(?<![\w$\-])let(?=\s)')
    CLAUSE_END_PATTERN = re.compile(r'(?<![\w$\-])(?:let|return)(?![\w\-])')
    DECLARATION_PATTERN = re.compile(r'^\s*\$([A-Za-z_][\w\-]*)\s*:?=\s*(.+?)\s*$', re.DOTALL)

    def extract(self, scanner: QueryScanner) -> List[LetVariable]:
        variables = []
        for start, end in self.clause_ranges(scanner):
            for piece_start, piece_end in self._split_declarations(scanner.masked, start, end):
                match = self.DECLARATION_PATTERN.match(scanner.query[piece_start:piece_end])
                if match:
                    variables.append(LetVariable(name=f"${match.group(1)}", value=match.group(2)))
        return variables

    def clause_ranges(self, scanner: QueryScanner) -> List[Tuple[int, int]]:
        """
        Offsets of every let clause body.

        Args:
            scanner: QueryScanner over the query text

        Returns:
            (start, end) pairs from after `let` up to the clause terminator
        """
        ranges = []
        for let_match in self.LET_PATTERN.finditer(scanner.structural):
            depth = scanner.depth_at(let_match.start())
            end = len(scanner.query)
            for end_match in self.CLAUSE_END_PATTERN.finditer(scanner.structural, let_match.end()):
                if scanner.depth_at(end_match.start()) == depth:
                    end = end_match.start()
                    break
            ranges.append((let_match.end(), end))
        return ranges

    @staticmethod
    def _split_declarations(masked: str, start: int, end: int) -> List[Tuple[int, int]]:
        """Split a clause body at commas outside brackets and braces."""
        pieces = []
        depth = 0
        piece_start = start
        for i in range(start, end):
            c = masked[i]
            if c in '([{':
                depth += 1
            elif c in ')]}':
                depth = max(depth - 1, 0)
            elif c == ',' and depth == 0:
                pieces.append((piece_start, i))
                piece_start = i + 1
        pieces.append((piece_start, end))
        return pieces
