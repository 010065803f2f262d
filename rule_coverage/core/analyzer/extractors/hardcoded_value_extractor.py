"""Hard-coded value extractor - literals that belong in let variables."""

import re
import logging
from typing import List, Tuple

from rule_coverage.core.analyzer.base import BaseQueryExtractor
from rule_coverage.core.analyzer.extractors.let_variable_extractor import LetVariableExtractor
from rule_coverage.core.analyzer.parsers.query_scanner import QueryScanner
from rule_coverage.core.analyzer import constants
from rule_coverage.core.types.hardcoded_value import HardcodedValue

logger = logging.getLogger(__name__)


class HardcodedValueExtractor(BaseQueryExtractor):
    """
    Find string and number literals outside let declarations.

    Rules stay configurable when their constants are bound once in a let
    clause. Empty strings and the numbers 0 and 1 are allowed inline.
    """

    NUMBER_PATTERN = re.compile(r'(?<![\w.$@\-])(\d+(?:\.\d+)?)(?![\w.])')

    def __init__(self, config=None):
        super().__init__(config)
        self.let_extractor = LetVariableExtractor(config)

    def extract(self, scanner: QueryScanner) -> List[HardcodedValue]:
        let_ranges = self.let_extractor.clause_ranges(scanner)
        values = []

        for start, end in scanner.literals:
            if self._in_ranges(start, let_ranges):
                continue
            text = scanner.query[start + 1:end - 1] if end - start >= 2 else ''
            if not text:
                continue
            values.append(HardcodedValue(
                type='string',
                value=text,
                position=start,
                recommendation=constants.HARDCODED_STRING_RECOMMENDATION.format(value=text)
            ))

        for match in self.NUMBER_PATTERN.finditer(scanner.masked):
            number = match.group(1)
            if number in constants.ALLOWED_INLINE_NUMBERS or self._in_ranges(match.start(), let_ranges):
                continue
            values.append(HardcodedValue(
                type='number',
                value=number,
                position=match.start(),
                recommendation=constants.HARDCODED_NUMBER_RECOMMENDATION.format(value=number)
            ))

        values.sort(key=lambda v: v.position)
        return values

    @staticmethod
    def _in_ranges(offset: int, ranges: List[Tuple[int, int]]) -> bool:
        return any(start <= offset < end for start, end in ranges)
