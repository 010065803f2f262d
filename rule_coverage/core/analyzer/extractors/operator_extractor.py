"""Operator extractor - logical, comparison and arithmetic operators."""

import re
import logging
from typing import List, Tuple

from rule_coverage.core.analyzer.base import BaseQueryExtractor
from rule_coverage.core.analyzer.parsers.query_scanner import QueryScanner
from rule_coverage.core.analyzer import utils

logger = logging.getLogger(__name__)


class OperatorExtractor(BaseQueryExtractor):
    """
    Extract operators used outside string literals.

    Vocabulary: and, or, =, !=, <, <=, >, >=, +, -, *, /.
    - `and`/`or` count only as whole words
    - arithmetic symbols count only with whitespace on both sides, so path
      slashes, wildcards and hyphenated names are ignored
    - `:=` (let binding) and `=>` (arrow) are not operators

    Values compared against `@Op` (e.g. `@Op = '+='`) are added as operators.
    """

    TOKEN_PATTERN = re.compile(
        r'(?<![\w$@\-])(?P<word>and|or)(?![\w\-])'
        r'|(?P<binding>:=|=>)'
        r'|(?P<cmp>!=|<=|>=|=|<|>)'
        r'|(?<=\s)(?P<arith>[+\-*/])(?=\s)'
    )
    OP_VALUE_PATTERN = re.compile(r'@Op\s*(?:!=|=)\s*([\'"])(.+?)\1')

    def extract(self, scanner: QueryScanner) -> List[str]:
        found: List[Tuple[int, str]] = []

        for match in self.TOKEN_PATTERN.finditer(scanner.masked):
            if match.group('binding'):
                continue
            found.append((match.start(), match.group(0)))

        for match in self.OP_VALUE_PATTERN.finditer(scanner.query):
            found.append((match.start(2), match.group(2).strip()))

        found.sort(key=lambda item: item[0])
        return utils.dedupe(op for _, op in found if op)
