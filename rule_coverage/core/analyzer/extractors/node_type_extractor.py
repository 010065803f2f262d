"""Node type extractor - AST node names referenced by path steps."""

import re
import logging
from typing import List

from rule_coverage.core.analyzer.base import BaseQueryExtractor
from rule_coverage.core.analyzer.parsers.query_scanner import QueryScanner
from rule_coverage.core.analyzer import constants, utils

logger = logging.getLogger(__name__)


class NodeTypeExtractor(BaseQueryExtractor):
    """
    Extract node types from descendant steps and axis steps.

    Matches `//Name`, `.//Name` and `axis::Name` where Name starts with an
    upper-case letter. Known attribute names are never node types.
    """

    STEP_PATTERN = re.compile(r'(?://|::)\s*([A-Z][A-Za-z0-9_]*)')

    def extract(self, scanner: QueryScanner) -> List[str]:
        names = [
            m.group(1) for m in self.STEP_PATTERN.finditer(scanner.masked)
            if m.group(1) not in constants.PMD_ATTRIBUTE_NAMES
        ]
        return utils.dedupe(names)
