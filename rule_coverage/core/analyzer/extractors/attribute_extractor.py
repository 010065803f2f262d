"""Attribute extractor - `@Name` attribute references."""

import re
import logging
from typing import List

from rule_coverage.core.analyzer.base import BaseQueryExtractor
from rule_coverage.core.analyzer.parsers.query_scanner import QueryScanner
from rule_coverage.core.analyzer import constants, utils

logger = logging.getLogger(__name__)


class AttributeExtractor(BaseQueryExtractor):
    """
    Extract attribute names referenced with `@`.

    The operator attribute (`@Op`) is excluded: its compared values are
    reported as operators instead.
    """

    ATTRIBUTE_PATTERN = re.compile(r'(?<![\w$])@([A-Za-z][A-Za-z0-9_]*)')

    def extract(self, scanner: QueryScanner) -> List[str]:
        names = [
            m.group(1) for m in self.ATTRIBUTE_PATTERN.finditer(scanner.masked)
            if m.group(1) != constants.OPERATOR_ATTRIBUTE
        ]
        return utils.dedupe(names)
