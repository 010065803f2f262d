"""Operator coverage checker."""

import logging

from rule_coverage.core.coverage.base import BaseCoverageChecker
from rule_coverage.core.coverage import heuristics
from rule_coverage.core.types.coverage_result import FeatureCategory

logger = logging.getLogger(__name__)


class OperatorChecker(BaseCoverageChecker):
    """
    Check that every operator of the query is used in the examples.

    Query operators match their source-language spelling too: `and` is
    covered by `&&`, `or` by `||`, `!=` by `<>`.
    """

    category = FeatureCategory.OPERATORS

    def is_covered(self, feature: str, content: str) -> bool:
        return heuristics.operator_present(feature, content)
