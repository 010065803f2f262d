"""Attribute coverage checker."""

import logging

from rule_coverage.core.coverage.base import BaseCoverageChecker
from rule_coverage.core.coverage import heuristics
from rule_coverage.core.types.coverage_result import FeatureCategory

logger = logging.getLogger(__name__)


class AttributeChecker(BaseCoverageChecker):
    """Check that every attribute the query tests is exhibited by the examples."""

    category = FeatureCategory.ATTRIBUTES

    def search_text(self, feature: str) -> str:
        return f"@{feature}"

    def is_covered(self, feature: str, content: str) -> bool:
        return heuristics.attribute_present(feature, content)
