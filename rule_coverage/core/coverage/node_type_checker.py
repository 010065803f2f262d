"""Node type coverage checker."""

import logging
from typing import List, Sequence

from rule_coverage.core.coverage.base import BaseCoverageChecker
from rule_coverage.core.coverage import heuristics
from rule_coverage.core.types.coverage_result import FeatureCategory

logger = logging.getLogger(__name__)


class NodeTypeChecker(BaseCoverageChecker):
    """
    Check that every node type the query walks appears in the examples.

    Structural node types (synthesized by the parser, with no source form)
    are left out of the checkable set instead of being reported missing.
    """

    category = FeatureCategory.NODE_TYPES

    def checkable(self, features: Sequence[str]) -> List[str]:
        return [f for f in features if not heuristics.is_structural_node_type(f)]

    def is_covered(self, feature: str, content: str) -> bool:
        return heuristics.node_type_present(feature, content)
