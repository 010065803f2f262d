"""Conditional coverage checker."""

import logging
from typing import List, Optional, Sequence

from rule_coverage.core.analyzer.utils import truncate_expression
from rule_coverage.core.coverage.base import BaseCoverageChecker
from rule_coverage.core.coverage.source_locator import SourceLocator
from rule_coverage.core.coverage.strategies import check_conditional
from rule_coverage.core.types.coverage_result import CoverageResult, FeatureCategory
from rule_coverage.core.types.example_source import ExampleSource
from rule_coverage.core.types.query_features import Conditional, ConditionalType

logger = logging.getLogger(__name__)


class ConditionalChecker(BaseCoverageChecker):
    """
    Check every conditional branch against the examples.

    Each example is checked on its own and the results are unioned: a branch
    is covered when some example covers it, and a part of a branch is only
    reported missing when no example covers that part.
    """

    category = FeatureCategory.CONDITIONALS

    CHAIN_TYPES = (ConditionalType.AND, ConditionalType.OR)

    def is_covered(self, feature: Conditional, content: str) -> bool:
        return check_conditional(feature, content).success

    def search_text(self, feature: Conditional) -> str:
        return feature.expression

    def feature_label(self, feature: Conditional) -> str:
        return f"{feature.type.value}: {truncate_expression(feature.expression, self.max_expression_length)}"

    def part_label(self, conditional: Conditional, part: str) -> str:
        return f"{conditional.type.value}: {truncate_expression(part, self.max_expression_length)}"

    def locate_part(self, conditional: Conditional, part: str,
                    locator: Optional[SourceLocator]) -> Optional[int]:
        """
        Rule-file line of one part of a conditional.

        Chain parts are looked up with their keyword first ('or $x(...)'),
        then bare; the offset fallback uses the part's offset in the query.
        """
        if locator is None:
            return None

        offset = conditional.position
        if offset is not None:
            index = conditional.expression.find(part)
            if index >= 0:
                offset += index

        candidates = [part]
        if conditional.type in self.CHAIN_TYPES:
            candidates.insert(0, f"{conditional.type.value} {part}")
        return locator.locate(candidates, offset, backwards=True)

    def check(self, features: Sequence[Conditional], examples: Sequence[ExampleSource],
              locator: Optional[SourceLocator] = None) -> CoverageResult:
        for feature in features:
            if not isinstance(feature, Conditional) or not isinstance(feature.type, ConditionalType):
                raise ValueError(f"Malformed conditional in feature model: {feature!r}")

        contents = [e.content for e in examples if e.content and e.content.strip()] or ['']

        covered_count = 0
        missing = []
        for conditional in features:
            results = [check_conditional(conditional, content) for content in contents]
            if any(r.success for r in results):
                covered_count += 1
                continue

            unioned_missing: List[str] = [
                part for part in results[0].missing
                if all(part in r.missing for r in results[1:])
            ]
            if not unioned_missing:
                covered_count += 1
                continue

            for part in unioned_missing:
                missing.append((
                    self.part_label(conditional, part),
                    self.locate_part(conditional, part, locator)
                ))

        return self.build_result(
            required=len(features),
            covered_count=covered_count,
            missing=missing,
        )
