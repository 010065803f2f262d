"""
Coverage aggregator.

Runs every category checker for one rule and combines the results into an
AggregateReport.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Type

from rule_coverage.common import validators
from rule_coverage.core.analyzer.feature_extractor import QueryFeatureExtractor
from rule_coverage.core.coverage.base import BaseCoverageChecker
from rule_coverage.core.coverage.node_type_checker import NodeTypeChecker
from rule_coverage.core.coverage.conditional_checker import ConditionalChecker
from rule_coverage.core.coverage.attribute_checker import AttributeChecker
from rule_coverage.core.coverage.operator_checker import OperatorChecker
from rule_coverage.core.coverage.source_locator import SourceLocator
from rule_coverage.core.types.coverage_result import AggregateReport, CoverageResult, FeatureCategory
from rule_coverage.core.types.example_source import ExampleSource
from rule_coverage.core.types.query_features import QueryFeatureModel

logger = logging.getLogger(__name__)

# Report order
CHECKER_REGISTRY: Dict[FeatureCategory, Type[BaseCoverageChecker]] = {
    FeatureCategory.NODE_TYPES: NodeTypeChecker,
    FeatureCategory.CONDITIONALS: ConditionalChecker,
    FeatureCategory.ATTRIBUTES: AttributeChecker,
    FeatureCategory.OPERATORS: OperatorChecker,
}


class CoverageAggregator:
    """
    Rule coverage orchestrator.

    Extracts the query's features, checks each category against the
    examples and aggregates the outcome. Every call builds its own locator
    and results, so one instance can serve concurrent requests.
    """

    VERSION = "1.0.0"

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize aggregator.

        Args:
            config: Configuration dictionary (the 'coverage' section)
        """
        self.config = config or {}
        self.extractor = QueryFeatureExtractor(self.config)
        self.checkers = self._initialize_checkers()

        logger.debug(f"CoverageAggregator v{self.VERSION} initialized with "
                     f"{len(self.checkers)} category checkers")

    def _initialize_checkers(self) -> List[BaseCoverageChecker]:
        """Instantiate the registered checkers, minus disabled categories."""
        disabled = set(self.config.get('disabled_categories') or [])
        unknown = disabled - {c.value for c in FeatureCategory}
        if unknown:
            logger.warning(f"Ignoring unknown disabled categories: {sorted(unknown)}")

        return [
            checker_class(self.config)
            for category, checker_class in CHECKER_REGISTRY.items()
            if category.value not in disabled
        ]

    @staticmethod
    def _normalize_examples(examples: Optional[Sequence[Any]]) -> List[ExampleSource]:
        """
        Convert examples to ExampleSource objects.

        Raises:
            ValueError: If an entry is neither an ExampleSource nor a dict
        """
        validators.validate_examples(examples)
        normalized = []
        for example in examples or []:
            if isinstance(example, ExampleSource):
                normalized.append(example)
            elif isinstance(example, dict):
                normalized.append(ExampleSource.from_dict(example))
            else:
                raise ValueError(f"Example must be an ExampleSource or dict, got {type(example).__name__}")
        return normalized

    @staticmethod
    def features_for(model: QueryFeatureModel, category: FeatureCategory) -> Sequence[Any]:
        """Slice of the feature model a category checks."""
        return {
            FeatureCategory.NODE_TYPES: model.node_types,
            FeatureCategory.CONDITIONALS: model.conditionals,
            FeatureCategory.ATTRIBUTES: model.attributes,
            FeatureCategory.OPERATORS: model.operators,
        }[category]

    def check(self, query_text: Optional[str], examples: Optional[Sequence[Any]],
              rule_file_path: Optional[str] = None,
              rule_file_text: Optional[str] = None) -> AggregateReport:
        """
        Check how well the examples cover the query.

        Args:
            query_text: Rule query (None or blank yields an empty report)
            examples: ExampleSource objects or dicts of the same shape
            rule_file_path: Rule definition file, read once for line numbers
            rule_file_text: Rule definition text, used instead of reading the file

        Returns:
            AggregateReport

        Raises:
            ValueError: If query_text is not a string or examples is malformed
        """
        validators.validate_query_text(query_text)
        examples = self._normalize_examples(examples)

        if not query_text or not query_text.strip() or not examples:
            return AggregateReport()

        model = self.extractor.extract(query_text)

        if rule_file_text is not None:
            locator = SourceLocator(rule_file_text, query_text)
        else:
            locator = SourceLocator.from_file(rule_file_path, query_text)

        coverage: List[CoverageResult] = []
        for checker in self.checkers:
            features = self.features_for(model, checker.category)
            if not checker.checkable(features):
                continue
            coverage.append(checker.safe_check(features, examples, locator))

        report = self.aggregate(coverage)

        logger.info(
            "Coverage checked",
            extra={
                'categories': len(report.coverage),
                'overall_success': report.overall_success,
                'uncovered_branch_count': len(report.uncovered_branches),
                'example_count': len(examples),
                'rule_file': rule_file_path
            }
        )
        return report

    @staticmethod
    def aggregate(coverage: List[CoverageResult]) -> AggregateReport:
        """
        Combine per-category results.

        Node type, attribute and operator misses are comma-joined into one
        branch per category; every missing conditional is its own branch.

        Args:
            coverage: Results of the categories that had features

        Returns:
            AggregateReport
        """
        uncovered_branches = []
        uncovered_lines = set()

        for result in coverage:
            if result.success or result.category is None:
                continue
            uncovered_lines.update(result.lines)
            label = result.category.label
            if result.category == FeatureCategory.CONDITIONALS:
                uncovered_branches.extend(f"{label}: {missing}" for missing in result.missing)
            elif result.missing:
                uncovered_branches.append(f"{label}: {', '.join(result.missing)}")

        return AggregateReport(
            coverage=list(coverage),
            overall_success=bool(coverage) and all(r.success for r in coverage),
            uncovered_branches=uncovered_branches,
            uncovered_lines=sorted(uncovered_lines),
        )


def check_coverage(query_text: Optional[str], examples: Optional[Sequence[Any]],
                   rule_file_path: Optional[str] = None,
                   config: Optional[Dict[str, Any]] = None,
                   rule_file_text: Optional[str] = None) -> AggregateReport:
    """
    Check how well a rule's examples cover its query.

    Args:
        query_text: Rule query
        examples: ExampleSource objects or dicts of the same shape
        rule_file_path: Optional rule definition file for line numbers
        config: Optional 'coverage' configuration section
        rule_file_text: Optional rule definition text (skips reading the file)

    Returns:
        AggregateReport
    """
    return CoverageAggregator(config).check(query_text, examples, rule_file_path, rule_file_text)
