"""
Base classes for coverage checkers.

Provides the abstract checker interface shared by all feature categories.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence
import logging

from rule_coverage.core.analyzer import constants
from rule_coverage.core.analyzer.utils import truncate_expression
from rule_coverage.core.coverage.source_locator import SourceLocator
from rule_coverage.core.types.coverage_result import (
    CoverageEvidence, CoverageResult, EvidenceType, FeatureCategory
)
from rule_coverage.core.types.example_source import ExampleSource

logger = logging.getLogger(__name__)


class BaseCoverageChecker(ABC):
    """
    Abstract base class for all coverage checkers.

    All checkers must implement:
    - is_covered(): Per-feature heuristic against one source text

    check() runs the heuristic for every feature over the combined example
    source and builds the category result. "Not covered" is a normal
    unsuccessful result; safe_check() turns unexpected errors into an empty,
    successful result so one category never breaks the report.
    """

    category: Optional[FeatureCategory] = None

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize checker.

        Args:
            config: Configuration dictionary (the 'coverage' section)
        """
        self.config = config or {}
        self.max_expression_length = self.config.get(
            'max_expression_length', constants.DEFAULT_MAX_EXPRESSION_LENGTH
        )

    @abstractmethod
    def is_covered(self, feature: Any, content: str) -> bool:
        """
        Decide whether one feature is exercised by one source text.

        Args:
            feature: A single feature of this checker's category
            content: Example source text

        Returns:
            True if the source exercises the feature
        """
        pass

    def checkable(self, features: Sequence[Any]) -> List[Any]:
        """Features that can be checked lexically at all."""
        return list(features)

    def feature_label(self, feature: Any) -> str:
        """Display text of a feature, shortened for reports."""
        return truncate_expression(str(feature), self.max_expression_length)

    def search_text(self, feature: Any) -> str:
        """Text that represents the feature in the query, used for line lookup."""
        return str(feature)

    def feature_offset(self, feature: Any, locator: Optional[SourceLocator]) -> Optional[int]:
        """Offset of the feature in the query text, if known."""
        if locator is None:
            return None
        return locator.offset_of(self.search_text(feature))

    @staticmethod
    def combined_content(examples: Sequence[ExampleSource]) -> str:
        """All example sources joined into one text."""
        return '\n'.join(example.content for example in examples if example.content)

    @staticmethod
    def format_missing(label: str, line: Optional[int]) -> str:
        """One missing-feature line, e.g. 'Line 4: and'."""
        return f"Line {line}: {label}" if line is not None else label

    def check(self, features: Sequence[Any], examples: Sequence[ExampleSource],
              locator: Optional[SourceLocator] = None) -> CoverageResult:
        """
        Check every feature of this category against the examples.

        Args:
            features: Features of this category from the QueryFeatureModel
            examples: Example sources
            locator: Optional SourceLocator for rule-file line numbers

        Returns:
            CoverageResult for the category
        """
        checkable = self.checkable(features)
        content = self.combined_content(examples)

        covered = []
        missing = []
        for feature in checkable:
            if self.is_covered(feature, content):
                covered.append(feature)
            else:
                missing.append(feature)

        return self.build_result(
            required=len(checkable),
            covered_count=len(covered),
            missing=[(self.feature_label(f), self.locate(f, locator)) for f in missing],
        )

    def locate(self, feature: Any, locator: Optional[SourceLocator]) -> Optional[int]:
        """Rule-file line of a feature, or None."""
        if locator is None:
            return None
        return locator.locate(self.search_text(feature), self.feature_offset(feature, locator))

    def build_result(self, required: int, covered_count: int, missing: List[tuple]) -> CoverageResult:
        """
        Assemble the category result.

        Args:
            required: Number of checkable features
            covered_count: Number of covered features
            missing: (label, line) pairs for uncovered features

        Returns:
            CoverageResult with one evidence entry
        """
        details = [self.format_missing(label, line) for label, line in missing]
        if details:
            description = "Missing:\n" + '\n'.join(f" - {d}" for d in details)
        else:
            description = f"All {self.category.label.lower()} covered"

        return CoverageResult(
            success=not missing,
            message=f"{self.category.label}: {covered_count}/{required} covered",
            evidence=[CoverageEvidence(
                count=covered_count,
                required=required,
                description=description,
                type=EvidenceType.VIOLATION
            )],
            details=details,
            category=self.category,
            missing=[label for label, _ in missing],
            lines=[line for _, line in missing if line is not None],
        )

    def empty_result(self, message: str) -> CoverageResult:
        """Trivially successful result with no evidence."""
        return CoverageResult(success=True, message=message, category=self.category)

    def safe_check(self, features: Sequence[Any], examples: Sequence[ExampleSource],
                   locator: Optional[SourceLocator] = None) -> CoverageResult:
        """
        Check with error handling and fallback.

        Returns:
            CoverageResult (empty and successful on any error)
        """
        try:
            return self.check(features, examples, locator)
        except Exception as e:
            logger.error(f"Error in {self.__class__.__name__}.check(): {e}", exc_info=True)
            return self.empty_result(f"{self.category.label}: check skipped after internal error")
