"""
Main query feature extractor orchestrator.

Combines all specialized extractors to produce a QueryFeatureModel.
"""

import logging
from typing import Any, Dict, List, Optional

from rule_coverage.core.analyzer import constants
from rule_coverage.core.analyzer.parsers.query_scanner import QueryScanner
from rule_coverage.core.analyzer.extractors import (
    NodeTypeExtractor, AttributeExtractor, OperatorExtractor,
    ConditionalExtractor, LetVariableExtractor, HardcodedValueExtractor
)
from rule_coverage.core.types.query_features import QueryFeatureModel
from rule_coverage.core.types.hardcoded_value import HardcodedValue
from rule_coverage.common import validators

logger = logging.getLogger(__name__)


class QueryFeatureExtractor:
    """
    Main query feature extractor orchestrator.

    Scans the query once and hands the shared scanner to every extractor.
    Extraction is a pure function of the query text: empty or
    whitespace-only input yields an empty model, never an error.
    """

    VERSION = "1.0.0"

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize feature extractor.

        Args:
            config: Configuration dictionary (the 'coverage' section)
        """
        self.config = config or {}
        self.max_query_length = self.config.get('max_query_length', constants.MAX_QUERY_LENGTH)

        self.node_type_extractor = NodeTypeExtractor(self.config)
        self.attribute_extractor = AttributeExtractor(self.config)
        self.operator_extractor = OperatorExtractor(self.config)
        self.conditional_extractor = ConditionalExtractor(self.config)
        self.let_variable_extractor = LetVariableExtractor(self.config)
        self.hardcoded_value_extractor = HardcodedValueExtractor(self.config)

        logger.debug(f"QueryFeatureExtractor v{self.VERSION} initialized")

    def _scan(self, query: Optional[str]) -> Optional[QueryScanner]:
        """
        Validate input and build the shared scanner.

        Raises:
            ValueError: If query is not a string or exceeds the length limit
        """
        validators.validate_query_text(query)
        if not query or not query.strip():
            return None
        validators.validate_query_length(query, self.max_query_length)
        return QueryScanner(query)

    def extract(self, query: Optional[str]) -> QueryFeatureModel:
        """
        Extract structural features from a rule query.

        Args:
            query: Raw query text

        Returns:
            QueryFeatureModel (empty for None/blank input)

        Raises:
            ValueError: If query is not a string or exceeds the length limit
        """
        scanner = self._scan(query)
        if scanner is None:
            return QueryFeatureModel()

        model = QueryFeatureModel(
            node_types=tuple(self.node_type_extractor.safe_extract(scanner)),
            attributes=tuple(self.attribute_extractor.safe_extract(scanner)),
            operators=tuple(self.operator_extractor.safe_extract(scanner)),
            conditionals=tuple(self.conditional_extractor.safe_extract(scanner)),
            has_let_expressions=scanner.has_let_expressions,
            has_unions=scanner.has_unions,
            let_variables=tuple(self.let_variable_extractor.safe_extract(scanner)),
        )

        logger.debug(
            "Query features extracted",
            extra={
                'node_type_count': len(model.node_types),
                'attribute_count': len(model.attributes),
                'operator_count': len(model.operators),
                'conditional_count': len(model.conditionals)
            }
        )
        return model

    def find_hardcoded_values(self, query: Optional[str]) -> List[HardcodedValue]:
        """
        Find literals in the query body that should be let variables.

        Args:
            query: Raw query text

        Returns:
            Hard-coded values ordered by position
        """
        scanner = self._scan(query)
        if scanner is None:
            return []
        return self.hardcoded_value_extractor.safe_extract(scanner)


_default_extractor = None


def extract_features(query: Optional[str]) -> QueryFeatureModel:
    """Extract features with a default-configured QueryFeatureExtractor."""
    global _default_extractor
    if _default_extractor is None:
        _default_extractor = QueryFeatureExtractor()
    return _default_extractor.extract(query)
