"""
Per-category query feature extractors.
"""

from rule_coverage.core.analyzer.extractors.node_type_extractor import NodeTypeExtractor
from rule_coverage.core.analyzer.extractors.attribute_extractor import AttributeExtractor
from rule_coverage.core.analyzer.extractors.operator_extractor import OperatorExtractor
from rule_coverage.core.analyzer.extractors.conditional_extractor import ConditionalExtractor
from rule_coverage.core.analyzer.extractors.let_variable_extractor import LetVariableExtractor
from rule_coverage.core.analyzer.extractors.hardcoded_value_extractor import HardcodedValueExtractor

__all__ = [
    'NodeTypeExtractor', 'AttributeExtractor', 'OperatorExtractor',
    'ConditionalExtractor', 'LetVariableExtractor', 'HardcodedValueExtractor'
]
