"""
Data types and type definitions for rule coverage checks.

Provides:
- QueryFeatureModel: Structural features extracted from a rule query
- Conditional / ConditionalType: Boolean branches of a query
- ExampleSource: Example code attached to a rule
- CoverageResult / CoverageEvidence: Per-category coverage outcome
- AggregateReport: Combined coverage outcome for one rule
- HardcodedValue: Literal values that should be hoisted into let variables
"""

from .query_features import ConditionalType, Conditional, LetVariable, QueryFeatureModel
from .example_source import ExampleSource
from .coverage_result import (
    FeatureCategory, EvidenceType, CoverageEvidence, CoverageResult, AggregateReport
)
from .hardcoded_value import HardcodedValue

__all__ = [
    'ConditionalType', 'Conditional', 'LetVariable', 'QueryFeatureModel',
    'ExampleSource', 'FeatureCategory', 'EvidenceType', 'CoverageEvidence',
    'CoverageResult', 'AggregateReport', 'HardcodedValue'
]
