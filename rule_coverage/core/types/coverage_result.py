"""
Coverage result types.

Provides:
- FeatureCategory: The four checked feature categories
- EvidenceType: Which marker kind evidence refers to
- CoverageEvidence: Covered/required counts for one category
- CoverageResult: Outcome of checking one category
- AggregateReport: Combined outcome for one rule
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, List, Optional


class FeatureCategory(str, Enum):
    """Feature categories in report order."""
    NODE_TYPES = 'node_types'
    CONDITIONALS = 'conditionals'
    ATTRIBUTES = 'attributes'
    OPERATORS = 'operators'

    @property
    def label(self) -> str:
        return _CATEGORY_LABELS[self]


_CATEGORY_LABELS = {
    FeatureCategory.NODE_TYPES: 'Node types',
    FeatureCategory.CONDITIONALS: 'Conditionals',
    FeatureCategory.ATTRIBUTES: 'Attributes',
    FeatureCategory.OPERATORS: 'Operators',
}


class EvidenceType(str, Enum):
    VALID = 'valid'
    VIOLATION = 'violation'


@dataclass(frozen=True)
class CoverageEvidence:
    """Covered vs required feature counts for one category."""
    count: int
    required: int
    description: str
    type: EvidenceType = EvidenceType.VIOLATION

    def __post_init__(self):
        """Enforce 0 <= count <= required."""
        if self.required < 0 or not 0 <= self.count <= self.required:
            raise ValueError(
                f"Evidence count must be between 0 and required ({self.count}/{self.required})"
            )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return {
            'count': self.count,
            'required': self.required,
            'description': self.description,
            'type': self.type.value
        }


@dataclass
class CoverageResult:
    """
    Outcome of checking one feature category against the examples.

    `details` holds one formatted line per missing feature, `missing` the
    bare feature labels and `lines` the rule-file line of each missing
    feature that could be located.
    """
    success: bool
    message: str
    evidence: List[CoverageEvidence] = field(default_factory=list)
    details: List[str] = field(default_factory=list)
    category: Optional[FeatureCategory] = None
    missing: List[str] = field(default_factory=list)
    lines: List[int] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return {
            'category': self.category.value if self.category else None,
            'success': self.success,
            'message': self.message,
            'evidence': [e.to_dict() for e in self.evidence],
            'details': list(self.details),
            'missing': list(self.missing)
        }


@dataclass
class AggregateReport:
    """Combined coverage outcome for one rule."""
    coverage: List[CoverageResult] = field(default_factory=list)
    overall_success: bool = False
    uncovered_branches: List[str] = field(default_factory=list)
    uncovered_lines: List[int] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return {
            'coverage': [r.to_dict() for r in self.coverage],
            'overall_success': self.overall_success,
            'uncovered_branches': list(self.uncovered_branches),
            'uncovered_lines': list(self.uncovered_lines)
        }
