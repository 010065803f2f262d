"""
Hard-coded value types.

Provides:
- HardcodedValue: A literal in a query body that belongs in a let variable
"""

from dataclasses import dataclass
from typing import Dict, Any


@dataclass(frozen=True)
class HardcodedValue:
    """A string or number literal found outside the query's let declarations."""
    type: str
    value: str
    position: int
    recommendation: str
    severity: str = 'warning'

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return {
            'type': self.type,
            'value': self.value,
            'position': self.position,
            'recommendation': self.recommendation,
            'severity': self.severity
        }
