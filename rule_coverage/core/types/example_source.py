"""
Example source types.

Provides:
- ExampleSource: Example code attached to a rule, with its marker lists
"""

from dataclasses import dataclass, field
from typing import Dict, Any, List


@dataclass(frozen=True)
class ExampleSource:
    """
    Example code for a rule.

    `violations` and `valids` hold the code snippets the example marks as
    "should trigger" and "should not trigger". Coverage checks only read
    `content`; the marker lists travel along for reporting.
    """
    content: str
    violations: List[str] = field(default_factory=list)
    valids: List[str] = field(default_factory=list)

    def __post_init__(self):
        """Validate field types."""
        if not isinstance(self.content, str):
            raise ValueError(f"Example content must be a string, got {type(self.content).__name__}")

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return {
            'content': self.content,
            'violations': list(self.violations),
            'valids': list(self.valids)
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ExampleSource':
        """Deserialize from dictionary."""
        return cls(
            content=data.get('content', ''),
            violations=list(data.get('violations') or []),
            valids=list(data.get('valids') or [])
        )
