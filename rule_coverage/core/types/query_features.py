"""
Query feature types.

Provides:
- ConditionalType: Closed set of conditional branch kinds
- Conditional: One boolean branch of a query
- LetVariable: A `let $name := value` declaration
- QueryFeatureModel: Everything extracted from one query text
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any, Optional, Tuple


class ConditionalType(str, Enum):
    """Kinds of conditional branches a query can contain."""
    AND = 'and'
    OR = 'or'
    NOT = 'not'
    COMPARISON = 'comparison'
    IF = 'if'
    QUANTIFIED = 'quantified'
    BOOLEAN_FUNCTION = 'boolean_function'


@dataclass(frozen=True)
class Conditional:
    """
    One boolean branch of a query.

    `position` is the character offset of the branch in the query text,
    or None when it is not known.
    """
    type: ConditionalType
    expression: str
    position: Optional[int] = None

    @property
    def label(self) -> str:
        """Display form, e.g. 'and: @Static'."""
        return f"{self.type.value}: {self.expression}"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return {
            'type': self.type.value,
            'expression': self.expression,
            'position': self.position
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Conditional':
        """Deserialize from dictionary."""
        return cls(
            type=ConditionalType(data['type']),
            expression=data['expression'],
            position=data.get('position')
        )


@dataclass(frozen=True)
class LetVariable:
    """A variable bound in a `let` clause."""
    name: str
    value: str

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return {'name': self.name, 'value': self.value}


@dataclass(frozen=True)
class QueryFeatureModel:
    """
    Structural features of a rule query.

    A pure function of the query text: extracting twice from the same text
    yields equal models. Sequences keep first-seen order without duplicates.
    """
    node_types: Tuple[str, ...] = ()
    attributes: Tuple[str, ...] = ()
    operators: Tuple[str, ...] = ()
    conditionals: Tuple[Conditional, ...] = ()
    has_let_expressions: bool = False
    has_unions: bool = False
    let_variables: Tuple[LetVariable, ...] = ()

    @property
    def is_empty(self) -> bool:
        """True when no checkable feature was found."""
        return not (self.node_types or self.attributes or self.operators or self.conditionals)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return {
            'node_types': list(self.node_types),
            'attributes': list(self.attributes),
            'operators': list(self.operators),
            'conditionals': [c.to_dict() for c in self.conditionals],
            'has_let_expressions': self.has_let_expressions,
            'has_unions': self.has_unions,
            'let_variables': [v.to_dict() for v in self.let_variables]
        }
