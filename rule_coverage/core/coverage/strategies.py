"""
Conditional coverage strategies.

One strategy per ConditionalType. Every strategy takes a conditional and
one example's source text and returns a CoverageResult whose evidence counts
the satisfied parts and whose `missing` list holds the unsatisfied part
texts. The strategy table is checked for completeness at import time.
"""

import re
import logging
from typing import Callable, Dict, List

from rule_coverage.core.analyzer.parsers.conditional_splitter import split_conditions
from rule_coverage.core.coverage import heuristics
from rule_coverage.core.types.coverage_result import (
    CoverageEvidence, CoverageResult, EvidenceType, FeatureCategory
)
from rule_coverage.core.types.query_features import Conditional, ConditionalType

logger = logging.getLogger(__name__)

# Recursion limit for nested condition parts
MAX_PART_DEPTH = 8

ATTRIBUTE_COMPARISON = re.compile(r'^@([A-Za-z]\w*)\s*(?:!=|=|\beq\b|\bne\b)\s*(.+)$', re.DOTALL)
BARE_ATTRIBUTE = re.compile(r'^@([A-Za-z]\w*)$')
QUOTED_VALUE = re.compile(r'^([\'"])(.*)\1$', re.DOTALL)
NODE_STEP = re.compile(r'(?://|::)\s*([A-Z][A-Za-z0-9_]*)')
PATH_START = re.compile(r'^(?:\.|/|[\w\-]+::)')
NOT_CALL = re.compile(r'^(?:fn:)?not\s*\(')
KEYWORD_SEPARATORS = re.compile(r'[=<>!()\[\]/.@$,:\s\'"]+')
IGNORED_KEYWORDS = frozenset(['and', 'or', 'not', 'true', 'false', 'some', 'every', 'in', 'satisfies'])

FIELD_CONTEXT = re.compile(r'fielddeclarationstatements|field\[|ancestor::field', re.IGNORECASE)
STATIC_FINAL = re.compile(r'\bstatic\s+final\b|\bfinal\s+static\b', re.IGNORECASE)

QUANTIFIED_PARTS = re.compile(
    r'^(?:some|every)\s+\$[\w\-]+\s+in\s+(?P<range>.+?)\s+satisfies\s+(?P<test>.+)$', re.DOTALL
)
FUNCTION_CALL = re.compile(r'^(?:fn:)?(?P<name>[\w\-]+)\s*\((?P<args>.*)\)$', re.DOTALL)
ATTRIBUTE_VALUE_ANNOTATION = r'{attribute}\s*:\s*([^\s,;]+)'


# ============================================================================
# Text helpers
# ============================================================================

def _strip_enclosing_parens(text: str) -> str:
    """Remove one pair of parentheses wrapping the whole text."""
    if not (text.startswith('(') and text.endswith(')')):
        return text
    depth = 0
    quote = None
    for i, c in enumerate(text):
        if quote:
            if c == quote:
                quote = None
        elif c in ('"', "'"):
            quote = c
        elif c == '(':
            depth += 1
        elif c == ')':
            depth -= 1
            if depth == 0 and i != len(text) - 1:
                return text
    return text[1:-1].strip()


def _split_arguments(args: str) -> List[str]:
    """Split function arguments at top-level commas."""
    parts = []
    depth = 0
    quote = None
    current = []
    for c in args:
        if quote:
            if c == quote:
                quote = None
        elif c in ('"', "'"):
            quote = c
        elif c in '([':
            depth += 1
        elif c in ')]':
            depth = max(depth - 1, 0)
        elif c == ',' and depth == 0:
            parts.append(''.join(current).strip())
            current = []
            continue
        current.append(c)
    parts.append(''.join(current).strip())
    return [p for p in parts if p]


def _literal_text(value: str):
    """Unquoted text of a string literal, or None if value is not one."""
    match = QUOTED_VALUE.match(value.strip())
    return match.group(2) if match else None


# ============================================================================
# Condition parts
# ============================================================================

def _keywords_present(part: str, content: str) -> bool:
    """Fallback: any meaningful word of the part appears in the source."""
    content_lower = content.lower()
    for token in KEYWORD_SEPARATORS.split(part):
        if len(token) < 2 or token.lower() in IGNORED_KEYWORDS or token.isdigit():
            continue
        if token in heuristics.NODE_TYPE_KEYWORDS or token in heuristics.NODE_TYPE_PATTERNS:
            if heuristics.node_type_present(token, content):
                return True
        elif token.lower() in content_lower:
            return True
    return False


def _negation_demonstrated(expression: str, content: str, depth: int) -> bool:
    """The positive form of a negated pattern is present in the source."""
    if FIELD_CONTEXT.search(expression):
        return bool(STATIC_FINAL.search(content)) and heuristics.node_type_present('FieldDeclaration', content)
    return part_covered(expression, content, depth + 1)


def part_covered(part: str, content: str, depth: int = 0) -> bool:
    """
    Decide whether one condition part is exercised by the source.

    Parts are recognised in order: a parenthesised group, an `or`/`and`
    chain, not(...), an attribute compared with a value, a bare attribute,
    a path to node types; anything else falls back to keyword presence.

    Args:
        part: Condition text, e.g. "@Image = 'join'"
        content: Example source text
        depth: Current nesting depth

    Returns:
        True if covered
    """
    part = part.strip() if part else ''
    if not part:
        return True
    if not content or not content.strip():
        return False
    if depth > MAX_PART_DEPTH:
        return _keywords_present(part, content)

    inner = _strip_enclosing_parens(part)
    if inner != part:
        return part_covered(inner, content, depth + 1)

    alternatives = split_conditions(part, 'or')
    if len(alternatives) > 1:
        return any(part_covered(a, content, depth + 1) for a in alternatives)

    conjuncts = split_conditions(part, 'and')
    if len(conjuncts) > 1:
        return all(part_covered(c, content, depth + 1) for c in conjuncts)

    if NOT_CALL.match(part):
        inner = _strip_enclosing_parens(NOT_CALL.sub('(', part, count=1))
        return _negation_demonstrated(inner, content, depth)

    comparison = ATTRIBUTE_COMPARISON.match(part)
    if comparison:
        attribute, value = comparison.group(1), comparison.group(2).strip()
        literal = _literal_text(value)
        if literal is not None:
            if literal:
                return literal.lower() in content.lower()
            return re.search(r"''|\"\"", content) is not None
        return heuristics.attribute_present(attribute, content)

    bare = BARE_ATTRIBUTE.match(part)
    if bare:
        return heuristics.attribute_present(bare.group(1), content)

    if PATH_START.match(part):
        node_types = [n for n in NODE_STEP.findall(part) if not heuristics.is_structural_node_type(n)]
        if node_types:
            return all(heuristics.node_type_present(n, content) for n in node_types)

    return _keywords_present(part, content)


# ============================================================================
# Strategies
# ============================================================================

def _result(conditional: Conditional, parts: List[str], missing: List[str]) -> CoverageResult:
    covered = len(parts) - len(missing)
    if missing:
        description = "Missing parts: " + '; '.join(missing)
    else:
        description = "All parts covered"
    return CoverageResult(
        success=not missing,
        message=f"{conditional.type.value}: {covered}/{len(parts)} parts covered",
        evidence=[CoverageEvidence(
            count=covered,
            required=len(parts),
            description=description,
            type=EvidenceType.VIOLATION
        )],
        details=list(missing),
        category=FeatureCategory.CONDITIONALS,
        missing=list(missing),
    )


def _all_parts(conditional: Conditional, parts: List[str], content: str) -> CoverageResult:
    parts = parts or [conditional.expression]
    missing = [p for p in parts if not part_covered(p, content)]
    return _result(conditional, parts, missing)


def check_and(conditional: Conditional, content: str) -> CoverageResult:
    """Every operand of the AND chain must be exercised."""
    return _all_parts(conditional, split_conditions(conditional.expression, 'and'), content)


def check_or(conditional: Conditional, content: str) -> CoverageResult:
    """Every alternative of the OR chain must be exercised by some example."""
    return _all_parts(conditional, split_conditions(conditional.expression, 'or'), content)


def check_not(conditional: Conditional, content: str) -> CoverageResult:
    """The excluded pattern must exist in the source so the exclusion is tested."""
    expression = conditional.expression
    missing = [] if _negation_demonstrated(expression, content, 0) else [expression]
    return _result(conditional, [expression], missing)


def check_comparison(conditional: Conditional, content: str) -> CoverageResult:
    """
    Both compared attributes must be demonstrable.

    An attribute is demonstrated by its heuristic, or by `Attr: value`
    annotations in the source showing more than one distinct value.
    """
    expression = conditional.expression
    attributes = re.findall(r'@([A-Za-z]\w*)', expression)

    def demonstrated(attribute: str) -> bool:
        values = re.findall(ATTRIBUTE_VALUE_ANNOTATION.format(attribute=re.escape(attribute)), content)
        return len(set(values)) > 1 or heuristics.attribute_present(attribute, content)

    covered = bool(attributes) and all(demonstrated(a) for a in attributes)
    return _result(conditional, [expression], [] if covered else [expression])


def check_if(conditional: Conditional, content: str) -> CoverageResult:
    """The if-test must be exercised."""
    return _all_parts(conditional, [conditional.expression], content)


def check_quantified(conditional: Conditional, content: str) -> CoverageResult:
    """Both the iterated range and the satisfies-test must be exercised."""
    match = QUANTIFIED_PARTS.match(conditional.expression)
    if match is None:
        return _all_parts(conditional, [conditional.expression], content)
    return _all_parts(conditional, [match.group('range').strip(), match.group('test').strip()], content)


def check_boolean_function(conditional: Conditional, content: str) -> CoverageResult:
    """
    The function's subject must be exercised.

    For string predicates (contains, starts-with, ends-with, matches) with a
    literal argument, the literal (or pattern) must also occur in the source.
    """
    expression = conditional.expression
    match = FUNCTION_CALL.match(expression)
    if match is None:
        return _all_parts(conditional, [expression], content)

    name = match.group('name')
    args = _split_arguments(match.group('args'))
    if not args:
        return _result(conditional, [expression], [])

    subject = args[0]
    missing = []
    if _literal_text(subject) is None and not part_covered(subject, content):
        missing.append(subject)

    if name in ('contains', 'starts-with', 'ends-with', 'matches') and len(args) > 1:
        literal = _literal_text(args[1])
        if literal:
            found = literal.lower() in content.lower()
            if name == 'matches' and not found:
                try:
                    found = re.search(literal, content) is not None
                except re.error:
                    found = False
            if not found:
                missing.append(args[1])

    return _result(conditional, [expression], [expression] if missing else [])


CONDITIONAL_STRATEGIES: Dict[ConditionalType, Callable[[Conditional, str], CoverageResult]] = {
    ConditionalType.AND: check_and,
    ConditionalType.OR: check_or,
    ConditionalType.NOT: check_not,
    ConditionalType.COMPARISON: check_comparison,
    ConditionalType.IF: check_if,
    ConditionalType.QUANTIFIED: check_quantified,
    ConditionalType.BOOLEAN_FUNCTION: check_boolean_function,
}

_UNHANDLED = set(ConditionalType) - set(CONDITIONAL_STRATEGIES)
if _UNHANDLED:
    raise ImportError(f"No coverage strategy for conditional types: {sorted(t.value for t in _UNHANDLED)}")


def check_conditional(conditional: Conditional, content: str) -> CoverageResult:
    """
    Dispatch a conditional to its strategy.

    Args:
        conditional: Conditional branch from the feature model
        content: One example's source text

    Returns:
        CoverageResult for the branch
    """
    return CONDITIONAL_STRATEGIES[conditional.type](conditional, content or '')
