"""
Query analysis constants.

Centralizes vocabularies and limits used across extractors and checkers.
"""

# ============================================================================
# Size Limits
# ============================================================================

# Maximum accepted query length (rule queries are rarely above a few KB)
MAX_QUERY_LENGTH = 200_000

# Default display length for expressions in coverage reports
DEFAULT_MAX_EXPRESSION_LENGTH = 80

# ============================================================================
# PMD Attribute Names
# ============================================================================

# Identifiers that name node attributes rather than node types. A step such
# as `//Image` is never reported as a node type.
PMD_ATTRIBUTE_NAMES = frozenset([
    'Image', 'Name', 'SimpleName', 'MethodName', 'FullMethodName', 'VariableName',
    'BeginLine', 'EndLine', 'BeginColumn', 'EndColumn', 'Op', 'Type', 'ReturnType',
    'LiteralType', 'Static', 'Final', 'Abstract', 'Public', 'Private', 'Protected',
    'Override', 'Global', 'WebService', 'Constructor', 'Interface', 'Nested', 'Null',
    'String', 'Boolean', 'isSafe', 'InputParametersSize', 'ReferenceType',
    'AccessLevel', 'DefiningType',
])

# Attribute carrying the operator of binary/assignment expressions. Its
# values are reported as operators, the attribute itself is not.
OPERATOR_ATTRIBUTE = 'Op'

# ============================================================================
# Operators
# ============================================================================

LOGICAL_OPERATORS = ('and', 'or')
COMPARISON_OPERATORS = ('!=', '<=', '>=', '=', '<', '>')
ARITHMETIC_OPERATORS = ('+', '-', '*', '/')

# ============================================================================
# Conditionals
# ============================================================================

# Functions whose result is a boolean branch of the query
BOOLEAN_FUNCTIONS = ('exists', 'empty', 'boolean', 'contains', 'starts-with', 'ends-with', 'matches')

QUANTIFIERS = ('some', 'every')

# ============================================================================
# Hard-coded Values
# ============================================================================

# Numbers every rule may use inline
ALLOWED_INLINE_NUMBERS = frozenset(['0', '1'])

HARDCODED_STRING_RECOMMENDATION = (
    "Hard-coded string '{value}' found. Consider declaring it as a let variable: "
    "let $name := '{value}'"
)
HARDCODED_NUMBER_RECOMMENDATION = (
    "Hard-coded number {value} found. Consider declaring it as a let variable: "
    "let $name := {value}"
)
