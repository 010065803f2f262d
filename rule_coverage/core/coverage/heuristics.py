"""
Lexical heuristics for deciding whether example source exercises a feature.

Each query feature is mapped to representative source text: keywords for
node types, patterns for attributes and synonyms for operators. The tables
are plain data so every heuristic can be tested and replaced on its own.
"""

import re
import logging
from typing import Dict, List, Optional, Pattern

logger = logging.getLogger(__name__)

# ============================================================================
# Node Types
# ============================================================================

# Synthesized by the analyzer, no lexical form in source
STRUCTURAL_NODE_TYPES = frozenset([
    'ApexFile', 'CompilationUnit', 'StandardCondition', 'ModifierNode',
    'EmptyReferenceExpression', 'ModifierOrAnnotation', 'IllegalStoreExpression',
])

# Node types that need the brace-depth nested declaration scan
NESTED_TYPE_NODE_TYPES = frozenset(['UserClass'])

# Covered when any keyword appears (case-insensitive; words match whole)
NODE_TYPE_KEYWORDS: Dict[str, List[str]] = {
    'ClassDeclaration': ['class'],
    'UserInterface': ['interface'],
    'InterfaceDeclaration': ['interface'],
    'UserEnum': ['enum'],
    'UserTrigger': ['trigger'],
    'DoLoopStatement': ['do'],
    'DoWhileLoopStatement': ['do', 'while'],
    'ForEachStatement': ['for', ':'],
    'ForLoopStatement': ['for'],
    'IfBlockStatement': ['if', 'else if'],
    'IfElseBlockStatement': ['if', 'else'],
    'WhileLoopStatement': ['while'],
    'SwitchStatement': ['switch'],
    'WhenValue': ['when'],
    'WhenType': ['when'],
    'WhenElse': ['when else'],
    'TryCatchFinallyBlockStatement': ['try', 'catch'],
    'CatchBlockStatement': ['catch'],
    'ThrowStatement': ['throw'],
    'ReturnStatement': ['return'],
    'BreakStatement': ['break'],
    'ContinueStatement': ['continue'],
    'RunAsBlockStatement': ['System.runAs'],
    'DmlInsertStatement': ['insert'],
    'DmlUpdateStatement': ['update'],
    'DmlDeleteStatement': ['delete'],
    'DmlUndeleteStatement': ['undelete'],
    'DmlUpsertStatement': ['upsert'],
    'DmlMergeStatement': ['merge'],
    'TernaryExpression': ['?'],
    'InstanceOfExpression': ['instanceof'],
    'ThisVariableExpression': ['this'],
    'SuperVariableExpression': ['super'],
    'PropertyDeclaration': ['property'],
    'BlockStatement': ['{'],
    'ExpressionStatement': [';'],
}

_ACCESS = r'(?:public|private|protected|global)'
_TYPE = r'[\w.]+(?:\s*<[^>;{}]*>)?(?:\[\])?'

# Covered when the pattern matches (checked before the keyword table)
NODE_TYPE_PATTERNS: Dict[str, Pattern] = {
    'Method': re.compile(
        _ACCESS + r'\s+(?:(?:static|override|virtual|abstract|testmethod|webservice)\s+)*'
        + _TYPE + r'\s+\w+\s*\(', re.IGNORECASE),
    'MethodCallExpression': re.compile(
        r'(?!(?:if|for|while|catch|switch|return|new|when)\b)\b\w+\s*\('),
    'ThisMethodCallExpression': re.compile(r'\bthis\s*\('),
    'SuperMethodCallExpression': re.compile(r'\bsuper\s*(?:\.\s*\w+\s*)?\('),
    'Field': re.compile(
        _ACCESS + r'\s+(?:(?:static|final|transient)\s+)*' + _TYPE + r'\s+\w+\s*[=;]', re.IGNORECASE),
    'FieldDeclaration': re.compile(
        _ACCESS + r'\s+(?:(?:static|final|transient)\s+)*' + _TYPE + r'\s+\w+\s*[=;]', re.IGNORECASE),
    'FieldDeclarationStatements': re.compile(
        _ACCESS + r'\s+(?:(?:static|final|transient)\s+)*' + _TYPE + r'\s+\w+\s*[=;,]', re.IGNORECASE),
    'VariableDeclaration': re.compile(r'\b' + _TYPE + r'\s+\w+\s*[=;]'),
    'VariableDeclarationStatements': re.compile(r'\b' + _TYPE + r'\s+\w+\s*[=;]'),
    'Parameter': re.compile(r'\w+\s*\(\s*' + _TYPE + r'\s+\w+\s*[,)]'),
    'Annotation': re.compile(r'@\w+'),
    'AnnotationParameter': re.compile(r'@\w+\s*\(\s*\w+\s*='),
    'NewObjectExpression': re.compile(r'\bnew\s+\w+', re.IGNORECASE),
    'NewListLiteralExpression': re.compile(r'\bnew\s+list\s*[<(]|\bnew\s+\w+\s*\[\s*\]', re.IGNORECASE),
    'NewListInitExpression': re.compile(r'\bnew\s+list\s*[<(]', re.IGNORECASE),
    'NewSetLiteralExpression': re.compile(r'\bnew\s+set\s*<', re.IGNORECASE),
    'NewSetInitExpression': re.compile(r'\bnew\s+set\s*<', re.IGNORECASE),
    'NewMapLiteralExpression': re.compile(r'\bnew\s+map\s*<', re.IGNORECASE),
    'NewMapInitExpression': re.compile(r'\bnew\s+map\s*<', re.IGNORECASE),
    'NewKeyValueObjectExpression': re.compile(r'\bnew\s+\w+\s*\(\s*\w+\s*=', re.IGNORECASE),
    'LiteralExpression': re.compile(r"'(?:[^'\\]|\\.)*'|\b\d+(?:\.\d+)?\b|\b(?:true|false|null)\b", re.IGNORECASE),
    'SoqlExpression': re.compile(r'\[\s*select\b', re.IGNORECASE),
    'SoslExpression': re.compile(r'\[\s*find\b', re.IGNORECASE),
    'CastExpression': re.compile(r'\(\s*[A-Z][\w.]*(?:<[^>]*>)?\s*\)\s*[\w(]'),
    'BooleanExpression': re.compile(r'&&|\|\||==|!=|<=|>=|[<>]'),
    'BinaryExpression': re.compile(r'[\w)\]]\s*[-+*/%]\s*[\w(]'),
    'AssignmentExpression': re.compile(r'(?<![=!<>])=(?![=>])|[-+*/]='),
    'PrefixExpression': re.compile(r'(?:\+\+|--|!)\s*\w'),
    'PostfixExpression': re.compile(r'\w\s*(?:\+\+|--)'),
    'ArrayLoadExpression': re.compile(r'\w\s*\[\s*[\w.]+\s*\]'),
    'ArrayStoreExpression': re.compile(r'\w\s*\[\s*[\w.]+\s*\]\s*='),
    'VariableExpression': re.compile(r'\b[A-Za-z_]\w*\b'),
    'ReferenceExpression': re.compile(r'\b[A-Za-z_]\w*\b'),
    'Property': re.compile(r'\{\s*(?:get|set)\s*[;{]', re.IGNORECASE),
}

# ============================================================================
# Attributes
# ============================================================================

_STRING_LITERAL = r"'(?:[^'\\]|\\.)*'|\"[^\"]*\""
_NUMBER = r'\b\d+(?:\.\d+)?\b'

ATTRIBUTE_PATTERNS: Dict[str, Pattern] = {
    'String': re.compile(_STRING_LITERAL),
    'Null': re.compile(r'\bnull\b', re.IGNORECASE),
    'Boolean': re.compile(r'\b(?:true|false)\b', re.IGNORECASE),
    'Integer': re.compile(_NUMBER),
    'Long': re.compile(r'\b\d+L\b', re.IGNORECASE),
    'Double': re.compile(r'\b\d+\.\d+\b'),
    'Decimal': re.compile(r'\b\d+\.\d+\b'),
    'LiteralType': re.compile(_STRING_LITERAL + '|' + _NUMBER + r'|\b(?:true|false|null)\b', re.IGNORECASE),
    'Image': re.compile(_STRING_LITERAL + r'|\bclass\s+\w+|\b\w+\s*\(', re.IGNORECASE),
    'Static': re.compile(r'\bstatic\b', re.IGNORECASE),
    'Final': re.compile(r'\bfinal\b', re.IGNORECASE),
    'Abstract': re.compile(r'\babstract\b', re.IGNORECASE),
    'Virtual': re.compile(r'\bvirtual\b', re.IGNORECASE),
    'Override': re.compile(r'\boverride\b', re.IGNORECASE),
    'Transient': re.compile(r'\btransient\b', re.IGNORECASE),
    'Public': re.compile(r'\bpublic\b', re.IGNORECASE),
    'Private': re.compile(r'\bprivate\b', re.IGNORECASE),
    'Protected': re.compile(r'\bprotected\b', re.IGNORECASE),
    'Global': re.compile(r'\bglobal\b', re.IGNORECASE),
    'WebService': re.compile(r'\bwebservice\b', re.IGNORECASE),
    'Test': re.compile(r'@istest\b|\btestmethod\b', re.IGNORECASE),
    'Interface': re.compile(r'\binterface\b', re.IGNORECASE),
    'Name': re.compile(r'@\w+\s*\([^)]*\w+\s*=|\b[A-Za-z_]\w*\s*[=;({]'),
    'SimpleName': re.compile(r'\b[A-Za-z_]\w*\s*[=;({]'),
    'VariableName': re.compile(r'\b' + _TYPE + r'\s+\w+\s*[=;]'),
    'MethodName': re.compile(r'\w+\.\w+\s*\(|\w+\s*\('),
    'FullMethodName': re.compile(r'\w+\.\w+\s*\('),
    'InputParametersSize': re.compile(r'\w+\s*\('),
    'Arity': re.compile(r'\w+\s*\('),
    'ReturnType': NODE_TYPE_PATTERNS['Method'],
    'Type': re.compile(r'\b[A-Z][\w.]*\b'),
    'TypeRef': re.compile(r'\b[A-Z][\w.]*\b'),
    'DefiningType': re.compile(r'\b(?:class|interface|enum|trigger)\s+\w+', re.IGNORECASE),
    'Value': re.compile(r'@\w+\s*\([^)]*=\s*[^)]+\)'),
    'BeginLine': re.compile(r'\S'),
    'EndLine': re.compile(r'\S'),
    'BeginColumn': re.compile(r'\S'),
    'EndColumn': re.compile(r'\S'),
}

# Attributes that need the brace-depth nested declaration scan
NESTED_TYPE_ATTRIBUTES = frozenset(['Nested'])

# ============================================================================
# Operators
# ============================================================================

OPERATOR_PATTERNS: Dict[str, Pattern] = {
    'and': re.compile(r'\band\b|&&', re.IGNORECASE),
    'or': re.compile(r'\bor\b|\|\|', re.IGNORECASE),
    '!=': re.compile(r'!=|<>'),
    '=': re.compile(r'='),
    '<': re.compile(r'<'),
    '>': re.compile(r'>'),
    '<=': re.compile(r'<='),
    '>=': re.compile(r'>='),
}

# ============================================================================
# Nested type declarations
# ============================================================================

_COMMENT_OR_STRING = re.compile(r'//[^\n]*|/\*.*?\*/|' + _STRING_LITERAL, re.DOTALL)
_DECLARATION_OR_BRACE = re.compile(r'(?<![\w.])(?:class|interface|enum)\s+\w+|[{}]', re.IGNORECASE)


def has_nested_type_declaration(content: Optional[str]) -> bool:
    """
    Detect a type declared inside another type's body.

    Scans line by line tracking brace depth. A declaration only counts when
    it appears while at least one enclosing type body is still open, so a
    file with two top-level classes is not nested.

    Args:
        content: Example source text

    Returns:
        True if a nested class/interface/enum declaration is present
    """
    if not content:
        return False

    depth = 0
    type_body_depths: List[int] = []
    pending_declaration = False

    for line in _COMMENT_OR_STRING.sub(' ', content).splitlines():
        for token in _DECLARATION_OR_BRACE.finditer(line):
            text = token.group(0)
            if text == '{':
                depth += 1
                if pending_declaration:
                    type_body_depths.append(depth)
                    pending_declaration = False
            elif text == '}':
                if type_body_depths and type_body_depths[-1] == depth:
                    type_body_depths.pop()
                depth = max(depth - 1, 0)
            else:
                if type_body_depths:
                    return True
                pending_declaration = True
    return False


# ============================================================================
# Presence checks
# ============================================================================

def _keyword_present(keyword: str, content_lower: str) -> bool:
    keyword_lower = keyword.lower()
    if keyword_lower.replace(' ', '').replace('.', '').isalnum():
        return re.search(r'\b' + re.escape(keyword_lower) + r'\b', content_lower) is not None
    return keyword_lower in content_lower


def is_structural_node_type(node_type: str) -> bool:
    """True for node types with no lexical representation."""
    return node_type in STRUCTURAL_NODE_TYPES


def node_type_present(node_type: str, content: Optional[str]) -> bool:
    """
    Does the source contain a representative form of the node type?

    Args:
        node_type: AST node type name, e.g. 'IfBlockStatement'
        content: Example source text

    Returns:
        True if covered; unknown node types fall back to their lower-cased name
    """
    if not content or not content.strip():
        return False
    if node_type in NESTED_TYPE_NODE_TYPES:
        return has_nested_type_declaration(content)

    pattern = NODE_TYPE_PATTERNS.get(node_type)
    if pattern is not None and pattern.search(content):
        return True

    content_lower = content.lower()
    keywords = NODE_TYPE_KEYWORDS.get(node_type)
    if keywords is None:
        if pattern is not None:
            return False
        return node_type.lower() in content_lower
    return any(_keyword_present(k, content_lower) for k in keywords)


def attribute_present(attribute: str, content: Optional[str]) -> bool:
    """
    Does the source exhibit the attribute?

    Args:
        attribute: Attribute name without '@', e.g. 'Static'
        content: Example source text

    Returns:
        True if covered; unknown attributes fall back to a case-insensitive
        substring match on the name
    """
    if not content or not content.strip():
        return False
    if attribute in NESTED_TYPE_ATTRIBUTES:
        return has_nested_type_declaration(content)

    pattern = ATTRIBUTE_PATTERNS.get(attribute)
    if pattern is not None:
        return pattern.search(content) is not None
    return attribute.lower() in content.lower()


def operator_present(operator: str, content: Optional[str]) -> bool:
    """
    Does the source use the operator (or its source-language synonym)?

    Args:
        operator: Operator token from the query
        content: Example source text

    Returns:
        True if covered
    """
    if not content or not operator:
        return False
    pattern = OPERATOR_PATTERNS.get(operator.lower())
    if pattern is not None:
        return pattern.search(content) is not None
    return operator.lower() in content.lower()
