"""
XPath Rule Coverage Service

Verifies that the examples attached to an XPath-based PMD rule exercise every
node type, attribute, operator and conditional branch of the rule's query, and
reports the missing branches with the line they occupy in the rule file.
"""

__version__ = "1.0.0"
__service__ = "xpath-rule-coverage"
