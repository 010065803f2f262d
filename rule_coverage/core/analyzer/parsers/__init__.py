"""
Query scanning and rule file parsers for feature extraction.
"""

from rule_coverage.core.analyzer.parsers.query_scanner import QueryScanner
from rule_coverage.core.analyzer.parsers.conditional_splitter import ConditionalSplitter, split_conditions
from rule_coverage.core.analyzer.parsers.rule_file_parser import extract_query, extract_query_from_text

__all__ = [
    'QueryScanner', 'ConditionalSplitter', 'split_conditions',
    'extract_query', 'extract_query_from_text'
]
