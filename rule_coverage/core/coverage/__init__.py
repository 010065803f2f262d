"""
Coverage checking: per-category checkers, line lookup and aggregation.
"""

from rule_coverage.core.coverage.aggregator import CoverageAggregator, check_coverage

__all__ = ['CoverageAggregator', 'check_coverage']
