"""
Query analysis: scanning, feature extraction and conditional splitting.
"""

from rule_coverage.core.analyzer.feature_extractor import QueryFeatureExtractor, extract_features

__all__ = ['QueryFeatureExtractor', 'extract_features']
