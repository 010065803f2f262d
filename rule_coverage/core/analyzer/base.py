"""
Base classes for query feature extractors.

Provides abstract base class and common functionality for all extractors.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
import logging

from rule_coverage.core.analyzer.parsers.query_scanner import QueryScanner

logger = logging.getLogger(__name__)


class BaseQueryExtractor(ABC):
    """
    Abstract base class for all query feature extractors.

    All extractors must implement:
    - extract(): Extract one kind of feature from a scanned query

    Extractors share one QueryScanner per query so masking and bracket
    matching happen once. An extractor failure never breaks the pipeline:
    safe_extract() logs it and yields no features.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize extractor.

        Args:
            config: Configuration dictionary (the 'coverage' section)
        """
        self.config = config or {}

    @abstractmethod
    def extract(self, scanner: QueryScanner) -> List[Any]:
        """
        Extract features from a scanned query.

        Args:
            scanner: QueryScanner over the query text

        Returns:
            Features in first-seen order without duplicates
        """
        pass

    def safe_extract(self, scanner: QueryScanner) -> List[Any]:
        """
        Extract features with error handling and fallback.

        Args:
            scanner: QueryScanner over the query text

        Returns:
            List of features (empty on any error)
        """
        if not scanner.query.strip():
            return []

        try:
            return self.extract(scanner)
        except Exception as e:
            logger.error(f"Error in {self.__class__.__name__}.extract(): {e}", exc_info=True)
            return []
