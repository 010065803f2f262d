"""Custom exceptions for the rule coverage service."""


class RuleCoverageError(Exception):
    """Base exception for all rule coverage errors."""
    pass


class ConfigurationError(RuleCoverageError):
    """Raised when configuration loading or validation fails."""
    pass


class QueryAnalysisError(RuleCoverageError):
    """Raised when a query cannot be analyzed at all."""
    pass


class RuleFileError(RuleCoverageError):
    """Raised when a rule definition file cannot be read or parsed."""
    pass


class ValidationError(RuleCoverageError):
    """Raised when request validation fails."""
    pass
