"""Shared validation functions for rule coverage checks."""

import os


def validate_query_text(query) -> None:
    """Validate query is either absent or a string."""
    if query is not None and not isinstance(query, str):
        raise ValueError(f"Query must be a string or None, got {type(query).__name__}")


def validate_query_not_empty(query) -> None:
    """Validate query is not empty or whitespace-only."""
    if not query or not isinstance(query, str):
        raise ValueError("Query field is required and must be a non-empty string")
    if not query.strip():
        raise ValueError("Query cannot be empty or whitespace-only")


def validate_query_length(query, max_length: int) -> None:
    """Validate query does not exceed maximum length."""
    query_length = len(query)
    if query_length > max_length:
        raise ValueError(
            f"Query exceeds maximum length of {max_length:,} characters "
            f"(got {query_length:,}). Consider splitting the rule into smaller rules."
        )


def validate_examples(examples) -> None:
    """Validate examples is a list or tuple (possibly empty)."""
    if examples is None:
        return
    if isinstance(examples, (str, bytes, dict)) or not isinstance(examples, (list, tuple)):
        raise ValueError(f"examples must be a list of example sources, got {type(examples).__name__}")


def validate_rule_file_path(path, rules_root=None) -> None:
    """Validate a rule file path is a string inside the optional rules root."""
    if not isinstance(path, str) or not path.strip():
        raise ValueError("rule_file_path must be a non-empty string")
    if rules_root:
        root = os.path.realpath(rules_root)
        resolved = os.path.realpath(path)
        if os.path.commonpath([root, resolved]) != root:
            raise ValueError(f"rule_file_path must be located under {rules_root}")
