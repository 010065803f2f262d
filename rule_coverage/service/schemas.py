"""
Pydantic schemas for API request/response models.

Defines the API contract for all service endpoints using Pydantic models.
"""

import logging
from typing import Optional, Dict, Any, List
from datetime import datetime, timezone
from pydantic import BaseModel, Field, field_validator, model_validator, ConfigDict
from rule_coverage.common import validators
from rule_coverage.core.analyzer import constants
from rule_coverage.core.types.example_source import ExampleSource

logger = logging.getLogger(__name__)


class ExampleSourceModel(BaseModel):
    """One example attached to a rule."""
    content: str = Field(..., description="Example source code")
    violations: List[str] = Field(default_factory=list, description="Snippets that should trigger the rule")
    valids: List[str] = Field(default_factory=list, description="Snippets that should not trigger the rule")

    @field_validator('violations', 'valids', mode='before')
    @classmethod
    def normalize_markers(cls, v):
        """Treat null marker lists as empty."""
        return [] if v is None else v

    def to_example_source(self) -> ExampleSource:
        """Convert to the engine's ExampleSource."""
        return ExampleSource(content=self.content, violations=list(self.violations), valids=list(self.valids))


class CoverageRequest(BaseModel):
    """
    Request model for the coverage endpoint.

    The query comes from `query`, or else from the xpath property of the
    rule file given by `rule_file_content` or `rule_file_path`. The rule file
    also provides line numbers for missing features.
    """
    query: Optional[str] = Field(None, description="XPath query of the rule")
    rule_file_path: Optional[str] = Field(None, description="Path of the rule XML file on the server")
    rule_file_content: Optional[str] = Field(None, description="Content of the rule XML file")
    examples: List[ExampleSourceModel] = Field(default_factory=list, description="Rule examples")

    @field_validator('query')
    @classmethod
    def validate_query(cls, v):
        """Validate query length; blank queries count as absent."""
        if v is None or not v.strip():
            return None
        validators.validate_query_length(v, constants.MAX_QUERY_LENGTH)
        return v

    @field_validator('rule_file_path', mode='before')
    @classmethod
    def normalize_path(cls, v):
        """Treat empty paths as absent."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return v.strip() if isinstance(v, str) else v

    @model_validator(mode='after')
    def require_query_source(self):
        """A query or a rule file must be provided."""
        if self.query is None and self.rule_file_path is None and self.rule_file_content is None:
            raise ValueError("One of query, rule_file_path or rule_file_content is required")
        return self

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "query": "//Method[@Static = true() and .//IfBlockStatement]",
                "examples": [
                    {
                        "content": "public static void run() { if (x == 1 && y) { } }",
                        "violations": ["public static void run()"],
                        "valids": []
                    }
                ]
            }
        }
    )


class CoverageResponse(BaseModel):
    """
    Response model for the coverage endpoint.
    """
    overall_success: bool = Field(..., description="True if every checked category is covered")
    coverage: List[Dict[str, Any]] = Field(..., description="Per-category coverage results")
    uncovered_branches: List[str] = Field(..., description="'Category: feature' labels of uncovered branches")
    uncovered_lines: List[int] = Field(default_factory=list, description="Rule file lines of uncovered features")

    query: str = Field(..., description="Query that was checked")
    engine_version: str = Field(..., description="Coverage engine version")
    processing_time_ms: float = Field(..., description="Total processing time in milliseconds")
    warnings: List[str] = Field(default_factory=list, description="Hard-coded value warnings")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "overall_success": False,
                "coverage": [
                    {
                        "category": "attributes",
                        "success": False,
                        "message": "Attributes: 1/2 covered",
                        "evidence": [{"count": 1, "required": 2, "description": "Missing:\n - Line 4: OtherFlag", "type": "violation"}],
                        "details": ["Line 4: OtherFlag"],
                        "missing": ["OtherFlag"]
                    }
                ],
                "uncovered_branches": ["Attributes: OtherFlag"],
                "uncovered_lines": [4],
                "query": "//Method[@Flag and @OtherFlag]",
                "engine_version": "1.0.0",
                "processing_time_ms": 3.2,
                "warnings": []
            }
        }
    )


class AnalyzeRequest(BaseModel):
    """Request model for the query analysis endpoint."""
    query: str = Field(..., description="XPath query to analyze", min_length=1)

    @field_validator('query')
    @classmethod
    def validate_query(cls, v):
        """Validate query is not empty and within limits."""
        validators.validate_query_not_empty(v)
        validators.validate_query_length(v, constants.MAX_QUERY_LENGTH)
        return v


class AnalyzeResponse(BaseModel):
    """Response model for the query analysis endpoint."""
    features: Dict[str, Any] = Field(..., description="Extracted query features")
    hardcoded_values: List[Dict[str, Any]] = Field(default_factory=list, description="Literals that belong in let variables")
    extractor_version: str = Field(..., description="Feature extractor version")
    processing_time_ms: float = Field(..., description="Processing time in milliseconds")


class ErrorResponse(BaseModel):
    """
    Standard error response model.
    """
    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error details")
    timestamp: str = Field(..., description="Error timestamp")
    request_id: Optional[str] = Field(None, description="Request ID for tracing")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "ValidationError",
                "message": "One of query, rule_file_path or rule_file_content is required",
                "details": None,
                "timestamp": "2024-01-15T10:30:00Z",
                "request_id": "req-123-456-789"
            }
        }
    )


def create_error_response(error_type: str, message: str,
                          details: Optional[Dict] = None,
                          request_id: Optional[str] = None) -> ErrorResponse:
    """
    Create standardized error response.

    Args:
        error_type: Type of error
        message: Human-readable error message
        details: Optional additional details
        request_id: Optional request ID for tracing

    Returns:
        ErrorResponse object
    """
    return ErrorResponse(
        error=error_type,
        message=message,
        details=details,
        timestamp=datetime.now(timezone.utc).isoformat(),
        request_id=request_id
    )
