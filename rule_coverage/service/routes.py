"""API route handlers for the rule coverage service."""

import time
from flask import jsonify, current_app, request
from pydantic import ValidationError as PydanticValidationError
import logging

from rule_coverage.common import validators
from rule_coverage.common.exceptions import RuleFileError
from rule_coverage.core.analyzer.parsers.rule_file_parser import extract_query_from_text
from rule_coverage.core.coverage.aggregator import CoverageAggregator
from rule_coverage.core.coverage.source_locator import RuleFileSource
from rule_coverage.service.schemas import (
    AnalyzeRequest, AnalyzeResponse, CoverageRequest, CoverageResponse, create_error_response
)

logger = logging.getLogger(__name__)


def _error(error_type: str, message: str, status: int, details=None):
    return jsonify(create_error_response(error_type, message, details).model_dump()), status


def _validation_details(error: PydanticValidationError):
    return {'errors': [
        {'field': '.'.join(str(p) for p in err.get('loc', ())), 'message': err.get('msg', '')}
        for err in error.errors()
    ]}


def register_routes(app):
    """
    Register all API routes with the Flask app.

    Args:
        app: Flask application instance
    """
    coverage_config = app.config.get('coverage', {}) or {}
    aggregator = CoverageAggregator(coverage_config)

    @app.route('/manage/health/liveness', methods=['GET'])
    def liveness():
        """
        Liveness probe endpoint.

        Returns 200 if the service is alive (process is running).
        """
        try:
            service_name = current_app.config.get('service', {}).get('name', 'unknown')
            return jsonify({
                "status": "UP",
                "service": service_name
            }), 200
        except Exception as e:
            logger.error(f"Error in liveness check: {e}")
            return jsonify({
                "status": "DOWN",
                "error": "Internal error"
            }), 500

    @app.route('/manage/health/readiness', methods=['GET'])
    def readiness():
        """
        Readiness probe endpoint.

        Returns 200 once the coverage engine is initialized.
        """
        try:
            service_config = current_app.config.get('service', {})

            return jsonify({
                "ready": True,
                "status": "UP",
                "service": service_config.get('name', 'unknown'),
                "version": service_config.get('version', 'unknown'),
                "checks": {
                    "engine_ready": True,
                    "category_checkers": len(aggregator.checkers)
                }
            }), 200
        except Exception as e:
            logger.error(f"Error in readiness check: {e}")
            return jsonify({
                "ready": False,
                "status": "DOWN",
                "error": "Internal error"
            }), 500

    @app.route('/v1/coverage', methods=['POST'])
    def coverage():
        """
        Coverage endpoint.

        Checks the request's examples against the rule query and returns the
        aggregate coverage report.
        """
        start_time = time.perf_counter()

        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            return _error("ValidationError", "Request body must be a JSON object", 400)

        try:
            coverage_request = CoverageRequest.model_validate(payload)
        except PydanticValidationError as e:
            return _error("ValidationError", "Invalid coverage request", 400, _validation_details(e))

        try:
            rule_file_path = coverage_request.rule_file_path
            rule_text = coverage_request.rule_file_content

            if rule_file_path is not None:
                validators.validate_rule_file_path(rule_file_path, coverage_config.get('rules_root'))
                if rule_text is None:
                    rule_text = RuleFileSource.read(rule_file_path)

            query = coverage_request.query
            if query is None:
                if rule_text is None:
                    raise RuleFileError(f"Cannot read rule file: {rule_file_path}")
                query = extract_query_from_text(rule_text)
                if query is None:
                    raise RuleFileError("Rule file has no xpath property")

            examples = [e.to_example_source() for e in coverage_request.examples]
            report = aggregator.check(query, examples, rule_file_text=rule_text)
            hardcoded_values = aggregator.extractor.find_hardcoded_values(query)

            response = CoverageResponse(
                overall_success=report.overall_success,
                coverage=[r.to_dict() for r in report.coverage],
                uncovered_branches=report.uncovered_branches,
                uncovered_lines=report.uncovered_lines,
                query=query,
                engine_version=CoverageAggregator.VERSION,
                processing_time_ms=(time.perf_counter() - start_time) * 1000,
                warnings=[v.recommendation for v in hardcoded_values]
            )
            return jsonify(response.model_dump()), 200

        except (ValueError, RuleFileError) as e:
            logger.warning(f"Rejected coverage request: {e}")
            return _error(type(e).__name__, str(e), 400)
        except Exception as e:
            logger.error(f"Error in coverage endpoint: {e}", exc_info=True)
            return _error("InternalServerError", "An unexpected error occurred", 500)

    @app.route('/v1/analyze', methods=['POST'])
    def analyze():
        """
        Query analysis endpoint.

        Returns the extracted features and hard-coded value warnings of a query.
        """
        start_time = time.perf_counter()

        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            return _error("ValidationError", "Request body must be a JSON object", 400)

        try:
            analyze_request = AnalyzeRequest.model_validate(payload)
        except PydanticValidationError as e:
            return _error("ValidationError", "Invalid analyze request", 400, _validation_details(e))

        try:
            extractor = aggregator.extractor
            model = extractor.extract(analyze_request.query)
            hardcoded_values = extractor.find_hardcoded_values(analyze_request.query)

            response = AnalyzeResponse(
                features=model.to_dict(),
                hardcoded_values=[v.to_dict() for v in hardcoded_values],
                extractor_version=extractor.VERSION,
                processing_time_ms=(time.perf_counter() - start_time) * 1000
            )
            return jsonify(response.model_dump()), 200

        except ValueError as e:
            return _error("ValidationError", str(e), 400)
        except Exception as e:
            logger.error(f"Error in analyze endpoint: {e}", exc_info=True)
            return _error("InternalServerError", "An unexpected error occurred", 500)

    @app.route('/v1/info', methods=['GET'])
    def info():
        """
        Service information endpoint.

        Returns metadata about the service and the coverage engine.
        """
        try:
            service_config = current_app.config.get('service', {})

            return jsonify({
                "service": service_config.get('name', 'xpath-rule-coverage'),
                "version": service_config.get('version', '1.0.0'),
                "engine_version": CoverageAggregator.VERSION,
                "categories": [checker.category.value for checker in aggregator.checkers],
                "endpoints": {
                    "/manage/health/liveness": "Liveness probe",
                    "/manage/health/readiness": "Readiness probe",
                    "/v1/coverage": "Rule example coverage check",
                    "/v1/analyze": "Query feature extraction",
                    "/v1/info": "Service information"
                }
            }), 200
        except Exception as e:
            logger.error(f"Error in info endpoint: {e}")
            return jsonify({
                "error": "Internal server error",
                "message": "Unable to retrieve service information"
            }), 500

    logger.info("Routes registered successfully")
