"""Unit tests for API route handlers with comprehensive error handling tests."""

import pytest
from unittest.mock import patch
from flask import Flask

from rule_coverage.service.routes import register_routes


INLINE_RULE = """<?xml version="1.0"?>
<rule name="TestRule">
  <properties>
    <property name="xpath" value="//Method[@Flag and @OtherFlag]"/>
  </properties>
</rule>
"""


@pytest.fixture
def app():
    """Create a Flask app for testing."""
    app = Flask(__name__)
    app.config['TESTING'] = True
    app.config['service'] = {
        'name': 'test-service',
        'version': '1.0.0'
    }
    app.config['coverage'] = {'max_expression_length': 80}
    return app


@pytest.fixture
def client(app):
    """Create a test client."""
    register_routes(app)
    return app.test_client()


class TestLivenessEndpoint:
    """Test cases for the liveness endpoint."""

    def test_liveness_success(self, client):
        """Test successful liveness check."""
        response = client.get('/manage/health/liveness')

        assert response.status_code == 200
        data = response.get_json()
        assert data['status'] == 'UP'
        assert data['service'] == 'test-service'

    def test_liveness_with_missing_service_config(self, app):
        """Test liveness with missing service config."""
        app.config.pop('service', None)
        register_routes(app)
        client = app.test_client()

        response = client.get('/manage/health/liveness')

        assert response.status_code == 200
        assert response.get_json()['service'] == 'unknown'

    def test_liveness_config_access_error(self, app):
        """Test liveness when config access raises an exception."""
        app.config['service'] = None
        register_routes(app)
        client = app.test_client()

        response = client.get('/manage/health/liveness')

        assert response.status_code == 500
        data = response.get_json()
        assert data['status'] == 'DOWN'
        assert 'error' in data


class TestReadinessEndpoint:
    """Test cases for the readiness endpoint."""

    def test_readiness_success(self, client):
        """Test successful readiness check."""
        response = client.get('/manage/health/readiness')

        assert response.status_code == 200
        data = response.get_json()
        assert data['ready'] is True
        assert data['version'] == '1.0.0'
        assert data['checks']['engine_ready'] is True
        assert data['checks']['category_checkers'] == 4

    def test_readiness_with_disabled_category(self, app):
        """Test readiness reports the enabled checkers only."""
        app.config['coverage'] = {'disabled_categories': ['operators']}
        register_routes(app)
        client = app.test_client()

        response = client.get('/manage/health/readiness')

        assert response.get_json()['checks']['category_checkers'] == 3

    def test_readiness_config_access_error(self, app):
        """Test readiness when config access raises an exception."""
        app.config['service'] = None
        register_routes(app)
        client = app.test_client()

        response = client.get('/manage/health/readiness')

        assert response.status_code == 500
        assert response.get_json()['ready'] is False


class TestCoverageEndpoint:
    """Test cases for the coverage endpoint."""

    def test_coverage_success(self, client):
        """Test a fully covered query."""
        response = client.post('/v1/coverage', json={
            'query': '//Method[@Static = true() and .//IfBlockStatement]',
            'examples': [{'content': 'public static void run() { if (x == 1 && y) { } }'}]
        })

        assert response.status_code == 200
        data = response.get_json()
        assert data['overall_success'] is True
        assert [r['category'] for r in data['coverage']] == [
            'node_types', 'conditionals', 'attributes', 'operators'
        ]
        assert data['uncovered_branches'] == []
        assert data['engine_version'] == '1.0.0'
        assert data['processing_time_ms'] >= 0

    def test_coverage_with_rule_content(self, client):
        """Test line numbers from inline rule content; the query comes from the rule."""
        response = client.post('/v1/coverage', json={
            'rule_file_content': INLINE_RULE,
            'examples': [{'content': 'if (flag) { }'}]
        })

        assert response.status_code == 200
        data = response.get_json()
        assert data['query'] == '//Method[@Flag and @OtherFlag]'
        assert data['overall_success'] is False
        assert data['uncovered_lines'] == [4]
        assert 'Operators: and' in data['uncovered_branches']

    def test_coverage_with_rule_file_path(self, client, tmp_path):
        """Test the query is read from a rule file on disk."""
        rule_file = tmp_path / "rule.xml"
        rule_file.write_text(INLINE_RULE, encoding='utf-8')

        response = client.post('/v1/coverage', json={
            'rule_file_path': str(rule_file),
            'examples': [{'content': 'if (flag && otherFlag) { }'}]
        })

        assert response.status_code == 200
        data = response.get_json()
        assert data['query'] == '//Method[@Flag and @OtherFlag]'

    def test_coverage_rule_file_outside_root(self, app, tmp_path):
        """Test rule files outside the configured root are rejected."""
        app.config['coverage'] = {'rules_root': str(tmp_path / "rules")}
        register_routes(app)
        client = app.test_client()

        response = client.post('/v1/coverage', json={
            'rule_file_path': str(tmp_path / "other.xml"),
            'examples': []
        })

        assert response.status_code == 400
        assert response.get_json()['error'] == 'ValueError'

    def test_coverage_unreadable_rule_file(self, client, tmp_path):
        """Test a missing rule file without a query is rejected."""
        response = client.post('/v1/coverage', json={
            'rule_file_path': str(tmp_path / "missing.xml"),
            'examples': []
        })

        assert response.status_code == 400
        assert response.get_json()['error'] == 'RuleFileError'

    def test_coverage_rule_without_xpath(self, client):
        """Test rule content without an xpath property is rejected."""
        response = client.post('/v1/coverage', json={
            'rule_file_content': '<rule name="Empty"/>',
            'examples': []
        })

        assert response.status_code == 400
        assert 'no xpath property' in response.get_json()['message']

    def test_coverage_invalid_rule_xml(self, client):
        """Test malformed rule content is rejected."""
        response = client.post('/v1/coverage', json={
            'rule_file_content': '<rule>',
            'examples': []
        })

        assert response.status_code == 400
        assert response.get_json()['error'] == 'RuleFileError'

    def test_coverage_missing_query_source(self, client):
        """Test request without any query source."""
        response = client.post('/v1/coverage', json={'examples': []})

        assert response.status_code == 400
        data = response.get_json()
        assert data['error'] == 'ValidationError'
        assert data['details']['errors']

    def test_coverage_non_object_body(self, client):
        """Test non-object JSON body."""
        response = client.post('/v1/coverage', json=['//A'])

        assert response.status_code == 400
        assert response.get_json()['message'] == 'Request body must be a JSON object'

    def test_coverage_no_json(self, client):
        """Test request without JSON."""
        response = client.post('/v1/coverage', data='not json', content_type='text/plain')

        assert response.status_code == 400

    def test_coverage_hardcoded_value_warnings(self, client):
        """Test hard-coded literals come back as warnings."""
        response = client.post('/v1/coverage', json={
            'query': "//MethodCallExpression[@MethodName = 'join']",
            'examples': [{'content': "String.join(',', parts);"}]
        })

        assert response.status_code == 200
        warnings = response.get_json()['warnings']
        assert len(warnings) == 1
        assert "'join'" in warnings[0]

    def test_coverage_unexpected_error(self, client):
        """Test unexpected engine errors map to 500."""
        with patch('rule_coverage.service.routes.CoverageAggregator.check', side_effect=RuntimeError("boom")):
            response = client.post('/v1/coverage', json={
                'query': '//A',
                'examples': [{'content': 'x'}]
            })

        assert response.status_code == 500
        assert response.get_json()['error'] == 'InternalServerError'


class TestAnalyzeEndpoint:
    """Test cases for the analyze endpoint."""

    def test_analyze_success(self, client):
        """Test feature extraction through the API."""
        response = client.post('/v1/analyze', json={'query': "//A[@B = 'x' and @C]"})

        assert response.status_code == 200
        data = response.get_json()
        assert data['features']['node_types'] == ['A']
        assert data['features']['attributes'] == ['B', 'C']
        assert data['hardcoded_values'][0]['value'] == 'x'
        assert data['extractor_version'] == '1.0.0'

    def test_analyze_empty_query(self, client):
        """Test empty query is rejected."""
        response = client.post('/v1/analyze', json={'query': '  '})

        assert response.status_code == 400
        assert response.get_json()['error'] == 'ValidationError'

    def test_analyze_non_object_body(self, client):
        """Test non-object JSON body."""
        response = client.post('/v1/analyze', json='//A')

        assert response.status_code == 400


class TestInfoEndpoint:
    """Test cases for the info endpoint."""

    def test_info_success(self, client):
        """Test service information."""
        response = client.get('/v1/info')

        assert response.status_code == 200
        data = response.get_json()
        assert data['service'] == 'test-service'
        assert data['categories'] == ['node_types', 'conditionals', 'attributes', 'operators']
        assert '/v1/coverage' in data['endpoints']

    def test_info_config_access_error(self, app):
        """Test info when config access raises an exception."""
        app.config['service'] = None
        register_routes(app)
        client = app.test_client()

        response = client.get('/v1/info')

        assert response.status_code == 500
