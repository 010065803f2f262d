"""Unit tests for configuration management."""

import pytest
import os
import yaml
from unittest.mock import patch
from rule_coverage.common.config import load_config, _apply_env_overrides, _validate_config
from rule_coverage.common.exceptions import ConfigurationError


def _base_config():
    return {
        'service': {'name': 'test-service', 'version': '1.0.0', 'port': 8000},
        'logging': {'level': 'INFO', 'format': 'json'},
    }


def test_load_config_success(tmp_path):
    """Test successful configuration loading from YAML."""
    config_file = tmp_path / "test_config.yaml"
    config_data = _base_config()
    config_data['coverage'] = {'max_expression_length': 60, 'disabled_categories': []}

    with open(config_file, 'w') as f:
        yaml.dump(config_data, f)

    with patch.dict(os.environ, {}, clear=True):
        config = load_config(str(config_file))

    assert config['service']['name'] == 'test-service'
    assert config['service']['version'] == '1.0.0'
    assert config['service']['port'] == 8000
    assert config['logging']['level'] == 'INFO'
    assert config['coverage']['max_expression_length'] == 60


def test_load_config_from_env_path(tmp_path):
    """Test config path taken from RULE_COVERAGE_CONFIG."""
    config_file = tmp_path / "env_config.yaml"
    config_file.write_text(yaml.dump(_base_config()))

    with patch.dict(os.environ, {'RULE_COVERAGE_CONFIG': str(config_file)}, clear=True):
        config = load_config()

    assert config['service']['name'] == 'test-service'
    assert config['coverage'] == {}


def test_load_config_file_not_found():
    """Test configuration loading fails with missing file."""
    with pytest.raises(ConfigurationError) as exc_info:
        load_config('/nonexistent/config.yaml')

    assert "Configuration file not found" in str(exc_info.value)


def test_load_config_invalid_yaml(tmp_path):
    """Test configuration loading fails with invalid YAML."""
    config_file = tmp_path / "invalid_config.yaml"

    with open(config_file, 'w') as f:
        f.write("invalid: yaml: content: [")

    with pytest.raises(ConfigurationError) as exc_info:
        load_config(str(config_file))

    assert "Invalid YAML configuration" in str(exc_info.value)


def test_load_config_empty_file(tmp_path):
    """Test configuration loading fails with empty file."""
    config_file = tmp_path / "empty_config.yaml"
    config_file.write_text("")

    with pytest.raises(ConfigurationError) as exc_info:
        load_config(str(config_file))

    assert "Empty configuration file" in str(exc_info.value)


def test_apply_env_overrides():
    """Test environment variable overrides."""
    config = _base_config()

    env = {
        'RULE_COVERAGE_PORT': '9000',
        'RULE_COVERAGE_LOG_LEVEL': 'DEBUG',
        'RULE_COVERAGE_MAX_EXPRESSION_LENGTH': '40',
        'RULE_COVERAGE_DISABLED_CATEGORIES': 'operators, attributes,',
        'RULE_COVERAGE_RULES_ROOT': '/srv/rules',
    }
    with patch.dict(os.environ, env, clear=True):
        result = _apply_env_overrides(config)

    assert result['service']['port'] == 9000
    assert result['logging']['level'] == 'DEBUG'
    assert result['coverage']['max_expression_length'] == 40
    assert result['coverage']['disabled_categories'] == ['operators', 'attributes']
    assert result['coverage']['rules_root'] == '/srv/rules'


def test_apply_env_overrides_without_env():
    """Test config is unchanged apart from the coverage section default."""
    with patch.dict(os.environ, {}, clear=True):
        result = _apply_env_overrides(_base_config())

    assert result['service']['port'] == 8000
    assert result['coverage'] == {}


def test_validate_config_success():
    """Test validation passes with all required fields."""
    _validate_config(_base_config())


@pytest.mark.parametrize("section", ['service', 'logging'])
def test_validate_config_missing_section(section):
    """Test validation fails with missing section."""
    config = _base_config()
    del config[section]

    with pytest.raises(ConfigurationError, match=f"Missing required config section: {section}"):
        _validate_config(config)


@pytest.mark.parametrize("section,field", [('service', 'name'), ('service', 'version'), ('logging', 'level')])
def test_validate_config_missing_field(section, field):
    """Test validation fails with missing required field."""
    config = _base_config()
    del config[section][field]

    with pytest.raises(ConfigurationError, match=f"Missing required field: {section}.{field}"):
        _validate_config(config)


@pytest.mark.parametrize("value", [2, 'long', 3.5])
def test_validate_config_bad_expression_length(value):
    """Test validation of coverage.max_expression_length."""
    config = _base_config()
    config['coverage'] = {'max_expression_length': value}

    with pytest.raises(ConfigurationError, match="max_expression_length"):
        _validate_config(config)


def test_validate_config_bad_disabled_categories():
    """Test validation of coverage.disabled_categories."""
    config = _base_config()
    config['coverage'] = {'disabled_categories': 'operators'}

    with pytest.raises(ConfigurationError, match="disabled_categories must be a list"):
        _validate_config(config)


def test_shipped_config_is_valid():
    """Test the bundled service config loads."""
    config_path = os.path.join(os.path.dirname(__file__), '..', '..', 'config', 'service_config.yaml')

    with patch.dict(os.environ, {}, clear=True):
        config = load_config(config_path)

    assert config['service']['name'] == 'xpath-rule-coverage'
    assert config['coverage']['max_expression_length'] == 80
