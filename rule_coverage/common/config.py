"""Configuration management for the rule coverage service."""

import os
import yaml
from typing import Dict, Any
from rule_coverage.common.exceptions import ConfigurationError


def load_config(config_path: str = None) -> Dict[str, Any]:
    """
    Load configuration from YAML file and environment variables.

    Environment variables override YAML config values.

    Args:
        config_path: Path to YAML config file.
                     Defaults to RULE_COVERAGE_CONFIG env var or
                     'config/service_config.yaml'

    Returns:
        Dictionary containing merged configuration

    Raises:
        ConfigurationError: If config file is missing or invalid
    """
    # Determine config file path
    if config_path is None:
        config_path = os.environ.get(
            'RULE_COVERAGE_CONFIG',
            'config/service_config.yaml'
        )

    # Load YAML configuration
    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigurationError(f"Configuration file not found: {config_path}")
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML configuration: {e}")

    if config is None:
        raise ConfigurationError(f"Empty configuration file: {config_path}")

    # Apply environment variable overrides
    config = _apply_env_overrides(config)

    # Validate required fields
    _validate_config(config)

    return config


def _apply_env_overrides(config: Dict[str, Any]) -> Dict[str, Any]:
    """Apply environment variable overrides to configuration."""

    # Service overrides
    if 'RULE_COVERAGE_PORT' in os.environ:
        config.setdefault('service', {})['port'] = int(os.environ['RULE_COVERAGE_PORT'])

    if 'RULE_COVERAGE_LOG_LEVEL' in os.environ:
        config.setdefault('logging', {})['level'] = os.environ['RULE_COVERAGE_LOG_LEVEL']

    # Coverage engine overrides
    coverage_config = config.setdefault('coverage', {})

    if 'RULE_COVERAGE_MAX_EXPRESSION_LENGTH' in os.environ:
        coverage_config['max_expression_length'] = int(os.environ['RULE_COVERAGE_MAX_EXPRESSION_LENGTH'])

    if 'RULE_COVERAGE_DISABLED_CATEGORIES' in os.environ:
        raw = os.environ['RULE_COVERAGE_DISABLED_CATEGORIES']
        coverage_config['disabled_categories'] = [c.strip() for c in raw.split(',') if c.strip()]

    if 'RULE_COVERAGE_RULES_ROOT' in os.environ:
        coverage_config['rules_root'] = os.environ['RULE_COVERAGE_RULES_ROOT']

    return config


def _validate_config(config: Dict[str, Any]) -> None:
    """
    Validate required configuration fields.

    Raises:
        ConfigurationError: If required fields are missing
    """
    required_sections = ['service', 'logging']

    for section in required_sections:
        if section not in config:
            raise ConfigurationError(f"Missing required config section: {section}")

    # Validate service section
    service_config = config['service']
    if 'name' not in service_config:
        raise ConfigurationError("Missing required field: service.name")
    if 'version' not in service_config:
        raise ConfigurationError("Missing required field: service.version")

    # Validate logging section
    logging_config = config['logging']
    if 'level' not in logging_config:
        raise ConfigurationError("Missing required field: logging.level")

    # Validate coverage section
    coverage_config = config.get('coverage', {})
    max_length = coverage_config.get('max_expression_length')
    if max_length is not None and (not isinstance(max_length, int) or max_length < 4):
        raise ConfigurationError("coverage.max_expression_length must be an integer >= 4")

    disabled = coverage_config.get('disabled_categories', [])
    if not isinstance(disabled, list):
        raise ConfigurationError("coverage.disabled_categories must be a list")
