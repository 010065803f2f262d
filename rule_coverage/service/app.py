"""
Rule coverage service entry point.

Builds the Flask application around the coverage engine and serves it with
Waitress. Configuration comes from the YAML file resolved by load_config;
the 'coverage' section can be overridden by callers embedding the app.
"""

import os
import logging
from typing import Any, Dict, Optional
from flask import Flask
from waitress import serve

from rule_coverage.common.config import load_config
from rule_coverage.common.exceptions import ConfigurationError
from rule_coverage.core.coverage.aggregator import CoverageAggregator
from rule_coverage.service.routes import register_routes
from rule_coverage.utils.logging_utils import setup_logging

logger = logging.getLogger(__name__)

DEFAULT_LOGGING = {'level': 'INFO', 'format': 'json'}


def _check_rules_root(coverage_config: Dict[str, Any]) -> None:
    """A configured rules_root must be an existing directory."""
    rules_root = coverage_config.get('rules_root')
    if rules_root and not os.path.isdir(rules_root):
        raise ConfigurationError(f"coverage.rules_root is not a directory: {rules_root}")


def create_app(config_path: str = None,
               coverage_overrides: Optional[Dict[str, Any]] = None) -> Flask:
    """
    Create the coverage service application.

    Args:
        config_path: Optional path to configuration file
        coverage_overrides: Values merged over the 'coverage' config section

    Returns:
        Flask application with the coverage routes registered

    Raises:
        ConfigurationError: If the configuration is missing or invalid
    """
    try:
        config = load_config(config_path)
        coverage_config = dict(config.get('coverage') or {})
        coverage_config.update(coverage_overrides or {})
        _check_rules_root(coverage_config)
    except ConfigurationError as e:
        print(f"FATAL: Configuration error: {e}")
        raise

    config['coverage'] = coverage_config
    app = Flask(__name__)
    app.config.update(config)

    setup_logging(config.get('logging', DEFAULT_LOGGING))

    register_routes(app)

    enabled = [checker.category.value for checker in CoverageAggregator(coverage_config).checkers]
    logger.info(
        "Rule coverage app created",
        extra={
            'service': config.get('service', {}).get('name', 'unknown'),
            'version': config.get('service', {}).get('version', 'unknown'),
            'engine_version': CoverageAggregator.VERSION,
            'categories': enabled,
            'rules_root': coverage_config.get('rules_root')
        }
    )

    return app


def main():
    """Run the coverage service under Waitress."""
    try:
        app = create_app()

        service_config = app.config.get('service', {})
        host = service_config.get('host', '0.0.0.0')
        port = service_config.get('port', 8000)
        threads = service_config.get('workers', 4)

        logger.info(f"Serving rule coverage on {host}:{port}",
                    extra={'threads': threads, 'version': service_config.get('version', 'unknown')})

        serve(app, host=host, port=port, threads=threads, url_scheme='http')

    except Exception as e:
        logger.error(f"Failed to start service: {e}", exc_info=True)
        raise


if __name__ == '__main__':
    main()
