"""
Author:
Created on: 2025-05-10

Configuration loading and management for shimtrace.

This module provides functions to load and apply configuration for the
tracer provider, logging and the client instrumentations.
"""

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

# Default configuration
DEFAULT_CONFIG = {
    "service": {
        "name": "unnamed-service",
        "version": "1.0.0",
        "environment": "development"
    },
    "tracing": {
        "enabled": True,
        "exporters": ["console"],
        "otlp": {
            "endpoint": None
        }
    },
    "logging": {
        "enabled": True,
        "level": "INFO",
        "format": None,
        "json": False,
        "loguru": False
    },
    "instrumentation": {
        "mysql": {
            "enabled": True,
            "peer_service": None,
            "allow_leading_whitespace": False
        },
        "kafka": {
            "enabled": True,
            "peer_service": None
        }
    }
}

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Exception raised for configuration errors."""
    pass


def deep_merge(source: Dict[str, Any], destination: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep merge two dictionaries.

    Args:
        source: Source dictionary
        destination: Destination dictionary (will be modified)

    Returns:
        dict: Merged dictionary
    """
    for key, value in source.items():
        if isinstance(value, dict):
            node = destination.setdefault(key, {})
            if isinstance(node, dict):
                deep_merge(value, node)
            else:
                destination[key] = value
        else:
            destination[key] = value

    return destination


def _parse_env_value(value: str) -> Any:
    lowered = value.lower()
    if lowered in ("true", "yes"):
        return True
    if lowered in ("false", "no"):
        return False
    if lowered in ("null", "none"):
        return None
    if value.isdigit():
        return int(value)
    return value


def _load_from_env(prefix: str = "SHIMTRACE_") -> Dict[str, Any]:
    """
    Load configuration from environment variables.

    Nested keys are separated by double underscores, e.g.
    SHIMTRACE_INSTRUMENTATION__MYSQL__PEER_SERVICE=orders-db

    Args:
        prefix: Prefix for environment variables

    Returns:
        dict: Configuration from environment variables
    """
    config = {}

    for key, value in os.environ.items():
        if not key.startswith(prefix):
            continue

        key_path = key[len(prefix):].lower().split("__")
        current = config
        for part in key_path[:-1]:
            current = current.setdefault(part, {})
        current[key_path[-1]] = _parse_env_value(value)

    return config


def _load_from_file(file_path: str) -> Dict[str, Any]:
    """
    Load configuration from a JSON or YAML file.

    Raises:
        ConfigurationError: If the file is missing, unreadable or has an unsupported format
    """
    path = Path(file_path)

    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {file_path}")

    suffix = path.suffix.lower()
    if suffix not in (".json", ".yaml", ".yml"):
        raise ConfigurationError(f"Unsupported configuration file format: {suffix}")

    try:
        with open(path) as f:
            if suffix == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Error loading configuration from {file_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration in {file_path} must be a mapping")
    return data


def load_config(
    config_path: Optional[str] = None,
    env_prefix: str = "SHIMTRACE_",
    merge_env: bool = True
) -> Dict[str, Any]:
    """
    Load configuration from multiple sources.

    Priority (highest to lowest):
    1. Environment variables (if merge_env is True)
    2. Configuration file (if provided)
    3. Default configuration

    Args:
        config_path: Path to configuration file
        env_prefix: Prefix for environment variables
        merge_env: Whether to merge environment variables

    Returns:
        dict: Merged configuration
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    if config_path:
        try:
            file_config = _load_from_file(config_path)
            config = deep_merge(file_config, config)
            logger.info(f"Loaded configuration from file: {config_path}")
        except ConfigurationError as e:
            logger.warning(str(e))

    if merge_env:
        env_config = _load_from_env(env_prefix)
        if env_config:
            config = deep_merge(env_config, config)
            logger.info("Merged configuration from environment variables")

    return config


def apply_config(config: Dict[str, Any], registry=None, tracer_provider=None):
    """
    Apply the loaded configuration.

    Sets up logging, builds a tracer provider (unless one is given) and
    installs the configured instrumentations into ``registry``.

    Args:
        config: Configuration dictionary
        registry: InstrumentationRegistry to install into. A new one holding the
            bundled instrumentations is created if omitted.
        tracer_provider: Provider to use instead of building one

    Returns:
        InstrumentationRegistry: The registry with instrumentations installed
    """
    from shimtrace.auto.instrumentor import InstrumentationRegistry
    from shimtrace.core.tracer import create_tracer_provider
    from shimtrace.instrumentation.kafka import KafkaInstrumentation
    from shimtrace.instrumentation.mysql import MysqlInstrumentation
    from shimtrace.logging_helpers.integrations import setup_logging

    logging_config = config.get("logging", {})
    if logging_config.get("enabled", True):
        setup_logging(
            level=logging_config.get("level", "INFO"),
            format_string=logging_config.get("format"),
            json_format=logging_config.get("json", False),
            enable_loguru=logging_config.get("loguru", False),
        )
        logger.info("Set up logging")

    tracing_config = config.get("tracing", {})
    if tracer_provider is None and tracing_config.get("enabled", True):
        service_config = config.get("service", {})
        tracer_provider = create_tracer_provider(
            service_name=service_config.get("name", "unnamed-service"),
            version=service_config.get("version", "1.0.0"),
            environment=service_config.get("environment", "development"),
            exporters=tracing_config.get("exporters", ["console"]),
            exporter_endpoints={"otlp": tracing_config.get("otlp", {}).get("endpoint")},
        )
        logger.info("Initialized tracing")

    if registry is None:
        registry = InstrumentationRegistry()
        registry.register(MysqlInstrumentation())
        registry.register(KafkaInstrumentation())

    if tracing_config.get("enabled", True):
        registry.install_all(config.get("instrumentation", {}), tracer_provider)
        logger.info("Installed instrumentations")

    return registry
