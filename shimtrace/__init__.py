"""
shimtrace: OpenTelemetry instrumentation shims for MySQL and Kafka clients.

Quick start::

    import shimtrace

    registry = shimtrace.init("shimtrace.yaml")
    mysql = registry.get("mysql")
    conn = mysql.connect(pymysql.connect, host="db1", port=3306, database="shop")
"""

import logging
from typing import Optional

from shimtrace.auto.instrumentor import InstrumentationError, InstrumentationRegistry
from shimtrace.config.loader import ConfigurationError, apply_config, load_config
from shimtrace.core.instrumentation import CallInstrumentor
from shimtrace.instrumentation.kafka import KafkaInstrumentation
from shimtrace.instrumentation.mysql import MysqlInstrumentation

__version__ = "0.1.0"

logger = logging.getLogger(__name__)


def init(config_path: Optional[str] = None, tracer_provider=None) -> InstrumentationRegistry:
    """
    Load configuration and install the bundled instrumentations.

    Args:
        config_path: Optional YAML or JSON configuration file
        tracer_provider: Provider to use instead of building one from config

    Returns:
        InstrumentationRegistry: Registry holding the installed instrumentations
    """
    config = load_config(config_path)
    registry = apply_config(config, tracer_provider=tracer_provider)
    logger.info(f"shimtrace {__version__} initialized: {', '.join(registry.names())}")
    return registry


__all__ = [
    'CallInstrumentor',
    'ConfigurationError',
    'InstrumentationError',
    'InstrumentationRegistry',
    'KafkaInstrumentation',
    'MysqlInstrumentation',
    'apply_config',
    'init',
    'load_config',
]
