"""
MySQL instrumentation: option schema and wrapper factories.
"""

import logging
from typing import Any, Callable, Dict, Optional

from shimtrace.core.base import Instrumentation, Option, boolean, optional_string
from shimtrace.instrumentation.mysql.attributes import (
    ConnectionParams,
    SpanAttributeBuilder,
    SpanNamer,
    client_options,
    merge_options,
)
from shimtrace.instrumentation.mysql.client import TracedClient
from shimtrace.instrumentation.mysql.statement import StatementClassifier

logger = logging.getLogger(__name__)


class MysqlInstrumentation(Instrumentation):
    name = "mysql"
    version = "0.1.0"
    options = {
        "peer_service": Option(default=None, validate=optional_string),
        "allow_leading_whitespace": Option(default=False, validate=boolean),
    }

    def __init__(self):
        super().__init__()
        self.attribute_builder = SpanAttributeBuilder()
        self.span_namer = SpanNamer()

    def install(self, config: Optional[Dict[str, Any]] = None, tracer_provider=None) -> bool:
        installed = super().install(config, tracer_provider)
        classifier = StatementClassifier(allow_leading_whitespace=self.config["allow_leading_whitespace"])
        self.span_namer = SpanNamer(classifier)
        return installed

    def wrap(self, client, **options) -> TracedClient:
        """
        Wrap an existing client.

        Keyword options (host, port, database, ...) are applied on top of
        what the client itself exposes; keys not given keep the client's value.
        """
        params = None
        if options:
            params = ConnectionParams.from_options(merge_options(client_options(client), options))
        return TracedClient(client, self, params)

    def connect(self, connect: Callable, *args, **options) -> TracedClient:
        """Call ``connect(*args, **options)`` and wrap the resulting client."""
        client = connect(*args, **options)
        logger.debug(f"Wrapping mysql client {type(client).__name__}")
        if getattr(client, "query_options", None) is None and options:
            return self.wrap(client, **options)
        return self.wrap(client)
