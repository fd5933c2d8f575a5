"""
Traced wrappers around a MySQL client.

The wrappers compose over the client instead of patching its class: only
``query`` and cursor ``execute``/``executemany`` are intercepted, everything
else is forwarded to the wrapped object.
"""

import dataclasses
from typing import Any, Dict

from opentelemetry.trace import SpanKind

from shimtrace.instrumentation.mysql.attributes import ConnectionParams


class TracedClient:
    """
    Wraps a client exposing ``query(sql, ...)``.
    """

    def __init__(self, client, instrumentation, params: ConnectionParams = None):
        self.__wrapped__ = client
        self._instrumentation = instrumentation
        self._params = params or ConnectionParams.from_client(client)

    def __getattr__(self, name: str) -> Any:
        return getattr(self.__wrapped__, name)

    def __enter__(self):
        self.__wrapped__.__enter__()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        return self.__wrapped__.__exit__(exc_type, exc_value, traceback)

    @property
    def connection_params(self) -> ConnectionParams:
        return self._params

    def _traced(self, sql, func, *args, **kwargs):
        call_instrumentor = self._instrumentation.call_instrumentor
        if call_instrumentor is None:
            return func(sql, *args, **kwargs)
        return call_instrumentor.call(
            self._instrumentation.span_namer.name(sql, self._params),
            self._attributes(sql),
            SpanKind.CLIENT,
            func,
            sql,
            *args,
            **kwargs,
        )

    def _attributes(self, sql) -> Dict[str, str]:
        # peer_service follows the current install, not the one at wrap time.
        params = dataclasses.replace(self._params, peer_service=self._instrumentation.config.get("peer_service"))
        attributes = self._instrumentation.attribute_builder.build(params)
        if sql is not None:
            attributes["db.statement"] = sql
        return attributes

    def query(self, sql, *args, **kwargs):
        return self._traced(sql, self.__wrapped__.query, *args, **kwargs)

    def cursor(self, *args, **kwargs):
        return TracedCursor(self.__wrapped__.cursor(*args, **kwargs), self)


class TracedCursor:
    """
    Wraps a DB-API cursor; statements run through the owning TracedClient.
    """

    def __init__(self, cursor, client: TracedClient):
        self.__wrapped__ = cursor
        self._client = client

    def __getattr__(self, name: str) -> Any:
        return getattr(self.__wrapped__, name)

    def __iter__(self):
        return iter(self.__wrapped__)

    def __enter__(self):
        self.__wrapped__.__enter__()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        return self.__wrapped__.__exit__(exc_type, exc_value, traceback)

    def execute(self, sql, *args, **kwargs):
        return self._client._traced(sql, self.__wrapped__.execute, *args, **kwargs)

    def executemany(self, sql, *args, **kwargs):
        return self._client._traced(sql, self.__wrapped__.executemany, *args, **kwargs)
