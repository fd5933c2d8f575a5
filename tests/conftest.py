import pytest
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from shimtrace.instrumentation.kafka import KafkaInstrumentation
from shimtrace.instrumentation.mysql import MysqlInstrumentation


class FakeCursor:
    def __init__(self, client):
        self.client = client
        self.executed = []
        self.closed = False

    def execute(self, sql, args=None):
        self.client.check(sql)
        self.executed.append((sql, args))
        return 1

    def executemany(self, sql, seq):
        self.client.check(sql)
        self.executed.extend((sql, args) for args in seq)
        return len(seq)

    def fetchall(self):
        return [(42,)]

    def close(self):
        self.closed = True


class FakeMysqlClient:
    """Stands in for a connected client; ``fail_with`` makes every call raise."""

    def __init__(self, query_options=None, fail_with=None):
        self.query_options = query_options if query_options is not None else {}
        self.fail_with = fail_with
        self.queries = []

    def check(self, sql):
        if self.fail_with is not None:
            raise self.fail_with

    def query(self, sql, options=None):
        self.check(sql)
        self.queries.append((sql, options))
        return f"result of {sql}"

    def cursor(self):
        return FakeCursor(self)

    def ping(self):
        return "pong"


class AttributeMysqlClient:
    """A client exposing connection details as attributes, like PyMySQL."""

    query_options = None

    def __init__(self, host, port, db):
        self.host = host
        self.port = port
        self.db = db

    def query(self, sql):
        return 0


@pytest.fixture
def exporter():
    return InMemorySpanExporter()


@pytest.fixture
def tracer_provider(exporter):
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    yield provider
    provider.shutdown()


@pytest.fixture
def mysql_instrumentation(tracer_provider):
    instrumentation = MysqlInstrumentation()
    instrumentation.install(tracer_provider=tracer_provider)
    yield instrumentation
    instrumentation.uninstall()


@pytest.fixture
def kafka_instrumentation(tracer_provider):
    instrumentation = KafkaInstrumentation()
    instrumentation.install(tracer_provider=tracer_provider)
    yield instrumentation
    instrumentation.uninstall()


@pytest.fixture
def mysql_client():
    return FakeMysqlClient({"host": "db1", "port": 3306, "database": "shop"})
