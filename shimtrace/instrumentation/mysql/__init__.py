"""
MySQL instrumentation for shimtrace.

Usage::

    import pymysql
    from shimtrace.instrumentation.mysql import MysqlInstrumentation

    instrumentation = MysqlInstrumentation()
    instrumentation.install({"peer_service": "orders-db"})

    conn = instrumentation.connect(pymysql.connect, host="db1", port=3306, database="shop")
    conn.query("SELECT 6*7")  # span named "select"
"""

from shimtrace.instrumentation.mysql.attributes import ConnectionParams, SpanAttributeBuilder, SpanNamer
from shimtrace.instrumentation.mysql.client import TracedClient, TracedCursor
from shimtrace.instrumentation.mysql.instrumentation import MysqlInstrumentation
from shimtrace.instrumentation.mysql.statement import StatementClassifier, StatementType, classify

__all__ = [
    'ConnectionParams',
    'MysqlInstrumentation',
    'SpanAttributeBuilder',
    'SpanNamer',
    'StatementClassifier',
    'StatementType',
    'TracedClient',
    'TracedCursor',
    'classify',
]
