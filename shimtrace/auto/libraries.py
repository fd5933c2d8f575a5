"""
Author:
Created on: 2025-05-10

Library mappings for automatic instrumentation.

This module maps each supported client library to the shimtrace
instrumentation that traces it.
"""

# Map of supported libraries to their instrumentation modules and classes
SUPPORTED_LIBRARIES = {
    # Databases
    "mysql": {
        "libraries": ["pymysql", "MySQLdb", "mysql.connector"],
        "module": "shimtrace.instrumentation.mysql",
        "class": "MysqlInstrumentation",
    },
    # Messaging Systems
    "kafka": {
        "libraries": ["kafka"],
        "module": "shimtrace.instrumentation.kafka",
        "class": "KafkaInstrumentation",
    },
}

# Libraries that are instrumented by default if found
DEFAULT_AUTO_INSTRUMENT = [
    "mysql",
    "kafka",
]
