"""
Kafka instrumentation for shimtrace.

Usage::

    from kafka import KafkaConsumer, KafkaProducer
    from shimtrace.instrumentation.kafka import KafkaInstrumentation

    instrumentation = KafkaInstrumentation()
    instrumentation.install()

    producer = instrumentation.wrap_producer(KafkaProducer(bootstrap_servers=["localhost:9092"]))
    producer.send("orders", b"raw_bytes")  # span "orders send"

    consumer = instrumentation.wrap_consumer(KafkaConsumer("orders", bootstrap_servers=["localhost:9092"]))
    consumer.each_message(handle_order)  # span "orders process" per record
"""

from shimtrace.instrumentation.kafka.consumer import TracedConsumer
from shimtrace.instrumentation.kafka.instrumentation import KafkaInstrumentation
from shimtrace.instrumentation.kafka.producer import TracedProducer

__all__ = ['KafkaInstrumentation', 'TracedConsumer', 'TracedProducer']
