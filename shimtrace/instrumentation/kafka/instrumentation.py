"""
Kafka instrumentation: option schema and wrapper factories.
"""

from shimtrace.core.base import Instrumentation, Option, optional_string
from shimtrace.instrumentation.kafka.consumer import TracedConsumer
from shimtrace.instrumentation.kafka.producer import TracedProducer


class KafkaInstrumentation(Instrumentation):
    name = "kafka"
    version = "0.1.0"
    options = {
        "peer_service": Option(default=None, validate=optional_string),
    }

    def wrap_producer(self, producer) -> TracedProducer:
        return TracedProducer(producer, self)

    def wrap_consumer(self, consumer) -> TracedConsumer:
        return TracedConsumer(consumer, self)
