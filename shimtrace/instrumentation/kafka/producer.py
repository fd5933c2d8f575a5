"""
Traced wrapper around a Kafka producer.
"""

from typing import Any

from opentelemetry.trace import SpanKind

from shimtrace.instrumentation.kafka.attributes import message_attributes, send_span_name


class TracedProducer:
    """
    Wraps a producer exposing
    ``send(topic, value=None, key=None, headers=None, partition=None, ...)``.

    Only ``send`` is traced; everything else is forwarded.
    """

    def __init__(self, producer, instrumentation):
        self.__wrapped__ = producer
        self._instrumentation = instrumentation

    def __getattr__(self, name: str) -> Any:
        return getattr(self.__wrapped__, name)

    def send(self, topic, value=None, key=None, headers=None, partition=None, *args, **kwargs):
        call_instrumentor = self._instrumentation.call_instrumentor
        if call_instrumentor is None:
            return self.__wrapped__.send(topic, value, key, headers, partition, *args, **kwargs)

        attributes = message_attributes(
            topic,
            partition=partition,
            key=key,
            peer_service=self._instrumentation.config.get("peer_service"),
        )
        return call_instrumentor.call(
            send_span_name(topic),
            attributes,
            SpanKind.PRODUCER,
            self.__wrapped__.send,
            topic,
            value,
            key,
            headers,
            partition,
            *args,
            **kwargs,
        )
