"""
Traced wrapper around a Kafka consumer.

Consuming a record is not a call that can be bracketed, processing it is. The
wrapper therefore traces the handler invocations made through
``each_message`` and ``each_batch``; plain iteration is left untraced.
"""

import logging
from typing import Any, Callable, Optional

from opentelemetry.trace import SpanKind

from shimtrace.instrumentation.kafka.attributes import (
    batch_attributes,
    batch_process_span_name,
    message_attributes,
    process_span_name,
)

logger = logging.getLogger(__name__)


class TracedConsumer:
    """
    Wraps a consumer that iterates records and exposes ``poll()``.
    """

    def __init__(self, consumer, instrumentation):
        self.__wrapped__ = consumer
        self._instrumentation = instrumentation

    def __getattr__(self, name: str) -> Any:
        return getattr(self.__wrapped__, name)

    def __iter__(self):
        return iter(self.__wrapped__)

    def __next__(self):
        return next(self.__wrapped__)

    def _peer_service(self) -> Optional[str]:
        return self._instrumentation.config.get("peer_service")

    def process(self, record, handler: Callable):
        """Run ``handler(record)`` inside a consumer span for ``record``."""
        call_instrumentor = self._instrumentation.call_instrumentor
        if call_instrumentor is None:
            return handler(record)

        attributes = message_attributes(
            record.topic,
            partition=getattr(record, "partition", None),
            key=getattr(record, "key", None),
            offset=getattr(record, "offset", None),
            peer_service=self._peer_service(),
        )
        return call_instrumentor.call(
            process_span_name(record.topic), attributes, SpanKind.CONSUMER, handler, record
        )

    def each_message(self, handler: Callable, max_messages: Optional[int] = None) -> int:
        """
        Feed consumed records to ``handler`` one at a time.

        Stops when the underlying iterator is exhausted or after
        ``max_messages`` records. A handler error ends the loop and propagates.

        Returns:
            int: Number of records handled.
        """
        handled = 0
        for record in self.__wrapped__:
            self.process(record, handler)
            handled += 1
            if max_messages is not None and handled >= max_messages:
                break
        return handled

    def each_batch(self, handler: Callable, **poll_kwargs) -> int:
        """
        Poll once and feed each partition's records to ``handler`` as a list.

        Keyword arguments are passed to the consumer's ``poll``.

        Returns:
            int: Number of batches handled.
        """
        batches = self.__wrapped__.poll(**poll_kwargs)
        call_instrumentor = self._instrumentation.call_instrumentor

        handled = 0
        for topic_partition, records in batches.items():
            if call_instrumentor is None:
                handler(records)
            else:
                attributes = batch_attributes(
                    topic_partition.topic,
                    topic_partition.partition,
                    len(records),
                    peer_service=self._peer_service(),
                )
                call_instrumentor.call(
                    batch_process_span_name(topic_partition.topic),
                    attributes,
                    SpanKind.CONSUMER,
                    handler,
                    records,
                )
            handled += 1

        logger.debug(f"Handled {handled} kafka batches")
        return handled
