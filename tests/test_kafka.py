from collections import namedtuple

import pytest
from opentelemetry.trace import SpanKind, StatusCode

from shimtrace.instrumentation.kafka import KafkaInstrumentation, TracedConsumer, TracedProducer

Record = namedtuple("Record", "topic partition offset key value")
TopicPartition = namedtuple("TopicPartition", "topic partition")


class FakeProducer:
    def __init__(self):
        self.sent = []

    def send(self, topic, value=None, key=None, headers=None, partition=None, timestamp_ms=None):
        if topic == "broken":
            raise ConnectionError("broker unavailable")
        self.sent.append((topic, value, key, partition))
        return "future"

    def flush(self):
        return "flushed"


class FakeConsumer:
    def __init__(self, records=(), batches=None):
        self.records = list(records)
        self.batches = batches or {}
        self.poll_kwargs = None

    def __iter__(self):
        return iter(self.records)

    def poll(self, **kwargs):
        self.poll_kwargs = kwargs
        return self.batches


def test_send_emits_producer_span(kafka_instrumentation, exporter):
    producer = kafka_instrumentation.wrap_producer(FakeProducer())
    assert isinstance(producer, TracedProducer)

    assert producer.send("orders", b"payload", key=b"order-1", partition=3) == "future"

    (span,) = exporter.get_finished_spans()
    assert span.name == "orders send"
    assert span.kind is SpanKind.PRODUCER
    assert dict(span.attributes) == {
        "messaging.system": "kafka",
        "messaging.destination": "orders",
        "messaging.destination_kind": "topic",
        "messaging.kafka.partition": "3",
        "messaging.kafka.message_key": "order-1",
    }
    assert producer.__wrapped__.sent == [("orders", b"payload", b"order-1", 3)]


def test_send_positional_partition(kafka_instrumentation, exporter):
    producer = kafka_instrumentation.wrap_producer(FakeProducer())

    producer.send("orders", b"payload", b"order-1", None, 3)

    (span,) = exporter.get_finished_spans()
    assert span.attributes["messaging.kafka.partition"] == "3"
    assert producer.__wrapped__.sent == [("orders", b"payload", b"order-1", 3)]


def test_send_error_propagates(kafka_instrumentation, exporter):
    producer = kafka_instrumentation.wrap_producer(FakeProducer())

    with pytest.raises(ConnectionError, match="broker unavailable"):
        producer.send("broken", b"payload")

    (span,) = exporter.get_finished_spans()
    assert span.name == "broken send"
    assert span.status.status_code is StatusCode.ERROR


def test_producer_delegates_other_calls(kafka_instrumentation, exporter):
    producer = kafka_instrumentation.wrap_producer(FakeProducer())
    assert producer.flush() == "flushed"
    assert exporter.get_finished_spans() == ()


def test_peer_service(tracer_provider, exporter):
    instrumentation = KafkaInstrumentation()
    instrumentation.install({"peer_service": "events"}, tracer_provider)

    instrumentation.wrap_producer(FakeProducer()).send("orders", b"x")

    (span,) = exporter.get_finished_spans()
    assert span.attributes["peer.service"] == "events"


def test_each_message_traces_handler(kafka_instrumentation, exporter):
    records = [Record("orders", 0, 10, b"k1", b"a"), Record("orders", 1, 11, None, b"b")]
    consumer = kafka_instrumentation.wrap_consumer(FakeConsumer(records))
    assert isinstance(consumer, TracedConsumer)
    handled = []

    assert consumer.each_message(handled.append) == 2

    assert handled == records
    first, second = exporter.get_finished_spans()
    assert first.name == "orders process"
    assert first.kind is SpanKind.CONSUMER
    assert first.attributes["messaging.kafka.offset"] == "10"
    assert first.attributes["messaging.kafka.message_key"] == "k1"
    assert second.attributes["messaging.kafka.partition"] == "1"
    assert "messaging.kafka.message_key" not in second.attributes


def test_each_message_stops_after_max_messages(kafka_instrumentation, exporter):
    records = [Record("orders", 0, i, None, b"x") for i in range(5)]
    consumer = kafka_instrumentation.wrap_consumer(FakeConsumer(records))

    assert consumer.each_message(lambda record: None, max_messages=2) == 2
    assert len(exporter.get_finished_spans()) == 2


def test_handler_error_propagates(kafka_instrumentation, exporter):
    consumer = kafka_instrumentation.wrap_consumer(FakeConsumer([Record("orders", 0, 1, None, b"x")]))

    def handler(record):
        raise KeyError("missing field")

    with pytest.raises(KeyError):
        consumer.each_message(handler)

    (span,) = exporter.get_finished_spans()
    assert span.status.status_code is StatusCode.ERROR


def test_each_batch_traces_one_span_per_partition(kafka_instrumentation, exporter):
    batches = {
        TopicPartition("orders", 0): [Record("orders", 0, 1, None, b"a"), Record("orders", 0, 2, None, b"b")],
        TopicPartition("payments", 2): [Record("payments", 2, 7, None, b"c")],
    }
    fake = FakeConsumer(batches=batches)
    consumer = kafka_instrumentation.wrap_consumer(fake)
    sizes = []

    assert consumer.each_batch(lambda records: sizes.append(len(records)), timeout_ms=100) == 2

    assert sizes == [2, 1]
    assert fake.poll_kwargs == {"timeout_ms": 100}
    orders, payments = exporter.get_finished_spans()
    assert orders.name == "orders batch process"
    assert orders.attributes["messaging.kafka.message_count"] == "2"
    assert payments.name == "payments batch process"
    assert payments.attributes["messaging.kafka.partition"] == "2"


def test_plain_iteration_is_untraced(kafka_instrumentation, exporter):
    records = [Record("orders", 0, 1, None, b"a")]
    consumer = kafka_instrumentation.wrap_consumer(FakeConsumer(records))
    assert list(consumer) == records
    assert exporter.get_finished_spans() == ()


def test_uninstalled_consumer_still_handles(kafka_instrumentation, exporter):
    consumer = kafka_instrumentation.wrap_consumer(FakeConsumer([Record("orders", 0, 1, None, b"a")]))
    kafka_instrumentation.uninstall()
    handled = []

    assert consumer.each_message(handled.append) == 1
    assert len(handled) == 1
    assert exporter.get_finished_spans() == ()
