"""
Span names and attributes for Kafka producer and consumer calls.
"""

from typing import Any, Dict, Optional

MESSAGING_SYSTEM = "kafka"


def _to_str(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8", "replace")
    return str(value)


def send_span_name(topic: str) -> str:
    return f"{topic} send"


def process_span_name(topic: str) -> str:
    return f"{topic} process"


def batch_process_span_name(topic: str) -> str:
    return f"{topic} batch process"


def message_attributes(
    topic: str,
    partition: Optional[int] = None,
    key: Any = None,
    offset: Optional[int] = None,
    peer_service: Optional[str] = None,
) -> Dict[str, str]:
    """Attributes describing one message on ``topic``."""
    attributes = {
        "messaging.system": MESSAGING_SYSTEM,
        "messaging.destination": _to_str(topic),
        "messaging.destination_kind": "topic",
    }
    if partition is not None:
        attributes["messaging.kafka.partition"] = _to_str(partition)
    if key is not None:
        attributes["messaging.kafka.message_key"] = _to_str(key)
    if offset is not None:
        attributes["messaging.kafka.offset"] = _to_str(offset)
    if peer_service:
        attributes["peer.service"] = peer_service
    return attributes


def batch_attributes(
    topic: str,
    partition: Optional[int],
    message_count: int,
    peer_service: Optional[str] = None,
) -> Dict[str, str]:
    """Attributes describing a batch of messages from one topic partition."""
    attributes = message_attributes(topic, partition=partition, peer_service=peer_service)
    attributes["messaging.kafka.message_count"] = str(message_count)
    return attributes
