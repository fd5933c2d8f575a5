"""
Span names and attributes for MySQL client calls.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from shimtrace.instrumentation.mysql.statement import StatementClassifier, default_classifier

DB_SYSTEM = "mysql"

HOST_KEYS = ("host", "hostname")
DATABASE_KEYS = ("database", "dbname", "db")


def _to_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", "replace")
    return str(value)


def _first(options: Mapping[str, Any], keys) -> Any:
    # An empty string counts as set; only missing or None values fall through.
    for key in keys:
        value = options.get(key)
        if value is not None:
            return value
    return None


def client_options(client: Any) -> Dict[str, Any]:
    """
    Connection options exposed by a client object.

    A ``query_options`` mapping on the client takes precedence; otherwise
    attributes with the conventional names are used.
    """
    options = getattr(client, "query_options", None)
    if isinstance(options, Mapping):
        return dict(options)
    return {key: getattr(client, key, None) for key in HOST_KEYS + DATABASE_KEYS + ("port",)}


def merge_options(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Apply ``overrides`` on top of ``base``.

    Overriding any alias of the host or database drops the other aliases
    from ``base`` so the override is the one that gets read.
    """
    merged = dict(base)
    for group in (HOST_KEYS, DATABASE_KEYS):
        if any(key in overrides for key in group):
            for key in group:
                merged.pop(key, None)
    merged.update(overrides)
    return merged


@dataclass(frozen=True)
class ConnectionParams:
    host: str = ""
    port: str = ""
    database: Optional[str] = None
    peer_service: Optional[str] = None

    @classmethod
    def from_options(cls, options: Mapping[str, Any], peer_service: Optional[str] = None) -> "ConnectionParams":
        """Read connection details from conventional option keys."""
        database = _first(options, DATABASE_KEYS)
        return cls(
            host=_to_str(_first(options, HOST_KEYS)),
            port=_to_str(options.get("port")),
            database=_to_str(database) if database is not None else None,
            peer_service=peer_service,
        )

    @classmethod
    def from_client(cls, client: Any, peer_service: Optional[str] = None) -> "ConnectionParams":
        """Read connection details from a client object, see ``client_options``."""
        return cls.from_options(client_options(client), peer_service)


class SpanAttributeBuilder:
    """Builds the endpoint attributes shared by every span of a connection."""

    def __init__(self, system: str = DB_SYSTEM):
        self.system = system

    def build(self, params: ConnectionParams) -> Dict[str, str]:
        attributes = {"db.system": self.system}
        if params.database:
            attributes["db.instance"] = params.database
        attributes["db.url"] = f"{self.system}://{params.host}:{params.port}"
        attributes["net.peer.name"] = params.host
        attributes["net.peer.port"] = params.port
        if params.peer_service:
            attributes["peer.service"] = params.peer_service
        return attributes


class SpanNamer:
    """
    Names a span after the statement type, falling back to
    ``{system}.{database}`` and then to ``{system}``.
    """

    def __init__(self, classifier: StatementClassifier = default_classifier, system: str = DB_SYSTEM):
        self.classifier = classifier
        self.system = system

    def name(self, query, params: ConnectionParams) -> str:
        statement_type = self.classifier.classify(query)
        if statement_type is not None:
            return statement_type.value
        if params.database:
            return f"{self.system}.{params.database}"
        return self.system
