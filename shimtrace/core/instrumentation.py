"""
Author:
Created on: 2025-05-09

Call instrumentation for shimtrace.

Every traced client call goes through a CallInstrumentor: it opens one span
around the delegated call, marks failures on the span and lets the original
error reach the caller untouched.
"""

from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, Optional

from opentelemetry.trace import Span, SpanKind, Status, StatusCode


TraceAttributesType = Dict[str, Any]


class CallInstrumentor:
    """
    Brackets a single delegated call with a span.
    """

    def __init__(self, tracer):
        """
        Initialize a call instrumentor.

        Args:
            tracer: OpenTelemetry tracer used to open spans
        """
        self.tracer = tracer

    @contextmanager
    def span(
        self,
        name: str,
        attributes: Optional[TraceAttributesType] = None,
        kind: SpanKind = SpanKind.CLIENT,
    ) -> Iterator[Span]:
        """
        Open a span as the current span for the duration of the block.

        Exceptions raised in the block are recorded on the span and re-raised
        unchanged. The span ends once, whichever way the block exits.
        """
        with self.tracer.start_as_current_span(
            name,
            kind=kind,
            attributes=attributes,
            record_exception=False,
            set_status_on_exception=False,
        ) as span:
            try:
                yield span
            except Exception as e:
                span.record_exception(e)
                span.set_status(Status(StatusCode.ERROR, str(e)))
                raise

    def call(
        self,
        name: str,
        attributes: Optional[TraceAttributesType],
        kind: SpanKind,
        func: Callable,
        *args,
        **kwargs,
    ):
        """Invoke ``func`` inside a span and return its result."""
        with self.span(name, attributes, kind):
            return func(*args, **kwargs)
