"""
Author:
Created on: 2025-05-09
Log formatters with trace context integration.

This module provides formatters that include OpenTelemetry trace context
information in log messages, in both text and JSON formats.
"""

import json
import logging

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s [trace_id=%(trace_id)s span_id=%(span_id)s]"


class TraceContextFormatter(logging.Formatter):
    """
    A log formatter that includes trace and span IDs in log messages.

    Records without trace context are rendered with ``N/A`` in its place.
    """
    def __init__(self, fmt=None, datefmt=None, style='%'):
        super().__init__(fmt=fmt or DEFAULT_FORMAT, datefmt=datefmt, style=style)

    def format(self, record):
        if not hasattr(record, "trace_id"):
            record.trace_id = "N/A"
        if not hasattr(record, "span_id"):
            record.span_id = "N/A"
        return super().format(record)


class JsonTraceContextFormatter(logging.Formatter):
    """
    A log formatter that outputs JSON-formatted logs with trace context.

    This formatter is useful for structured logging systems and log aggregators
    that can parse JSON.
    """
    def format(self, record):
        log_data = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "trace_id": getattr(record, "trace_id", "N/A"),
            "span_id": getattr(record, "span_id", "N/A")
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)
