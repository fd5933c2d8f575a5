"""
Author:
Created on: 2025-05-09

Logging setup with OpenTelemetry trace context.

Log records are stamped with the current trace and span IDs so that the debug
output of the instrumentations can be correlated with the spans they emit.
"""

import logging
import sys

from opentelemetry.trace import get_current_span

from shimtrace.logging_helpers.formatters import JsonTraceContextFormatter, TraceContextFormatter

# Store original log record factory
_original_factory = logging.getLogRecordFactory()


class InterceptHandler(logging.Handler):
    """
    Handler that forwards records into standard logging.

    Added as a loguru sink it routes loguru output through the stdlib
    handlers configured here.
    """
    def emit(self, record):
        if not getattr(record, '_intercepted', False):
            record._intercepted = True
            logging.getLogger(record.name).handle(record)


def inject_trace_context():
    """
    Install a log record factory that adds ``trace_id`` and ``span_id``.
    """
    def trace_context_factory(*args, **kwargs):
        record = _original_factory(*args, **kwargs)
        ctx = get_current_span().get_span_context()
        record.trace_id = format(ctx.trace_id, "032x") if ctx.is_valid else "N/A"
        record.span_id = format(ctx.span_id, "016x") if ctx.is_valid else "N/A"
        return record

    logging.setLogRecordFactory(trace_context_factory)


def restore_record_factory():
    """Undo ``inject_trace_context``."""
    logging.setLogRecordFactory(_original_factory)


def bridge_loguru_to_std_logging(level="DEBUG"):
    """
    Forward loguru records to standard logging, keeping existing loguru sinks.

    Returns:
        int: The loguru handler id, usable with ``logger.remove``
    """
    from loguru import logger as loguru_logger

    return loguru_logger.add(InterceptHandler(), level=level)


def setup_logging(level="INFO", format_string=None, json_format=False,
                  add_trace_context=True, root_logger_name="", enable_loguru=False):
    """
    Set up logging with OpenTelemetry trace context integration.

    Existing handlers are preserved; a console handler is only added when the
    logger has none writing to stdout or stderr.

    Args:
        level: Logging level name
        format_string: Format for text output
        json_format: Emit JSON lines instead of text
        add_trace_context: Stamp records with trace and span IDs
        root_logger_name: Logger to configure, the root logger by default
        enable_loguru: Also forward loguru records to standard logging

    Returns:
        logging.Logger: The configured logger
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger(root_logger_name)
    root_logger.setLevel(numeric_level)

    has_console_handler = any(
        isinstance(h, logging.StreamHandler) and
        getattr(h, 'stream', None) in (sys.stdout, sys.stderr)
        for h in root_logger.handlers
    )

    if not has_console_handler:
        if json_format:
            formatter = JsonTraceContextFormatter()
        else:
            formatter = TraceContextFormatter(fmt=format_string)

        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        console_handler.setLevel(numeric_level)
        root_logger.addHandler(console_handler)

    if add_trace_context:
        inject_trace_context()

    if enable_loguru:
        bridge_loguru_to_std_logging()

    return root_logger
