from shimtrace.logging_helpers.formatters import JsonTraceContextFormatter, TraceContextFormatter
from shimtrace.logging_helpers.integrations import bridge_loguru_to_std_logging, setup_logging

__all__ = ['JsonTraceContextFormatter', 'TraceContextFormatter', 'bridge_loguru_to_std_logging', 'setup_logging']
