"""
Core tracing building blocks for shimtrace.
"""

from shimtrace.core.base import Instrumentation, Option
from shimtrace.core.instrumentation import CallInstrumentor
from shimtrace.core.tracer import create_tracer_provider, get_tracer

__all__ = ['CallInstrumentor', 'Instrumentation', 'Option', 'create_tracer_provider', 'get_tracer']
