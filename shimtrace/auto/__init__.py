"""
shimtrace Auto Instrumentation Package

This package provides the instrumentation registry and automatic
installation of the shims whose client libraries are present.
"""

from shimtrace.auto.instrumentor import (
    InstrumentationError,
    InstrumentationRegistry,
    auto_instrument,
    auto_instrument_libraries,
)

__all__ = ['InstrumentationError', 'InstrumentationRegistry', 'auto_instrument', 'auto_instrument_libraries']
