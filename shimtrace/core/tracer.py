"""
Author:
Created on: 2025-05-10
Tracer setup for shimtrace.

This module builds OpenTelemetry tracer providers and hands out tracers.
Instrumentations receive their tracer explicitly instead of reading a
process-wide instance.
"""

import logging
from typing import Dict, List, Optional

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

logger = logging.getLogger(__name__)

SUPPORTED_EXPORTERS = ("console", "otlp")


def create_tracer_provider(
    service_name: str,
    version: str = "1.0.0",
    environment: str = "dev",
    exporters: Optional[List[str]] = None,
    exporter_endpoints: Optional[Dict[str, str]] = None,
    additional_attributes: Optional[Dict[str, str]] = None,
    set_global: bool = False,
) -> TracerProvider:
    """
    Build a tracer provider with the requested exporters attached.

    Args:
        service_name (str): Name of the service (required).
        version (str): Service version.
        environment (str): Deployment environment.
        exporters (list): Exporter names. Default is ["console"].
        exporter_endpoints (dict): Endpoints for the exporters, keyed by name.
        additional_attributes (dict): Additional resource attributes.
        set_global (bool): Also register the provider as the global one.

    Returns:
        TracerProvider: The configured provider.
    """
    resource_attrs = {
        "service.name": service_name,
        "service.version": version,
        "deployment.environment": environment,
    }
    if additional_attributes:
        resource_attrs.update(additional_attributes)

    provider = TracerProvider(resource=Resource.create(resource_attrs))

    if exporters is None:
        exporters = ["console"]
    if exporter_endpoints is None:
        exporter_endpoints = {}

    for exporter_name in exporters:
        name = exporter_name.lower()
        if name == "console":
            provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
            logger.info("Added console span exporter")
        elif name == "otlp":
            endpoint = exporter_endpoints.get("otlp") or "http://localhost:4317"
            provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint)))
            logger.info(f"Added OTLP span exporter with endpoint {endpoint}")
        else:
            logger.warning(f"Unknown exporter: {exporter_name}")

    if set_global:
        trace.set_tracer_provider(provider)

    logger.info(f"Tracer provider created for service: {service_name}")
    return provider


def get_tracer(name: str, version: Optional[str] = None, tracer_provider=None):
    """
    Get a tracer from the given provider, or from the global one.

    Args:
        name (str): Instrumentation scope name.
        version (str): Instrumentation scope version.
        tracer_provider: Provider to use. Defaults to the global provider.

    Returns:
        Tracer: An OpenTelemetry tracer.
    """
    return trace.get_tracer(name, version, tracer_provider=tracer_provider)
