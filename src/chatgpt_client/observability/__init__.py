"""
observability/__init__.py

PURPOSE: Tracing for outbound API calls.
DEPENDENCIES: opentelemetry-api, opentelemetry-sdk (optional)
"""

from chatgpt_client.observability.telemetry import get_tracer, init_telemetry, shutdown_telemetry

__all__ = ["get_tracer", "init_telemetry", "shutdown_telemetry"]
