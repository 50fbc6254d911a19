"""OpenTelemetry helpers for instrumentation."""

from typing import Optional

from opentelemetry import trace

from bqcore.__version__ import __version__

__all__ = [
    "TRACER_NAME",
    "get_tracer",
]

TRACER_NAME = "bqcore"


def get_tracer(name: str = TRACER_NAME, version: Optional[str] = None):
    """Return a tracer from the active OpenTelemetry provider.

    No provider is installed by this package; without one the API hands back
    a no-op tracer.
    """
    return trace.get_tracer(name, version or __version__)
