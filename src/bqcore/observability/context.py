"""Shared observability context utilities."""

from __future__ import annotations

import uuid
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Mapping, Optional

from opentelemetry.trace import Status, StatusCode
from pydantic import Field

from bqcore.logging import get_logger
from bqcore.logging.filters import clear_request_context, set_request_context
from bqcore.telemetry import get_tracer
from bqcore.types.base import DriverBaseModel


class ExecutionRequestContext(DriverBaseModel):
    """Observability context propagated across one driver command.

    ``run_id`` is the host's identifier for the command run; it is carried
    into every log record and span emitted while the command executes.
    """

    request_id: str
    run_id: Optional[str] = None
    attributes: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def generate(cls, **kwargs: Any) -> "ExecutionRequestContext":
        """Generate a new context with a unique request id."""
        return cls(request_id=str(uuid.uuid4()), **kwargs)

    def to_telemetry_dict(self) -> Dict[str, str]:
        payload: Dict[str, str] = {"request_id": self.request_id}
        if self.run_id:
            payload["run_id"] = self.run_id
        for key, value in (self.attributes or {}).items():
            if value is not None:
                payload[f"ctx.{key}"] = str(value)
        return payload


@contextmanager
def execution_request_scope(
    ctx: ExecutionRequestContext,
    *,
    operation: Optional[str] = None,
) -> Iterator[ExecutionRequestContext]:
    """Apply logging + tracing scope for a request/operation."""
    telemetry = ctx.to_telemetry_dict()
    set_request_context(request_id=ctx.request_id, run_id=ctx.run_id)

    tracer = get_tracer()
    span_name = operation or "bqcore.request"
    span_attributes = {f"bqcore.{key}": value for key, value in telemetry.items()}
    if operation:
        span_attributes["bqcore.operation.name"] = operation

    with tracer.start_as_current_span(span_name) as span:
        for key, value in span_attributes.items():
            span.set_attribute(key, value)

        try:
            yield ctx
        except Exception as exc:
            span.record_exception(exc)
            span.set_status(Status(StatusCode.ERROR))
            get_logger(__name__).error(
                "Execution failed",
                extra={**telemetry, "operation.name": span_name},
                exc_info=True,
            )
            raise
        finally:
            clear_request_context()


def resolve_request_context(ctx: Optional[Any]) -> ExecutionRequestContext:
    """Normalize inbound context data into an ExecutionRequestContext.

    Accepts an existing context, None (a fresh context is generated), a run
    id string, or a mapping with ``request_id``/``run_id``/``attributes``.
    """
    if isinstance(ctx, ExecutionRequestContext):
        return ctx

    if ctx is None:
        return ExecutionRequestContext.generate()

    if isinstance(ctx, str):
        return ExecutionRequestContext.generate(run_id=ctx)

    if not isinstance(ctx, Mapping):
        raise TypeError(f"Unsupported request context: {type(ctx).__name__}")

    attributes = ctx.get("attributes") or {}
    if not isinstance(attributes, dict):
        attributes = {"value": str(attributes)}

    run_id = ctx.get("run_id")
    return ExecutionRequestContext(
        request_id=str(ctx.get("request_id") or uuid.uuid4()),
        run_id=str(run_id) if run_id else None,
        attributes=attributes,
    )
