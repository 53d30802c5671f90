"""Context propagation so log records carry the active trace ids."""

from __future__ import annotations

from contextvars import ContextVar, Token


trace_context: ContextVar[dict | None] = ContextVar("trace_context", default=None)


def get_trace_context() -> dict:
    """Get a copy of the current trace context; empty outside any operation."""
    return dict(trace_context.get() or {})


def set_trace_context(trace_id: str, span_id: str, **extra: object) -> Token:
    return trace_context.set({"trace_id": trace_id, "span_id": span_id, **extra})


def update_trace_context(**values: object) -> Token:
    """Merge ``values`` into the current context and return the reset token."""
    return trace_context.set({**get_trace_context(), **values})


def reset_trace_context(token: Token) -> None:
    trace_context.reset(token)
