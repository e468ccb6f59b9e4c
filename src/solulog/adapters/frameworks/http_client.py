"""httpx integration: carry trace context across outgoing requests.

``inject_traceparent`` is a request event hook that adds the ambient trace
context to requests lacking a ``traceparent`` header. ``inherit_trace`` and
``fulfill_trace`` read the header back from responses.
"""

from typing import Any

import httpx

from solulog.core.tracing import (
    EMPTY_CONTEXT,
    TraceContext,
    current_trace,
    merge_trace,
    traceparent_value,
)

TRACEPARENT_HEADER = "traceparent"


def inject_traceparent(request: httpx.Request) -> None:
    """Request hook: set ``traceparent`` from the ambient trace context.

    Requests that already carry the header, and calls made with no ambient
    trace, are left untouched.
    """
    if TRACEPARENT_HEADER in request.headers:
        return
    ctx = current_trace()
    if not ctx.has_trace:
        return
    request.headers[TRACEPARENT_HEADER] = traceparent_value(ctx)


async def ainject_traceparent(request: httpx.Request) -> None:
    """Async variant of ``inject_traceparent`` for ``httpx.AsyncClient``."""
    inject_traceparent(request)


def fulfill_trace(ctx: TraceContext | None, response: httpx.Response | None) -> TraceContext:
    """Fill ids missing from ``ctx`` with the response's ``traceparent``."""
    if response is None:
        return ctx or EMPTY_CONTEXT
    return merge_trace(ctx, response.headers.get(TRACEPARENT_HEADER))


def inherit_trace(response: httpx.Response | None) -> TraceContext:
    """Build a trace context from the response's ``traceparent`` alone."""
    return fulfill_trace(EMPTY_CONTEXT, response)


def traced_client(**kwargs: Any) -> httpx.Client:
    """Create an ``httpx.Client`` with ``inject_traceparent`` installed."""
    hooks = dict(kwargs.pop("event_hooks", None) or {})
    hooks["request"] = [inject_traceparent, *hooks.get("request", [])]
    return httpx.Client(event_hooks=hooks, **kwargs)


def traced_async_client(**kwargs: Any) -> httpx.AsyncClient:
    """Create an ``httpx.AsyncClient`` with ``ainject_traceparent`` installed."""
    hooks = dict(kwargs.pop("event_hooks", None) or {})
    hooks["request"] = [ainject_traceparent, *hooks.get("request", [])]
    return httpx.AsyncClient(event_hooks=hooks, **kwargs)
