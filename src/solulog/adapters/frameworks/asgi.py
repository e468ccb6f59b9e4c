"""ASGI middleware propagating trace context.

The middleware is framework-agnostic: it works with any ASGI server
(uvicorn, hypercorn, daphne) and any ASGI application.
"""

import fnmatch
import time
from collections.abc import Callable, Coroutine
from typing import Any

from solulog.core.metrics import counter
from solulog.core.models import Level, MetricSample
from solulog.core.ports import MetricsStoragePort
from solulog.core.tracing import (
    EMPTY_CONTEXT,
    TraceContext,
    fork,
    merge_trace,
    traceparent_value,
    use_trace,
)
from solulog.logger import Logger

# ASGI type aliases
Scope = dict[str, Any]
Receive = Callable[[], Coroutine[Any, Any, dict[str, Any]]]
Send = Callable[[dict[str, Any]], Coroutine[Any, Any, None]]
ASGIApp = Callable[[Scope, Receive, Send], Coroutine[Any, Any, None]]

TRACEPARENT_HEADER = "traceparent"


def _extract_header(scope: Scope, header_name: str) -> str | None:
    """Return the first value of ``header_name`` (case-insensitive), if any.

    Args:
        scope: ASGI scope dictionary containing request metadata.
        header_name: Name of the header to search for.
    """
    header_bytes = header_name.lower().encode()
    headers: list[tuple[bytes, bytes]] = scope.get("headers", [])
    for name, value in headers:
        if name.lower() == header_bytes:
            return str(value.decode("latin-1"))
    return None


def _get_log_level_for_status(status_code: int) -> Level:
    """Determine log level based on HTTP status code.

    Maps status codes to log levels:
    - 400-499 (4xx) → WARN
    - 500-599 (5xx) → ERROR
    - Other → INFO (default)
    """
    if 400 <= status_code < 500:
        return Level.WARN
    if 500 <= status_code < 600:
        return Level.ERROR
    return Level.INFO


class TraceMiddleware:
    """ASGI middleware that runs each request inside its own span.

    The incoming ``traceparent`` header (if any) supplies the trace id; every
    request gets a fresh span id. While the wrapped app runs, the request's
    ``TraceContext`` is the ambient trace, so loggers pick it up without
    being passed anything. The response carries the request's own
    ``traceparent`` header.
    """

    def __init__(
        self,
        app: ASGIApp,
        logger: Logger | None = None,
        metrics_storage: MetricsStoragePort | None = None,
        exclude_paths: list[str] | None = None,
        header_name: str = TRACEPARENT_HEADER,
    ) -> None:
        """Initialize the middleware.

        Args:
            app: The ASGI application to wrap.
            logger: Logger for one record per request (optional).
            metrics_storage: Storage adapter for request metrics (optional).
            exclude_paths: Paths excluded from request logs and metrics.
                          Supports exact matches and wildcard patterns
                          (e.g., "/internal/*"). Tracing still applies.
            header_name: Name of the carrier header (default: "traceparent").
        """
        self.app = app
        self.logger = logger.named("http") if logger is not None else None
        self.metrics_storage = metrics_storage
        self.exclude_paths = exclude_paths or []
        self.header_name = header_name
        self.request_counter_name = "http_requests_total"
        self.request_histogram_name = "http_request_duration_seconds"

    def _path_excluded(self, path: str) -> bool:
        """Check if path matches any pattern in exclude_paths."""
        return any(fnmatch.fnmatch(path, pattern) for pattern in self.exclude_paths)

    def request_context(self, scope: Scope) -> tuple[TraceContext, TraceContext]:
        """Return ``(incoming, request)`` trace contexts for ``scope``."""
        incoming = merge_trace(EMPTY_CONTEXT, _extract_header(scope, self.header_name))
        return incoming, fork(incoming)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI callable interface that processes requests through the wrapped app."""
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start_time = time.perf_counter()
        incoming, ctx = self.request_context(scope)
        carrier = traceparent_value(ctx).encode()
        captured: dict[str, Any] = {"status": None, "body_size": 0, "exception": None}

        async def wrapped_send(message: dict[str, Any]) -> None:
            if message["type"] == "http.response.start":
                captured["status"] = message["status"]
                headers = [
                    (name, value)
                    for name, value in message.get("headers", [])
                    if name.lower() != self.header_name.lower().encode()
                ]
                headers.append((self.header_name.lower().encode(), carrier))
                message = {**message, "headers": headers}
            elif message["type"] == "http.response.body":
                captured["body_size"] += len(message.get("body", b""))
            await send(message)

        with use_trace(ctx):
            try:
                await self.app(scope, receive, wrapped_send)
            except Exception as e:
                captured["exception"] = e
                captured["status"] = 500

        duration = time.perf_counter() - start_time
        self._record_observability(scope, incoming, ctx, captured, duration)
        if captured["exception"] is not None:
            raise captured["exception"]

    def _record_observability(
        self,
        scope: Scope,
        incoming: TraceContext,
        ctx: TraceContext,
        captured: dict[str, Any],
        duration: float,
    ) -> None:
        """Record the request log and metrics."""
        if self._path_excluded(scope["path"]):
            return
        status = captured["status"] or 0
        if self.logger is not None:
            request_data: dict[str, Any] = {
                "method": scope["method"],
                "path": scope["path"],
                "status_code": status,
                "response_body_size": captured["body_size"],
                "duration_ms": duration * 1000,
            }
            if incoming.span_id:
                request_data["parent_span_id"] = incoming.span_id
            if captured["exception"] is not None:
                exc = captured["exception"]
                request_data["exception"] = f"{type(exc).__name__}: {exc!s}"
            self.logger.in_context(ctx).log(
                _get_log_level_for_status(status),
                f"{scope['method']} {scope['path']}",
                **request_data,
            )
        if self.metrics_storage is not None and captured["status"] is not None:
            for sample in self._request_metrics(scope, status, duration):
                self.metrics_storage.write(sample)

    def _request_metrics(
        self, scope: Scope, status_code: int, duration: float
    ) -> list[MetricSample]:
        return [
            counter(
                self.request_counter_name,
                labels={
                    "method": scope["method"],
                    "path": scope["path"],
                    "status": str(status_code),
                },
            ),
            MetricSample(
                name=self.request_histogram_name,
                timestamp=time.time(),
                value=duration,
                labels={"method": scope["method"], "path": scope["path"]},
            ),
        ]
