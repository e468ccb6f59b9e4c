"""Example ASGI application with trace propagation.

Run with:
    uvicorn examples.asgi_example:app --reload

Try:
    curl -i localhost:8000/orders
    curl -i -H "traceparent: 00-4bf92f3577b34da6a3ce929d0e0e4736-00f067aa0ba902b7-00" \
        localhost:8000/orders

Every response carries a ``traceparent`` header naming the request's own
span. Records logged while the request runs, including those from the
downstream httpx call, carry the same trace id.
"""

import httpx

import solulog
from solulog.adapters.frameworks import TraceMiddleware
from solulog.adapters.frameworks.http_client import ainject_traceparent

metrics_storage = solulog.RingBufferMetricsStorage(max_size=10_000)

logger = solulog.build_logger(
    solulog.LoggerConfig(level="debug", console=True),
    metrics=metrics_storage,
)
log = logger.named("orders")


def _downstream(request: httpx.Request) -> httpx.Response:
    """Stand-in for another service: echoes the carrier it received."""
    return httpx.Response(
        200,
        json={"items": 3},
        headers={"traceparent": request.headers.get("traceparent", "")},
    )


async def orders(scope, receive, send) -> None:
    log.info("listing orders", path=scope["path"])
    async with httpx.AsyncClient(
        transport=httpx.MockTransport(_downstream),
        event_hooks={"request": [ainject_traceparent]},
    ) as client:
        response = await client.get("http://inventory.local/items")
    log.debug("inventory answered", status=response.status_code)

    await send(
        {
            "type": "http.response.start",
            "status": 200,
            "headers": [(b"content-type", b"application/json")],
        }
    )
    await send({"type": "http.response.body", "body": response.content})


app = TraceMiddleware(orders, logger=logger, metrics_storage=metrics_storage)
