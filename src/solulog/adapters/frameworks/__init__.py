"""Framework integrations.

``http_client`` needs the optional ``httpx`` dependency and is not imported here.
"""

from solulog.adapters.frameworks.asgi import TraceMiddleware

__all__ = ["TraceMiddleware"]
