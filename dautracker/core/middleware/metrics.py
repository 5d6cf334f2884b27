from starlette.middleware.base import BaseHTTPMiddleware

from dautracker.core.metrics import http_requests_total


class MetricsMiddleware(BaseHTTPMiddleware):
    """Record HTTP request metrics (Prometheus-style)."""

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        _record_request_metric(request, response)
        return response


def _record_request_metric(request, response) -> None:
    # Route template rather than raw path keeps label cardinality bounded.
    route = request.scope.get("route")
    path = getattr(route, "path", None) or "unmatched"
    status = getattr(response, "status_code", None) or 0
    http_requests_total.inc(labels={
        "method": request.method.upper(),
        "path": path,
        "status": str(status),
    })
