from datetime import date

from dautracker.core.metrics import METRICS, http_requests_total, store_operations_total


def test_metrics_endpoint_exports_prometheus_text(client):
    client.post("/api/dau/record", params={"userId": 1})

    resp = client.get("/metrics")

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/plain")
    text = resp.text
    assert "# TYPE http_requests_total counter" in text
    assert 'dau_store_operations_total{operation="setbit",outcome="ok"} 1.0' in text


def test_http_requests_labelled_by_route(client):
    client.get("/api/dau/count")
    client.get("/api/dau/count")
    assert http_requests_total.value({"method": "GET", "path": "/api/dau/count", "status": "200"}) == 2


def test_store_errors_counted(tracker, fake_redis):
    fake_redis.failing = True
    tracker.dau_count(date(2026, 2, 7))
    assert store_operations_total.value({"operation": "bitcount", "outcome": "error"}) == 1


def test_reset_clears_values():
    store_operations_total.inc(labels={"operation": "ping", "outcome": "ok"})
    METRICS.reset()
    assert store_operations_total.value({"operation": "ping", "outcome": "ok"}) == 0
