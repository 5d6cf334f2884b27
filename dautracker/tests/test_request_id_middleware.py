import logging
from uuid import UUID

from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from dautracker.core.logging import get_request_id
from dautracker.core.middleware.request_id import RequestIdMiddleware


def _echo_app():
    app = FastAPI()
    app.add_middleware(RequestIdMiddleware)

    @app.get("/echo")
    async def echo(request: Request):
        return {"state": request.state.request_id, "context": get_request_id()}

    return app


def test_generated_request_id_is_uuid_and_visible_to_handler():
    resp = TestClient(_echo_app()).get("/echo")

    rid = resp.headers.get("x-request-id")
    assert UUID(rid)
    assert resp.json() == {"state": rid, "context": rid}


def test_provided_request_id_is_echoed():
    resp = TestClient(_echo_app()).get("/echo", headers={"X-Request-Id": "batch-import-7"})
    assert resp.headers.get("x-request-id") == "batch-import-7"
    assert resp.json()["context"] == "batch-import-7"


def test_context_cleared_after_request():
    TestClient(_echo_app()).get("/echo", headers={"X-Request-Id": "short-lived"})
    assert get_request_id() is None


def test_completion_log_carries_route_details(client, caplog):
    with caplog.at_level(logging.INFO, logger="dautracker"):
        client.post("/api/dau/record", params={"userId": 3}, headers={"X-Request-Id": "rec-3"})

    done = [r for r in caplog.records if r.getMessage() == "request.complete"]
    assert done
    assert done[-1].request_id == "rec-3"
    assert done[-1].path == "/api/dau/record"
    assert done[-1].method == "POST"
    assert done[-1].status == 200
