import json
import logging

from fastapi import FastAPI
from fastapi.testclient import TestClient

from portal.core.logging_setup import JsonFormatter
from portal.core.metrics import InMemoryRequestMetrics, request_metrics
from portal.core.request_context import clear_request_context, set_request_context
from portal.middleware.observability import ObservabilityMiddleware


def _record(message="submission created", **extra):
    record = logging.LogRecord("portal.test", logging.INFO, __file__, 1, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_request_context_and_submission_fields():
    set_request_context(request_id="req-1", admin_id="adm-1")
    try:
        payload = json.loads(
            JsonFormatter().format(_record(tracking_code="WS-1-AAAAAA", submission_id="sub-1", duration_ms=4.2))
        )
    finally:
        clear_request_context()

    assert payload["level"] == "INFO"
    assert payload["request_id"] == "req-1"
    assert payload["admin_id"] == "adm-1"
    assert payload["tracking_code"] == "WS-1-AAAAAA"
    assert payload["submission_id"] == "sub-1"
    assert payload["duration_ms"] == 4.2


def test_json_formatter_masks_secrets():
    payload = json.loads(JsonFormatter().format(_record("token=abc123 sent")))

    assert "abc123" not in payload["message"]


def test_metrics_aggregate_by_endpoint():
    metrics = InMemoryRequestMetrics()

    metrics.observe("/api/submissions", "POST", 201, 10.0)
    metrics.observe("/api/submissions", "POST", 400, 30.0)

    snapshot = metrics.snapshot()["POST /api/submissions"]
    assert snapshot["total_requests"] == 2
    assert snapshot["avg_duration_ms"] == 20.0
    assert snapshot["max_duration_ms"] == 30.0
    assert snapshot["error_count"] == 1
    assert snapshot["status_classes"] == {"2xx": 1, "4xx": 1}


def test_middleware_sets_request_id_and_records_route_template():
    request_metrics.reset()
    app = FastAPI()
    app.add_middleware(ObservabilityMiddleware)

    @app.get("/api/submissions/{reference}")
    def _lookup(reference: str):
        return {"reference": reference}

    client = TestClient(app)
    response = client.get("/api/submissions/WS-1-AAAAAA", headers={"X-Request-ID": "req-42"})

    assert response.headers["X-Request-ID"] == "req-42"
    assert "GET /api/submissions/{reference}" in request_metrics.snapshot()
    request_metrics.reset()
