from fastapi.testclient import TestClient


REQUIRED_ROUTES = {
    "/api/submissions",
    "/api/submissions/{reference}",
    "/api/admin/submissions/{submission_id}",
    "/api/admin/submissions/{submission_id}/status",
    "/api/login",
    "/api/admin/login",
    "/api/admin/logout",
    "/api/admin/me",
    "/internal/metrics",
    "/health",
}


def test_api_startup_and_router_registration(monkeypatch):
    from portal import main

    monkeypatch.setattr(main, "_startup_tasks", lambda: None)

    with TestClient(main.app) as client:
        response = client.get("/")
        health_response = client.get("/health")
        openapi_response = client.get("/openapi.json")
        metrics_response = client.get("/internal/metrics")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert response.headers.get("X-Request-ID")
    assert health_response.json() == {"status": "healthy"}
    assert openapi_response.status_code == 200
    assert metrics_response.status_code == 401

    paths = {getattr(route, "path", None) for route in main.app.routes}
    assert REQUIRED_ROUTES.issubset(paths)
