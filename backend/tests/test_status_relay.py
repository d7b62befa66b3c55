"""
Tests for GET /api/video/{uid} and the service endpoints
"""

import json


def test_status_is_relayed_unchanged(client, fake_stream, queued_envelope):
    queued_envelope["result"]["status"]["state"] = "processing"
    fake_stream.body = json.dumps(queued_envelope).encode()

    response = client.get("/api/video/ea95132c15732412d22c1476fa83f27a")

    assert response.status_code == 200
    assert response.json() == queued_envelope
    assert fake_stream.calls[0]["method"] == "GET"
    assert fake_stream.calls[0]["url"] == (
        "https://cf.test/client/v4/accounts/acc-123/stream/ea95132c15732412d22c1476fa83f27a"
    )


def test_remote_error_envelope_is_relayed_with_200(client, fake_stream):
    not_found = {"result": None, "success": False, "errors": [{"code": 10003, "message": "Not Found"}], "messages": []}
    fake_stream.status = 404
    fake_stream.body = json.dumps(not_found).encode()

    response = client.get("/api/video/does-not-exist")

    assert response.status_code == 200
    assert response.json() == not_found


def test_status_parse_error_returns_500(client, fake_stream):
    fake_stream.body = b"not json"

    response = client.get("/api/video/abc")

    assert response.status_code == 500
    assert response.json()["error"] == "Could not parse response"
    assert response.json()["response"] == "not json"


def test_status_transport_error_returns_500(client, fake_stream):
    fake_stream.error = TimeoutError("timed out")

    response = client.get("/api/video/abc")

    assert response.status_code == 500
    assert response.json()["error"] == "Failed to get video status"


def test_health_reports_stream_configuration(client, fake_stream):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["services"]["cloudflare_stream"] == "configured"

    fake_stream.enabled = False
    assert client.get("/health").json()["services"]["cloudflare_stream"] == "not configured"


def test_cors_preflight_allows_configured_origin(client):
    response = client.options(
        "/api/upload",
        headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type",
        },
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "http://localhost:5173"
    assert "POST" in response.headers["access-control-allow-methods"]
