"""
Tests for POST /api/upload
"""

import json


def _upload(client, name="climb.mp4", content=b"\x00\x00\x00\x18ftypmp42"):
    return client.post("/api/upload", files={"video": (name, content, "video/mp4")})


def test_upload_without_file_returns_400(client, fake_stream):
    response = client.post("/api/upload")

    assert response.status_code == 400
    assert response.json()["error"] == "No video file provided"
    assert fake_stream.calls == []


def test_upload_with_wrong_field_name_returns_400(client, fake_stream):
    response = client.post("/api/upload", files={"file": ("climb.mp4", b"data", "video/mp4")})

    assert response.status_code == 400
    assert "error" in response.json()
    assert fake_stream.calls == []


def test_successful_upload_is_relayed_unchanged(client, fake_stream, queued_envelope):
    fake_stream.body = json.dumps(queued_envelope).encode()

    response = _upload(client)

    assert response.status_code == 200
    assert response.json() == queued_envelope


def test_upload_posts_to_account_stream_endpoint(client, fake_stream, queued_envelope):
    fake_stream.body = json.dumps(queued_envelope).encode()

    _upload(client)

    assert len(fake_stream.calls) == 1
    call = fake_stream.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == "https://cf.test/client/v4/accounts/acc-123/stream"


def test_remote_failure_returns_400_with_errors(client, fake_stream, failed_envelope):
    raw = json.dumps(failed_envelope)
    fake_stream.body = raw.encode()

    response = _upload(client)

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Upload failed"
    assert body["details"] == failed_envelope["errors"]
    assert body["response"] == raw


def test_unparsable_remote_response_returns_500_with_raw_body(client, fake_stream):
    fake_stream.status = 502
    fake_stream.body = b"<html>Bad gateway</html>"

    response = _upload(client)

    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "Could not parse response"
    assert body["response"] == "<html>Bad gateway</html>"


def test_envelope_with_wrong_shape_returns_500(client, fake_stream):
    fake_stream.body = json.dumps({"result": {"uid": "abc"}}).encode()

    response = _upload(client)

    assert response.status_code == 500
    assert "success" in response.json()["details"]


def test_transport_error_returns_500(client, fake_stream):
    fake_stream.error = ConnectionRefusedError("connection refused")

    response = _upload(client)

    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "Failed to upload to Cloudflare"
    assert "connection refused" in body["details"]


def test_unconfigured_service_returns_503(client, fake_stream):
    fake_stream.enabled = False

    response = _upload(client)

    assert response.status_code == 503
    assert response.json()["error"] == "Stream service not configured"
    assert fake_stream.calls == []


def test_upload_with_text_field_instead_of_file_returns_400(client, fake_stream):
    response = client.post("/api/upload", data={"video": "not-a-file"})

    assert response.status_code == 400
    assert response.json()["error"] == "No video file provided"
    assert fake_stream.calls == []


def test_remote_failure_with_null_errors_returns_400(client, fake_stream):
    raw = json.dumps({"result": None, "success": False, "errors": None, "messages": None})
    fake_stream.body = raw.encode()

    response = _upload(client)

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Upload failed"
    assert body["response"] == raw
