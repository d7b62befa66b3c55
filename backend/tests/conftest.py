"""
Pytest configuration and fixtures for testing
"""

import pytest
from fastapi.testclient import TestClient

from stream_relay.errors import RemoteTransportError
from stream_relay.main import app
from stream_relay.services.stream_service import StreamService, get_stream_service


class FakeStreamService(StreamService):
    """StreamService whose outbound call is answered from a canned response"""

    def __init__(self, status: int = 200, body: bytes = b"{}", error: Exception = None):
        super().__init__(account_id="acc-123", api_token="token-abc", base_url="https://cf.test/client/v4")
        self.status = status
        self.body = body
        self.error = error
        self.calls = []

    async def _request(self, method, url, failure_message, data=None):
        self.calls.append({"method": method, "url": url, "data": data})
        if self.error is not None:
            raise RemoteTransportError(failure_message, details=str(self.error))
        return self.status, self.body


@pytest.fixture
def fake_stream():
    service = FakeStreamService()
    app.dependency_overrides[get_stream_service] = lambda: service
    yield service
    app.dependency_overrides.pop(get_stream_service, None)


@pytest.fixture
def client(fake_stream):
    """Create a test client for FastAPI app"""
    return TestClient(app)


@pytest.fixture
def queued_envelope():
    """Cloudflare envelope right after upload, including fields the relay does not model"""
    return {
        "result": {
            "uid": "ea95132c15732412d22c1476fa83f27a",
            "creator": None,
            "thumbnail": "https://customer-test.cloudflarestream.com/ea95/thumbnails/thumbnail.jpg",
            "thumbnailTimestampPct": 0,
            "readyToStream": False,
            "status": {
                "state": "queued",
                "pctComplete": "",
                "errorReasonCode": "",
                "errorReasonText": ""
            },
            "meta": {"name": "climb.mp4", "filetype": "video/mp4"},
            "created": "2024-01-01T00:00:00.000000Z",
            "size": 4190963,
            "preview": "https://customer-test.cloudflarestream.com/ea95/watch",
            "playback": {
                "hls": "https://customer-test.cloudflarestream.com/ea95/manifest/video.m3u8",
                "dash": "https://customer-test.cloudflarestream.com/ea95/manifest/video.mpd"
            },
            "duration": -1
        },
        "success": True,
        "errors": [],
        "messages": []
    }


@pytest.fixture
def failed_envelope():
    return {
        "result": None,
        "success": False,
        "errors": [{"code": 10005, "message": "Authentication error"}],
        "messages": []
    }
