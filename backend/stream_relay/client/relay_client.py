"""
HTTP client for the relay endpoints
"""

import asyncio
import json
import os
from typing import Optional

import aiohttp
from pydantic import ValidationError

from stream_relay.config.base import settings
from stream_relay.models.video import UploadResponse
from stream_relay.utils.logger import get_logger

logger = get_logger(__name__)


class RelayClientError(Exception):
    """Any failure talking to the relay, as a message fit for display"""


class RelayClient:
    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None):
        self.base_url = (base_url or settings.RELAY_URL).rstrip('/')
        self.timeout = aiohttp.ClientTimeout(total=timeout or settings.REMOTE_TIMEOUT)

    async def _send(self, method: str, path: str, data=None) -> UploadResponse:
        url = f"{self.base_url}{path}"
        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.request(method, url, data=data) as response:
                    body = await response.read()
                    status = response.status
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise RelayClientError(f"Could not reach relay at {self.base_url}: {e or type(e).__name__}") from e

        if status >= 400:
            raise RelayClientError(self._error_text(status, body))

        try:
            return UploadResponse.model_validate_json(body)
        except ValidationError as e:
            raise RelayClientError(f"Unexpected response from relay: {body[:200]!r}") from e

    @staticmethod
    def _error_text(status: int, body: bytes) -> str:
        try:
            payload = json.loads(body)
        except ValueError:
            return f"Relay returned HTTP {status}"

        if isinstance(payload, dict) and "error" in payload:
            details = payload.get("details")
            if details:
                return f"{payload['error']}: {details if isinstance(details, str) else json.dumps(details)}"
            return str(payload["error"])
        if isinstance(payload, dict) and payload.get("errors"):
            return f"Relay returned HTTP {status}: {json.dumps(payload['errors'])}"
        return f"Relay returned HTTP {status}"

    async def upload(self, path: str) -> UploadResponse:
        """Upload a local video file through the relay"""
        logger.info(f"Uploading {path} to {self.base_url}")
        try:
            video_file = open(path, "rb")
        except OSError as e:
            raise RelayClientError(f"Could not open {path}: {e.strerror or e}") from e

        with video_file:
            form = aiohttp.FormData()
            form.add_field("video", video_file, filename=os.path.basename(path))
            envelope = await self._send("POST", "/api/upload", data=form)

        if not envelope.success or envelope.result is None:
            raise RelayClientError(f"Upload failed: {json.dumps(envelope.errors)}")
        return envelope

    async def get_status(self, uid: str) -> UploadResponse:
        envelope = await self._send("GET", f"/api/video/{uid}")
        if not envelope.success or envelope.result is None:
            raise RelayClientError("Failed to get video status")
        return envelope
