"""
Cloudflare Stream service: forwards uploads and status lookups
"""

import asyncio
from typing import Any, BinaryIO, Dict, Optional, Tuple

import aiohttp
from pydantic import ValidationError

from stream_relay.config.base import settings
from stream_relay.errors import (
    RemoteParseError,
    RemoteTransportError,
    RemoteUploadFailed,
    ServiceNotConfigured,
)
from stream_relay.models.video import UploadResponse
from stream_relay.utils.logger import PerformanceLogger, get_logger

logger = get_logger(__name__)


class StreamService:
    def __init__(
        self,
        account_id: Optional[str] = None,
        api_token: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.account_id = account_id if account_id is not None else settings.CLOUDFLARE_ACCOUNT_ID
        self.api_token = api_token if api_token is not None else settings.CLOUDFLARE_API_TOKEN
        self.base_url = (base_url if base_url is not None else settings.CLOUDFLARE_BASE_URL).rstrip('/')
        self.timeout = timeout if timeout is not None else settings.REMOTE_TIMEOUT

        # Check if Cloudflare is configured
        self.enabled = bool(self.account_id and self.api_token)
        if not self.enabled:
            logger.warning("Cloudflare credentials not configured - stream relay disabled")
            return

        logger.info(f"Stream service initialized for account {self.account_id} at {self.base_url}")

    @property
    def stream_url(self) -> str:
        return f"{self.base_url}/accounts/{self.account_id}/stream"

    def video_url(self, uid: str) -> str:
        return f"{self.stream_url}/{uid}"

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.api_token}"}

    def _require_enabled(self):
        if not self.enabled:
            raise ServiceNotConfigured(
                "Stream service not configured",
                details="Set CLOUDFLARE_ACCOUNT_ID and CLOUDFLARE_API_TOKEN",
            )

    async def _request(
        self,
        method: str,
        url: str,
        failure_message: str,
        data: Any = None,
    ) -> Tuple[int, bytes]:
        """Send one request to Cloudflare and return (status, raw body)"""
        logger.info(f"Making {method} request to: {url}")
        timer = PerformanceLogger("stream")
        timer.start(f"{method} {url}")
        try:
            async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self.timeout)) as session:
                async with session.request(method, url, data=data, headers=self._headers()) as response:
                    body = await response.read()
                    timer.end(f"HTTP {response.status}")
                    logger.info(f"Cloudflare Response Status: {response.status}")
                    logger.debug(f"Cloudflare Response Body: {body.decode('utf-8', errors='replace')}")
                    return response.status, body
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"{failure_message}: {e!r}")
            raise RemoteTransportError(failure_message, details=str(e) or type(e).__name__) from e

    def _parse_envelope(self, body: bytes) -> UploadResponse:
        try:
            return UploadResponse.model_validate_json(body)
        except ValidationError as e:
            raw = body.decode('utf-8', errors='replace')
            logger.error(f"JSON parse error: {e}")
            raise RemoteParseError(
                "Could not parse response",
                details=str(e),
                response=raw,
            ) from e

    async def upload_video(
        self,
        video_stream: BinaryIO,
        filename: str,
        content_type: Optional[str] = None,
    ) -> UploadResponse:
        """
        Forward an uploaded video to Cloudflare Stream

        Args:
            video_stream: Open file object with the video content
            filename: Original filename, kept in the outgoing form
            content_type: MIME type reported by the client

        Returns:
            The decoded envelope, only when Cloudflare reports success
        """
        self._require_enabled()
        logger.info(f"Using Account ID: {self.account_id}")
        logger.info(f"Base URL: {self.base_url}")

        form = aiohttp.FormData()
        form.add_field(
            "file",
            video_stream,
            filename=filename,
            content_type=content_type or "application/octet-stream",
        )

        _, body = await self._request("POST", self.stream_url, "Failed to upload to Cloudflare", data=form)
        envelope = self._parse_envelope(body)

        if not envelope.success:
            logger.warning(f"Cloudflare rejected upload of {filename}: {envelope.errors}")
            raise RemoteUploadFailed(
                "Upload failed",
                details=envelope.errors,
                response=body.decode('utf-8', errors='replace'),
            )

        logger.info(f"Uploaded {filename} as {envelope.result.uid if envelope.result else 'unknown uid'}")
        return envelope

    async def get_video(self, uid: str) -> UploadResponse:
        """Look up the current status of a video; any parsed envelope is returned as is"""
        self._require_enabled()
        status, body = await self._request("GET", self.video_url(uid), "Failed to get video status")
        envelope = self._parse_envelope(body)
        if status >= 400:
            logger.warning(f"Cloudflare answered HTTP {status} for {uid}: {envelope.errors}")
        return envelope


stream_service = StreamService()


def get_stream_service() -> StreamService:
    """FastAPI dependency; overridden in tests"""
    return stream_service
