"""
Video data models

Narrow transfer types for the Cloudflare Stream envelope. Field names are
snake_case in Python and camelCase on the wire. Fields the remote sends that
are not declared here are kept, so the relay never drops data.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

FAILED_STATE = "failed"


class StreamModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


class VideoStatus(StreamModel):
    state: Optional[str] = None
    error_reason_code: Optional[str] = None
    error_reason_text: Optional[str] = None


class Playback(StreamModel):
    hls: Optional[str] = None
    dash: Optional[str] = None


class VideoMeta(StreamModel):
    name: Optional[str] = None


class UploadResult(StreamModel):
    uid: str
    preview: Optional[str] = None
    status: VideoStatus = Field(default_factory=VideoStatus)
    ready_to_stream: bool = False
    thumbnail: Optional[str] = None
    playback: Playback = Field(default_factory=Playback)
    meta: VideoMeta = Field(default_factory=VideoMeta)

    @property
    def has_failed(self) -> bool:
        return self.status.state == FAILED_STATE or bool(self.status.error_reason_code)

    @property
    def is_terminal(self) -> bool:
        """True once no further state change is expected."""
        return self.ready_to_stream or self.has_failed


class UploadResponse(StreamModel):
    """Envelope shared by the upload and status endpoints"""

    result: Optional[UploadResult] = None
    success: bool
    errors: Optional[Any] = None
    messages: Optional[List[Any]] = None

    def to_wire(self) -> Dict[str, Any]:
        """Envelope as the remote sent it: wire names, no defaults filled in."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class ErrorResponse(BaseModel):
    error: str
    details: Optional[Any] = None
    response: Optional[str] = None
