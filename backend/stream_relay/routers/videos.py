"""
Video relay endpoints: upload and status lookup
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile

from stream_relay.errors import MissingFileError
from stream_relay.models.video import ErrorResponse, UploadResponse
from stream_relay.services.stream_service import StreamService, get_stream_service
from stream_relay.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/api")

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


@router.post("/upload", response_model=UploadResponse, responses=ERROR_RESPONSES)
async def upload_video(
    request: Request,
    stream_service: StreamService = Depends(get_stream_service),
):
    """Forward the multipart field 'video' to Cloudflare Stream"""
    form = await request.form()
    video = form.get("video")
    # A plain text field under the same name is not a file either
    if not isinstance(video, UploadFile):
        logger.warning("Upload request without a video file")
        raise MissingFileError("No video file provided", details="multipart file field 'video' is missing")

    logger.info(f"Received file: {video.filename}, size: {video.size}")

    try:
        envelope = await stream_service.upload_video(
            video_stream=video.file,
            filename=video.filename or "video",
            content_type=video.content_type,
        )
    finally:
        await form.close()

    return JSONResponse(content=envelope.to_wire())


@router.get("/video/{uid}", response_model=UploadResponse, responses=ERROR_RESPONSES)
async def get_video_status(
    uid: str,
    stream_service: StreamService = Depends(get_stream_service),
):
    """Relay the current Cloudflare status of a video; the envelope carries the verdict"""
    envelope = await stream_service.get_video(uid)
    logger.info(f"Status for {uid}: success={envelope.success}")
    return JSONResponse(content=envelope.to_wire())
