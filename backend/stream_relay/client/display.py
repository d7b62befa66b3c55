"""
Human-readable rendering of an upload result
"""

from typing import List, Optional

from stream_relay.models.video import UploadResult

STATUS_MESSAGES = {
    "queued": "Video is queued for processing...",
    "downloading": "Downloading video...",
    "processing": "Processing video...",
    "ready": "Video is ready to play",
}


def status_message(result: Optional[UploadResult]) -> Optional[str]:
    """Message for the current state label; unknown labels fall back to 'Status: <label>'"""
    if result is None:
        return None

    state = result.status.state
    if state == "failed":
        return f"Processing failed: {result.status.error_reason_text or 'Unknown error'}"
    return STATUS_MESSAGES.get(state, f"Status: {state}")


def render_result(result: Optional[UploadResult]) -> List[str]:
    if result is None:
        return []

    lines = [status_message(result)]
    if not result.ready_to_stream:
        if result.thumbnail:
            lines.append("Video is being processed. You'll be able to play it once it's ready.")
            lines.append(f"Thumbnail: {result.thumbnail}")
    else:
        lines.append(f"Preview: {result.preview}")
        lines.append(f"HLS URL: {result.playback.hls}")
        lines.append(f"DASH URL: {result.playback.dash}")
    return lines
