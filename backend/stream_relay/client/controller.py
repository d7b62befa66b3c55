"""
Upload-and-poll controller

Drives the client side of the workflow: one upload through the relay, then a
status request every ``poll_interval`` seconds until Cloudflare reports the
video ready or failed. The poll timer is an asyncio task owned by the
controller; it is cancelled on every transition out of polling, and a
generation counter drops responses that arrive for a superseded upload.
"""

import asyncio
from enum import Enum
from typing import Callable, Optional

from stream_relay.client.display import status_message
from stream_relay.client.relay_client import RelayClient, RelayClientError
from stream_relay.config.base import settings
from stream_relay.models.video import UploadResult
from stream_relay.utils.logger import LoggerMixin


class ControllerState(str, Enum):
    IDLE = "idle"
    UPLOADING = "uploading"
    UPLOADED = "uploaded"
    POLLING = "polling"
    READY = "ready"
    FAILED = "failed"
    # polling disarmed because the relay could not be reached or answered badly
    STOPPED = "stopped"


class UploadController(LoggerMixin):
    def __init__(
        self,
        client: RelayClient,
        poll_interval: Optional[float] = None,
        on_change: Optional[Callable[["UploadController"], None]] = None,
    ):
        self.client = client
        self.poll_interval = settings.POLL_INTERVAL if poll_interval is None else poll_interval
        self.on_change = on_change

        self.state = ControllerState.IDLE
        self.file: Optional[str] = None
        self.result: Optional[UploadResult] = None
        self.error: Optional[str] = None
        self.poll_error: Optional[str] = None

        self._generation = 0
        self._poll_task: Optional[asyncio.Task] = None
        self._settled = asyncio.Event()

    @property
    def uid(self) -> Optional[str]:
        return self.result.uid if self.result else None

    @property
    def message(self) -> Optional[str]:
        return status_message(self.result)

    @property
    def polling(self) -> bool:
        return self._poll_task is not None and not self._poll_task.done()

    def _notify(self):
        if self.on_change is not None:
            self.on_change(self)

    def _set_state(self, state: ControllerState):
        if state != self.state:
            self.logger.debug(f"{self.state.value} -> {state.value}")
        self.state = state
        self._notify()

    def _settle(self, state: ControllerState):
        self._poll_task = None
        self._set_state(state)
        self._settled.set()

    def _cancel_poll_task(self):
        if self._poll_task is not None and not self._poll_task.done():
            self._poll_task.cancel()
        self._poll_task = None

    def select_file(self, path: str):
        self.file = path
        self.error = None
        self._notify()

    async def upload(self) -> Optional[UploadResult]:
        """Upload the selected file and arm polling; returns the initial result"""
        if not self.file:
            self.error = "Please select a file first"
            self._notify()
            return None

        # A new upload supersedes everything from the previous one
        self._cancel_poll_task()
        self._generation += 1
        generation = self._generation
        self.result = None
        self.error = None
        self.poll_error = None
        self._settled.clear()
        self._set_state(ControllerState.UPLOADING)

        try:
            envelope = await self.client.upload(self.file)
        except RelayClientError as e:
            if generation != self._generation:
                return None
            self.logger.error(f"Upload of {self.file} failed: {e}")
            self.error = str(e)
            self._settle(ControllerState.IDLE)
            return None

        if generation != self._generation:
            return None

        self._apply(envelope.result)
        if not self.result.is_terminal:
            self._set_state(ControllerState.UPLOADED)
            self._poll_task = asyncio.create_task(self._poll(generation, self.result.uid))
        return self.result

    def _apply(self, result: UploadResult):
        """Replace the current result and settle if it is terminal"""
        self.result = result
        if not result.is_terminal:
            self._notify()
            return
        self._settle(ControllerState.READY if result.ready_to_stream else ControllerState.FAILED)

    async def _poll(self, generation: int, uid: str):
        while True:
            await asyncio.sleep(self.poll_interval)
            if generation != self._generation:
                return

            self._set_state(ControllerState.POLLING)
            try:
                envelope = await self.client.get_status(uid)
            except Exception as e:
                if generation != self._generation:
                    return
                self.logger.error(f"Error checking video status for {uid}: {e}")
                self.poll_error = str(e)
                self._settle(ControllerState.STOPPED)
                return

            if generation != self._generation:
                return

            self._apply(envelope.result)
            if self.result.is_terminal:
                self.logger.info(f"Video {uid} reached {self.state.value}")
                return

    def cancel_polling(self):
        """Stop polling for the current upload"""
        if not self.polling:
            return
        self._generation += 1
        self._cancel_poll_task()
        self._settle(ControllerState.STOPPED)

    async def wait_until_terminal(self, timeout: Optional[float] = None) -> ControllerState:
        """Wait until polling ends (ready, failed, stopped) or the upload fails"""
        await asyncio.wait_for(self._settled.wait(), timeout)
        return self.state

    async def close(self):
        task = self._poll_task
        self._generation += 1
        self._cancel_poll_task()
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                pass
