"""
Client side of the relay: HTTP client, upload-and-poll controller, rendering
"""

from .relay_client import RelayClient, RelayClientError
from .controller import ControllerState, UploadController
from .display import render_result, status_message

__all__ = [
    'RelayClient',
    'RelayClientError',
    'ControllerState',
    'UploadController',
    'render_result',
    'status_message',
]
