"""
Relay error types.

Every failure the relay reports to its caller is a RelayError; the handler
registered in main.py turns it into the JSON error body.
"""

from typing import Any, Dict, Optional


class RelayError(Exception):
    """Base error carrying the HTTP status and diagnostic context."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        details: Any = None,
        response: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details
        self.response = response
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        if self.response is not None:
            body["response"] = self.response
        return body


class MissingFileError(RelayError):
    """No file was attached to the upload request."""

    status_code = 400


class ServiceNotConfigured(RelayError):
    """Account id or API token is not set."""

    status_code = 503


class RemoteTransportError(RelayError):
    """The remote service could not be reached or its response not read."""

    status_code = 500


class RemoteParseError(RelayError):
    """The remote response is not a valid envelope."""

    status_code = 500


class RemoteUploadFailed(RelayError):
    """The remote envelope reports success=false."""

    status_code = 400
