"""
Error taxonomy for the maps proxy.
Every error carries the HTTP status and the short error label used in the
JSON envelope returned to the widget.
"""
from typing import Optional


class MapsAPIError(Exception):
    status_code: int = 500
    error: str = "Internal server error"

    def __init__(self, message: str, error: Optional[str] = None):
        self.message = message
        if error:
            self.error = error
        super().__init__(message)

    def to_envelope(self) -> dict:
        return {"success": False, "error": self.error, "message": self.message}


class ConfigurationError(MapsAPIError):
    """Missing provider credential. Fatal at startup."""
    error = "Configuration error"


class ValidationError(MapsAPIError):
    status_code = 400
    error = "Invalid request"


class NotFoundError(MapsAPIError):
    status_code = 404
    error = "Not found"


# --- Upstream / network failures (all surface as 500) ---

class UpstreamError(MapsAPIError):
    error = "Upstream request failed"


class NetworkError(UpstreamError):
    pass


class ProviderError(UpstreamError):
    """The provider answered, but with a non-success status."""

    def __init__(self, status: str, message: Optional[str] = None):
        self.status = status
        self.provider_message = message or "Unknown error"
        super().__init__(f"Google API error: {status} - {self.provider_message}")


class FetchError(UpstreamError):
    pass


class DetailFetchError(UpstreamError):
    error = "Failed to get place details"
