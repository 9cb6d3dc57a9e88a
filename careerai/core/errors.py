"""Dispatch error taxonomy.

Every failure the dispatcher can report maps to one class here. The API turns
them into ``{"error": ..., "details": ...}`` bodies with ``status_code``; the
HTTP dispatch client turns such bodies back into the same classes.
"""


class DispatchError(Exception):
    status_code = 500
    message = "Server error"

    def __init__(self, message: str | None = None, details: str | None = None):
        self.message = message or self.message
        self.details = details
        super().__init__(self.message if not details else f"{self.message}: {details}")

    def to_body(self) -> dict:
        body = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ConfigError(DispatchError):
    """No provider credential configured. Raised before any network call."""

    status_code = 500
    message = "Missing AI API key in server configuration"


class MalformedRequestError(DispatchError):
    status_code = 400
    message = "Invalid JSON request body"


class UnknownActionError(DispatchError):
    status_code = 400
    message = "Unknown action"


class ProviderError(DispatchError):
    """Provider returned non-2xx, an unreadable body, or the transport failed."""

    status_code = 500
    message = "AI request failed"

    def __init__(self, message: str | None = None, details: str | None = None, provider_status: int | None = None):
        self.provider_status = provider_status
        super().__init__(message, details)


def error_from_body(status_code: int, body: dict) -> DispatchError:
    """Rebuild the matching DispatchError from an API error response."""
    message = str(body.get("error") or "")
    details = body.get("details")
    if status_code == 400:
        if message == UnknownActionError.message or message.startswith("Unknown action"):
            return UnknownActionError(message, details)
        return MalformedRequestError(message or None, details)
    if message == ConfigError.message:
        return ConfigError(message, details)
    if message.startswith(ProviderError.message):
        return ProviderError(message, details)
    return DispatchError(message or None, details)
