"""scm-github exception classes."""

from typing import Any


class ScmError(Exception):
    """Base exception for all scm-github errors."""

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")


class ConfigurationError(ScmError):
    """Raised when adapter configuration is invalid or missing."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


class MalformedLocatorError(ScmError):
    """Raised when a locator is not exactly ``host:repoId:branch``."""

    def __init__(self, locator: str) -> None:
        super().__init__("MALFORMED_LOCATOR", f"Malformed locator: {locator!r}")
        self.locator = locator


class InvalidReferenceError(ScmError):
    """Raised when a clone reference does not match the expected shape."""

    def __init__(self, reference: str) -> None:
        super().__init__("INVALID_REFERENCE", f"Invalid scmUrl: {reference}")
        self.reference = reference


class UnsupportedEventError(ScmError):
    """Raised when a webhook event kind is outside the handled vocabulary."""

    def __init__(self, event_kind: str | None) -> None:
        super().__init__(
            "UNSUPPORTED_EVENT", f"Event {event_kind} not supported"
        )
        self.event_kind = event_kind


class MalformedPayloadError(ScmError):
    """Raised when a required webhook payload field is missing."""

    def __init__(self, event_kind: str, path: str) -> None:
        super().__init__(
            "MALFORMED_PAYLOAD",
            f"{event_kind} payload is missing required field '{path}'",
        )
        self.event_kind = event_kind
        self.path = path


class NotAFileError(ScmError):
    """Raised when a content lookup resolves to something other than a file."""

    def __init__(self, path: str) -> None:
        super().__init__("NOT_A_FILE", f"Path ({path}) does not point to file")
        self.path = path


class UndecodableFileError(ScmError):
    """Raised when file contents are not inline base64-encoded UTF-8 text."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(
            "UNDECODABLE_FILE", f"Path ({path}) could not be decoded: {reason}"
        )
        self.path = path
        self.reason = reason


class BreakerOpenError(ScmError):
    """Raised when the circuit breaker rejects a call. No request was sent."""

    def __init__(self, action: str, retry_in: float) -> None:
        super().__init__(
            "BREAKER_OPEN",
            f"Circuit breaker is open, {action} not attempted "
            f"(retry in {retry_in:.1f}s)",
        )
        self.action = action
        self.retry_in = retry_in


class CommandTimeoutError(ScmError):
    """Raised when every attempt of a command timed out."""

    def __init__(self, action: str, attempts: int) -> None:
        super().__init__(
            "TIMEOUT", f"{action} timed out after {attempts} attempt(s)"
        )
        self.action = action
        self.attempts = attempts


class UpstreamError(ScmError):
    """
    Raised for any other remote-originated error.

    The original exception is kept untouched on ``original`` so callers can
    inspect provider-specific detail (response body, headers, message).
    """

    def __init__(self, action: str, original: BaseException) -> None:
        super().__init__("UPSTREAM_ERROR", f"{action} failed: {original}")
        self.action = action
        self.original = original
        self.status_code: int | None = _status_code_of(original)


def _status_code_of(error: BaseException) -> int | None:
    response: Any = getattr(error, "response", None)
    if response is None:
        return None
    return getattr(response, "status_code", None)
