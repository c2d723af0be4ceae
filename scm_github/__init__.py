"""scm-github - GitHub source-control adapter for CI orchestrators."""

from scm_github.actions import RemoteAction
from scm_github.async_client import AsyncGithubScm
from scm_github.breaker import CircuitBreaker, CommandStats
from scm_github.client import GithubScm
from scm_github.exceptions import (
    BreakerOpenError,
    CommandTimeoutError,
    ConfigurationError,
    InvalidReferenceError,
    MalformedLocatorError,
    MalformedPayloadError,
    NotAFileError,
    UndecodableFileError,
    ScmError,
    UnsupportedEventError,
    UpstreamError,
)
from scm_github.executor import AsyncCommandExecutor, CommandExecutor
from scm_github.locator import (
    CloneReference,
    Locator,
    decode_locator,
    encode_locator,
    format_clone_reference,
    parse_clone_reference,
)
from scm_github.logging import configure_logging, get_logger
from scm_github.transport import BreakerConfig, HTTPTransport, RetryConfig
from scm_github.webhook import normalize, parse_hook

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Main Clients
    "GithubScm",
    "AsyncGithubScm",
    # Identifiers
    "Locator",
    "CloneReference",
    "decode_locator",
    "encode_locator",
    "parse_clone_reference",
    "format_clone_reference",
    # Executor
    "RemoteAction",
    "CommandExecutor",
    "AsyncCommandExecutor",
    "CircuitBreaker",
    "CommandStats",
    # Webhooks
    "normalize",
    "parse_hook",
    # Exceptions
    "ScmError",
    "ConfigurationError",
    "MalformedLocatorError",
    "InvalidReferenceError",
    "UnsupportedEventError",
    "MalformedPayloadError",
    "NotAFileError",
    "UndecodableFileError",
    "BreakerOpenError",
    "CommandTimeoutError",
    "UpstreamError",
    # Transport
    "HTTPTransport",
    "RetryConfig",
    "BreakerConfig",
    # Logging
    "configure_logging",
    "get_logger",
]
