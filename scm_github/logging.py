"""
scm-github logging utilities.

Logger tree:

    scm_github           root of the adapter's loggers
    scm_github.http      one DEBUG line per GitHub request and response
    scm_github.breaker   circuit breaker state changes
    scm_github.executor  retries

OAuth tokens never reach a log record: headers and bodies pass through
:func:`safe_log_dict` and free text through :func:`mask_sensitive_data`.
"""

import logging
import re
from typing import Any

REDACTED = "[REDACTED]"

_root_logger = logging.getLogger("scm_github")
_http_logger = logging.getLogger("scm_github.http")
_breaker_logger = logging.getLogger("scm_github.breaker")

_DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_MASKS = (
    # "Authorization: token abc" in any quoting
    (
        re.compile(
            r"(authorization['\"]?\s*[:=]\s*['\"]?)(?:token|bearer|basic)\s+[^\s'\",}]+",
            re.IGNORECASE,
        ),
        r"\1" + REDACTED,
    ),
    # Personal access, OAuth, user-to-server and refresh tokens
    (re.compile(r"\bgh[pousr]_[A-Za-z0-9]{20,}\b"), "[TOKEN_REDACTED]"),
    (re.compile(r"\bgithub_pat_[A-Za-z0-9_]{20,}\b"), "[TOKEN_REDACTED]"),
    (
        re.compile(
            r"(secret|token|password|credential|api_key)['\"]?\s*[:=]\s*['\"][^'\"]+['\"]",
            re.IGNORECASE,
        ),
        r"\1: " + REDACTED,
    ),
)

SENSITIVE_KEYS = frozenset(
    {"authorization", "token", "credential", "secret", "password", "api_key"}
)


def configure_logging(
    level: int = logging.INFO,
    http_level: int | None = None,
    breaker_level: int | None = None,
    handler: logging.Handler | None = None,
    format_string: str | None = None,
) -> None:
    """
    Attach a handler to the adapter's loggers and set their levels.

    Args:
        level: Level for ``scm_github`` and any logger without its own level
        http_level: Level for ``scm_github.http`` (default: ``level``)
        breaker_level: Level for ``scm_github.breaker`` (default: ``level``)
        handler: Handler to attach (default: a stderr StreamHandler)
        format_string: Record format (default: time, level, logger, message)

    Example:
        ```python
        import logging
        from scm_github import configure_logging

        configure_logging(http_level=logging.DEBUG)
        ```
    """
    handler = handler or logging.StreamHandler()
    handler.setFormatter(logging.Formatter(format_string or _DEFAULT_FORMAT))
    _root_logger.addHandler(handler)

    for logger, logger_level in (
        (_root_logger, level),
        (_http_logger, http_level),
        (_breaker_logger, breaker_level),
    ):
        logger.setLevel(level if logger_level is None else logger_level)


def get_logger(name: str | None = None) -> logging.Logger:
    """The ``scm_github`` logger, or its ``name`` child."""
    return _root_logger if name is None else _root_logger.getChild(name)


def mask_sensitive_data(text: str) -> str:
    """Replace tokens, authorization headers and secrets in ``text``."""
    for pattern, replacement in _MASKS:
        text = pattern.sub(replacement, text)
    return text


def _is_sensitive(key: Any, keys: frozenset[str] | set[str]) -> bool:
    lowered = str(key).lower()
    return any(sensitive in lowered for sensitive in keys)


def _redact(value: Any, keys: frozenset[str] | set[str]) -> Any:
    if isinstance(value, dict):
        return {
            k: REDACTED if _is_sensitive(k, keys) else _redact(v, keys)
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [_redact(item, keys) for item in value]
    return value


def safe_log_dict(
    data: dict[str, Any], sensitive_keys: set[str] | None = None
) -> dict[str, Any]:
    """
    Copy ``data`` with the values of sensitive keys replaced by ``[REDACTED]``.

    A key is sensitive when its lowercased name contains one of
    ``sensitive_keys`` (default: :data:`SENSITIVE_KEYS`). Nested dicts and
    lists are walked.
    """
    return _redact(data, SENSITIVE_KEYS if sensitive_keys is None else sensitive_keys)


def log_http_request(
    method: str,
    url: str,
    headers: dict[str, str] | None = None,
    body: dict[str, Any] | None = None,
) -> None:
    """DEBUG-log an outbound request with its credentials masked."""
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    _http_logger.debug(
        "%s %s headers=%s body=%s",
        method,
        url,
        safe_log_dict(headers or {}),
        safe_log_dict(body) if body else "-",
    )


def log_http_response(
    status_code: int,
    url: str,
    elapsed_ms: float | None = None,
) -> None:
    """DEBUG-log a response status and its round-trip time."""
    if elapsed_ms is None:
        _http_logger.debug("Response %d from %s", status_code, url)
    else:
        _http_logger.debug(
            "Response %d from %s in %.1fms", status_code, url, elapsed_ms
        )


def log_breaker_transition(
    old_state: str,
    new_state: str,
    consecutive_failures: int,
) -> None:
    """Opening is logged at WARNING, every other transition at INFO."""
    _breaker_logger.log(
        logging.WARNING if new_state == "open" else logging.INFO,
        "Breaker %s -> %s (consecutive failures: %d)",
        old_state,
        new_state,
        consecutive_failures,
    )


__all__ = [
    "REDACTED",
    "SENSITIVE_KEYS",
    "configure_logging",
    "get_logger",
    "mask_sensitive_data",
    "safe_log_dict",
    "log_http_request",
    "log_http_response",
    "log_breaker_transition",
]
