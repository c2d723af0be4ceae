"""
scm-github main client.

Provides the orchestrator-facing interface: every operation takes the caller's
OAuth token as an explicit argument and runs its GitHub calls through the
resilient command executor.
"""

import base64
import os
from collections.abc import Mapping
from typing import Any

from scm_github.actions import RemoteAction
from scm_github.breaker import CircuitBreaker
from scm_github.exceptions import (
    ConfigurationError,
    NotAFileError,
    UndecodableFileError,
)
from scm_github.executor import CommandExecutor
from scm_github.locator import (
    DEFAULT_BRANCH,
    Locator,
    decode_locator,
    encode_locator,
    format_clone_reference,
    parse_clone_reference,
)
from scm_github.status import build_status_params
from scm_github.transport import BreakerConfig, HTTPTransport, RetryConfig
from scm_github.types.events import WebhookEvent
from scm_github.types.repos import CommitInfo, Permissions, RepoReference, UserInfo
from scm_github.types.stats import StatsSnapshot
from scm_github.webhook import parse_hook

DEFAULT_BASE_URL = "https://api.github.com"
DEFAULT_PRODUCT = "screwdriver"
DEFAULT_TIMEOUT = 30.0


def _env_number(name: str, kind: type, default: Any) -> Any:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return kind(raw)
    except ValueError:
        raise ConfigurationError(
            f"Invalid {name}: {raw!r}. Must be a {kind.__name__}"
        ) from None


def load_env_config() -> dict[str, Any]:
    """
    Read adapter settings from environment variables.

    Environment variables:
        SCM_GITHUB_API_URL: GitHub API root (default: https://api.github.com)
        SCM_GITHUB_PRODUCT: Commit status context prefix (default: screwdriver)
        SCM_GITHUB_TIMEOUT: Request timeout in seconds (default: 30)
        SCM_GITHUB_MAX_RETRIES: Retries after the first attempt (default: 5)
        SCM_GITHUB_BREAKER_THRESHOLD: Consecutive failures before the breaker opens (default: 5)

    Raises:
        ConfigurationError: If a numeric variable cannot be parsed
    """
    max_retries = _env_number("SCM_GITHUB_MAX_RETRIES", int, RetryConfig.max_retries)
    threshold = _env_number(
        "SCM_GITHUB_BREAKER_THRESHOLD", int, BreakerConfig.failure_threshold
    )

    if max_retries < 0:
        raise ConfigurationError("SCM_GITHUB_MAX_RETRIES must not be negative")
    if threshold < 1:
        raise ConfigurationError("SCM_GITHUB_BREAKER_THRESHOLD must be at least 1")

    return {
        "base_url": os.environ.get("SCM_GITHUB_API_URL") or DEFAULT_BASE_URL,
        "product": os.environ.get("SCM_GITHUB_PRODUCT") or DEFAULT_PRODUCT,
        "timeout": _env_number("SCM_GITHUB_TIMEOUT", float, DEFAULT_TIMEOUT),
        "retry_config": RetryConfig(max_retries=max_retries),
        "breaker_config": BreakerConfig(failure_threshold=threshold),
    }


def _build_reference(locator: Locator, data: dict[str, Any]) -> RepoReference:
    user, repo = data["full_name"].split("/", 1)
    return RepoReference(
        host=locator.host,
        user=user,
        repo=repo,
        branch=locator.branch,
        url=f"https://{locator.host}/{user}/{repo}/tree/{locator.branch}",
    )


def _parse_permissions(data: dict[str, Any]) -> Permissions:
    permissions = data.get("permissions") or {}
    return Permissions(
        admin=bool(permissions.get("admin", False)),
        push=bool(permissions.get("push", False)),
        pull=bool(permissions.get("pull", False)),
    )


def _decode_file(path: str, data: dict[str, Any]) -> str:
    if data.get("type") != "file":
        raise NotAFileError(path)

    # GitHub answers "none" for files too large to inline.
    encoding = data.get("encoding")
    if encoding != "base64":
        raise UndecodableFileError(path, f"unsupported encoding {encoding!r}")

    try:
        return base64.b64decode(data.get("content", "")).decode("utf-8")
    except ValueError as error:
        raise UndecodableFileError(path, str(error)) from error


def _parse_commit(data: dict[str, Any]) -> CommitInfo:
    author = data.get("author") or {}
    return CommitInfo(
        sha=data["sha"],
        message=data.get("commit", {}).get("message", ""),
        author_login=author.get("login"),
        url=data.get("html_url", ""),
    )


def _parse_user(data: dict[str, Any]) -> UserInfo:
    return UserInfo(
        login=data["login"],
        name=data.get("name"),
        avatar_url=data.get("avatar_url", ""),
        url=data.get("html_url", ""),
    )


class GithubScm:
    """
    GitHub source-control adapter.

    Example:
        ```python
        from scm_github import GithubScm

        with GithubScm(product="screwdriver") as scm:
            locator = scm.parse_url("git@github.com:octocat/hello.git#main", token)
            sha = scm.get_commit_sha(locator, token)
            scm.update_commit_status(locator, sha, "SUCCESS", token, job_name="main")
        ```

    The credential is passed with every call and only ever lives in the
    headers of that call's requests, so one instance can serve many users
    concurrently.
    """

    def __init__(
        self,
        product: str = DEFAULT_PRODUCT,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
        breaker_config: BreakerConfig | None = None,
        transport: HTTPTransport | None = None,
    ) -> None:
        """
        Initialize the adapter.

        Args:
            product: Commit status context prefix (default: screwdriver)
            base_url: GitHub API root (default: https://api.github.com)
            timeout: Request timeout in seconds (default: 30.0)
            retry_config: Retry behavior (optional)
            breaker_config: Circuit breaker behavior (optional)
            transport: Anything with HTTPTransport's ``execute`` (optional)
        """
        self.product = product
        self._transport = transport or HTTPTransport(base_url=base_url, timeout=timeout)
        self._executor = CommandExecutor(
            self._transport.execute,
            retry_config=retry_config,
            breaker=CircuitBreaker(breaker_config),
        )

    @classmethod
    def from_env(cls, transport: HTTPTransport | None = None) -> "GithubScm":
        """Create an adapter from ``SCM_GITHUB_*`` environment variables (see load_env_config)."""
        return cls(transport=transport, **load_env_config())

    @property
    def transport(self) -> HTTPTransport:
        return self._transport

    @property
    def executor(self) -> CommandExecutor:
        return self._executor

    def close(self) -> None:
        """Close the adapter and release resources."""
        self._transport.close()

    def __enter__(self) -> "GithubScm":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    # Identifiers

    def format_clone_reference(self, reference: str) -> str:
        return format_clone_reference(reference)

    def parse_url(self, clone_reference: str, credential: str) -> str:
        """
        Mint a locator from a user-supplied clone reference.

        Args:
            clone_reference: ``git@host:user/repo.git[#branch]``
            credential: OAuth token

        Returns:
            ``host:repoId:branch`` locator string

        Raises:
            InvalidReferenceError: If the clone reference is malformed
        """
        parsed = parse_clone_reference(clone_reference)
        data = self._executor.run_command(
            RemoteAction.GET_REPO,
            {"user": parsed.user, "repo": parsed.repo},
            credential,
        )
        return encode_locator(parsed.host, data["id"], parsed.branch)

    def resolve_reference(self, locator: str, credential: str) -> RepoReference:
        """
        Resolve a locator to its current owner/name with one lookup.

        Raises:
            MalformedLocatorError: If the locator is malformed
        """
        decoded, data = self._lookup(locator, credential)
        return _build_reference(decoded, data)

    # Repository operations

    def get_permissions(self, locator: str, credential: str) -> Permissions:
        """The credential owner's permissions on the locator's repository."""
        _, data = self._lookup(locator, credential)
        return _parse_permissions(data)

    def get_commit_sha(self, locator: str, credential: str) -> str:
        """Head commit of the locator's branch."""
        reference = self.resolve_reference(locator, credential)
        data = self._executor.run_command(
            RemoteAction.GET_BRANCH,
            {"user": reference.user, "repo": reference.repo, "branch": reference.branch},
            credential,
        )
        return data["commit"]["sha"]

    def get_file(
        self,
        locator: str,
        path: str,
        credential: str,
        ref: str | None = None,
    ) -> str:
        """
        Fetch a file as text.

        Args:
            locator: Repository locator
            path: File path within the repository
            credential: OAuth token
            ref: Branch, tag or sha (default: the locator's branch)

        Raises:
            NotAFileError: If ``path`` is a directory, symlink or submodule
            UndecodableFileError: If the contents are not inline UTF-8 text
        """
        reference = self.resolve_reference(locator, credential)
        data = self._executor.run_command(
            RemoteAction.GET_CONTENT,
            {
                "user": reference.user,
                "repo": reference.repo,
                "path": path,
                "ref": ref or reference.branch or DEFAULT_BRANCH,
            },
            credential,
        )
        return _decode_file(path, data)

    def update_commit_status(
        self,
        locator: str,
        sha: str,
        build_status: str,
        credential: str,
        job_name: str | None = None,
        url: str | None = None,
    ) -> dict[str, Any]:
        """
        Set the commit status for ``sha``.

        Args:
            locator: Repository locator
            sha: Commit to decorate
            build_status: SUCCESS, RUNNING, QUEUED, FAILURE, ...
            credential: OAuth token
            job_name: Appended to the status context (optional)
            url: Build log URL (optional)

        Returns:
            The created status as returned by GitHub
        """
        reference = self.resolve_reference(locator, credential)
        return self._executor.run_command(
            RemoteAction.CREATE_STATUS,
            build_status_params(
                reference.user,
                reference.repo,
                sha,
                build_status,
                self.product,
                job_name=job_name,
                url=url,
            ),
            credential,
        )

    def get_commit(self, locator: str, sha: str, credential: str) -> CommitInfo:
        reference = self.resolve_reference(locator, credential)
        data = self._executor.run_command(
            RemoteAction.GET_COMMIT,
            {"user": reference.user, "repo": reference.repo, "sha": sha},
            credential,
        )
        return _parse_commit(data)

    def get_user(self, username: str, credential: str) -> UserInfo:
        data = self._executor.run_command(
            RemoteAction.GET_USER, {"username": username}, credential
        )
        return _parse_user(data)

    # Introspection and webhooks

    def stats(self) -> StatsSnapshot:
        """Cumulative executor counters and breaker state."""
        return self._executor.stats()

    def parse_hook(
        self, headers: Mapping[str, str], payload: Mapping[str, Any]
    ) -> WebhookEvent:
        return parse_hook(headers, payload)

    def _lookup(self, locator: str, credential: str) -> tuple[Locator, dict[str, Any]]:
        decoded = decode_locator(locator)
        data = self._executor.run_command(
            RemoteAction.GET_REPO_BY_ID, {"id": decoded.repo_id}, credential
        )
        return decoded, data
