"""
scm-github async client.

Same operations as :class:`scm_github.client.GithubScm`, with every GitHub call
awaited so many operations can be in flight on one event loop.
"""

from collections.abc import Mapping
from typing import Any

from scm_github.actions import RemoteAction
from scm_github.async_transport import AsyncHTTPTransport
from scm_github.breaker import CircuitBreaker
from scm_github.client import (
    DEFAULT_BASE_URL,
    DEFAULT_PRODUCT,
    DEFAULT_TIMEOUT,
    _build_reference,
    _decode_file,
    _parse_commit,
    _parse_permissions,
    _parse_user,
    load_env_config,
)
from scm_github.executor import AsyncCommandExecutor
from scm_github.locator import (
    DEFAULT_BRANCH,
    Locator,
    decode_locator,
    encode_locator,
    format_clone_reference,
    parse_clone_reference,
)
from scm_github.status import build_status_params
from scm_github.transport import BreakerConfig, RetryConfig
from scm_github.types.events import WebhookEvent
from scm_github.types.repos import CommitInfo, Permissions, RepoReference, UserInfo
from scm_github.types.stats import StatsSnapshot
from scm_github.webhook import parse_hook


class AsyncGithubScm:
    """
    Async GitHub source-control adapter.

    Example:
        ```python
        import asyncio
        from scm_github import AsyncGithubScm

        async def main():
            async with AsyncGithubScm() as scm:
                ref = await scm.resolve_reference("github.com:1296269:main", token)
                print(ref.name)

        asyncio.run(main())
        ```
    """

    def __init__(
        self,
        product: str = DEFAULT_PRODUCT,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
        breaker_config: BreakerConfig | None = None,
        transport: AsyncHTTPTransport | None = None,
    ) -> None:
        """
        Initialize the async adapter.

        Args:
            product: Commit status context prefix (default: screwdriver)
            base_url: GitHub API root (default: https://api.github.com)
            timeout: Request timeout in seconds (default: 30.0)
            retry_config: Retry behavior (optional)
            breaker_config: Circuit breaker behavior (optional)
            transport: Anything with AsyncHTTPTransport's ``execute`` (optional)
        """
        self.product = product
        self._transport = transport or AsyncHTTPTransport(
            base_url=base_url, timeout=timeout
        )
        self._executor = AsyncCommandExecutor(
            self._transport.execute,
            retry_config=retry_config,
            breaker=CircuitBreaker(breaker_config),
        )

    @classmethod
    def from_env(
        cls, transport: AsyncHTTPTransport | None = None
    ) -> "AsyncGithubScm":
        """Create an async adapter from ``SCM_GITHUB_*`` environment variables."""
        return cls(transport=transport, **load_env_config())

    @property
    def transport(self) -> AsyncHTTPTransport:
        return self._transport

    @property
    def executor(self) -> AsyncCommandExecutor:
        return self._executor

    async def close(self) -> None:
        """Close the adapter and release resources."""
        await self._transport.close()

    async def __aenter__(self) -> "AsyncGithubScm":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    def format_clone_reference(self, reference: str) -> str:
        return format_clone_reference(reference)

    async def parse_url(self, clone_reference: str, credential: str) -> str:
        """Mint a locator from a user-supplied clone reference."""
        parsed = parse_clone_reference(clone_reference)
        data = await self._executor.run_command(
            RemoteAction.GET_REPO,
            {"user": parsed.user, "repo": parsed.repo},
            credential,
        )
        return encode_locator(parsed.host, data["id"], parsed.branch)

    async def resolve_reference(self, locator: str, credential: str) -> RepoReference:
        decoded, data = await self._lookup(locator, credential)
        return _build_reference(decoded, data)

    async def get_permissions(self, locator: str, credential: str) -> Permissions:
        _, data = await self._lookup(locator, credential)
        return _parse_permissions(data)

    async def get_commit_sha(self, locator: str, credential: str) -> str:
        reference = await self.resolve_reference(locator, credential)
        data = await self._executor.run_command(
            RemoteAction.GET_BRANCH,
            {"user": reference.user, "repo": reference.repo, "branch": reference.branch},
            credential,
        )
        return data["commit"]["sha"]

    async def get_file(
        self,
        locator: str,
        path: str,
        credential: str,
        ref: str | None = None,
    ) -> str:
        """Fetch a file as text. Raises NotAFileError for non-file paths."""
        reference = await self.resolve_reference(locator, credential)
        data = await self._executor.run_command(
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

    async def update_commit_status(
        self,
        locator: str,
        sha: str,
        build_status: str,
        credential: str,
        job_name: str | None = None,
        url: str | None = None,
    ) -> dict[str, Any]:
        reference = await self.resolve_reference(locator, credential)
        return await self._executor.run_command(
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

    async def get_commit(self, locator: str, sha: str, credential: str) -> CommitInfo:
        reference = await self.resolve_reference(locator, credential)
        data = await self._executor.run_command(
            RemoteAction.GET_COMMIT,
            {"user": reference.user, "repo": reference.repo, "sha": sha},
            credential,
        )
        return _parse_commit(data)

    async def get_user(self, username: str, credential: str) -> UserInfo:
        data = await self._executor.run_command(
            RemoteAction.GET_USER, {"username": username}, credential
        )
        return _parse_user(data)

    def stats(self) -> StatsSnapshot:
        return self._executor.stats()

    def parse_hook(
        self, headers: Mapping[str, str], payload: Mapping[str, Any]
    ) -> WebhookEvent:
        return parse_hook(headers, payload)

    async def _lookup(
        self, locator: str, credential: str
    ) -> tuple[Locator, dict[str, Any]]:
        decoded = decode_locator(locator)
        data = await self._executor.run_command(
            RemoteAction.GET_REPO_BY_ID, {"id": decoded.repo_id}, credential
        )
        return decoded, data
