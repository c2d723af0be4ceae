"""
Pytest fixtures and payload builders for testing code that uses scm-github.
"""

import base64
from collections.abc import Generator
from typing import Any

import httpx
import pytest

from scm_github.client import GithubScm
from scm_github.testing.mock import MockTransport
from scm_github.transport import BreakerConfig, RetryConfig


# ============================================================================
# Payload builders
# ============================================================================


def create_mock_repository(
    repo_id: int = 1296269,
    full_name: str = "octocat/hello-world",
    admin: bool = False,
    push: bool = True,
    pull: bool = True,
) -> dict[str, Any]:
    """Build a repository lookup response."""
    return {
        "id": repo_id,
        "full_name": full_name,
        "ssh_url": f"git@github.com:{full_name}.git",
        "permissions": {"admin": admin, "push": push, "pull": pull},
    }


def create_content_payload(
    text: str, path: str = "screwdriver.yaml", type: str = "file"
) -> dict[str, Any]:
    """Build a contents response with base64-encoded ``text``."""
    return {
        "type": type,
        "path": path,
        "encoding": "base64",
        "content": base64.b64encode(text.encode("utf-8")).decode("ascii"),
    }


def create_push_payload(
    branch: str = "master",
    sha: str = "9b1f3c1a0e7d",
    ssh_url: str = "git@github.com:octocat/hello-world.git",
    login: str = "octocat",
) -> dict[str, Any]:
    """Build a ``push`` webhook payload."""
    return {
        "ref": f"refs/heads/{branch}",
        "before": "0000000000000000000000000000000000000000",
        "after": sha,
        "repository": {"id": 1296269, "ssh_url": ssh_url},
        "pusher": {"name": login},
        "sender": {"login": login},
    }


def create_pull_request_payload(
    action: str = "opened",
    number: int = 1,
    base_ref: str = "master",
    head_sha: str = "4f2a9c77e01b",
    ssh_url: str = "git@github.com:octocat/hello-world.git",
    login: str = "octocat",
) -> dict[str, Any]:
    """Build a ``pull_request`` webhook payload."""
    return {
        "action": action,
        "number": number,
        "pull_request": {
            "number": number,
            "state": "closed" if action == "closed" else "open",
            "base": {"ref": base_ref, "repo": {"ssh_url": ssh_url}},
            "head": {"ref": "feature", "sha": head_sha},
        },
        "sender": {"login": login},
    }


def http_error(
    status_code: int,
    message: str = "error",
    headers: dict[str, str] | None = None,
) -> httpx.HTTPStatusError:
    """Build the error httpx raises for a ``status_code`` response."""
    request = httpx.Request("GET", "https://api.github.com/")
    response = httpx.Response(
        status_code,
        json={"message": message},
        headers=headers,
        request=request,
    )
    return httpx.HTTPStatusError(message, request=request, response=response)


def fast_retry_config(max_retries: int = 2) -> RetryConfig:
    """Retry config without waiting between attempts."""
    return RetryConfig(max_retries=max_retries, min_timeout=0.0, jitter=0.0)


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def mock_transport() -> Generator[MockTransport, None, None]:
    """Provide a MockTransport."""
    transport = MockTransport()
    yield transport
    transport.reset()


@pytest.fixture
def scm(mock_transport: MockTransport) -> GithubScm:
    """A GithubScm wired to ``mock_transport`` that retries without sleeping."""
    return GithubScm(
        product="screwdriver",
        transport=mock_transport,  # type: ignore[arg-type]
        retry_config=fast_retry_config(),
        breaker_config=BreakerConfig(failure_threshold=5, reset_timeout=30.0),
    )


@pytest.fixture
def sample_locator() -> str:
    return "github.com:1296269:master"


@pytest.fixture
def sample_repository() -> dict[str, Any]:
    return create_mock_repository()


@pytest.fixture
def push_payload() -> dict[str, Any]:
    return create_push_payload()


@pytest.fixture
def pull_request_payload() -> dict[str, Any]:
    return create_pull_request_payload()
