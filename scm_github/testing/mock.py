"""
Mock transports for testing.

Provides MockTransport and AsyncMockTransport, drop-in replacements for the
HTTP transports that return scripted responses per action instead of calling
GitHub.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from scm_github.actions import RemoteAction

Outcome = dict[str, Any] | BaseException


@dataclass
class MockResponse:
    """Scripted outcomes for one action, consumed in order."""

    outcomes: list[Outcome]
    call_count: int = 0

    def next(self) -> Outcome:
        # The last outcome repeats once the script runs out.
        index = min(self.call_count, len(self.outcomes) - 1)
        self.call_count += 1
        return self.outcomes[index]


@dataclass
class MockCall:
    """Record of one execute() call."""

    action: RemoteAction
    params: dict[str, Any]
    credential: str | None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class MockTransport:
    """
    Mock transport for testing.

    Example:
        ```python
        from scm_github import GithubScm, RemoteAction
        from scm_github.testing import MockTransport, http_error

        transport = MockTransport()
        transport.configure(
            RemoteAction.GET_REPO_BY_ID,
            http_error(503),
            {"id": 1, "full_name": "octocat/hello"},
        )
        scm = GithubScm(transport=transport)

        scm.resolve_reference("github.com:1:main", "token")
        assert transport.call_count(RemoteAction.GET_REPO_BY_ID) == 2
        ```
    """

    def __init__(self) -> None:
        self._calls: list[MockCall] = []
        self._responses: dict[RemoteAction, MockResponse] = {}
        self.closed = False

    def configure(self, action: RemoteAction, *outcomes: Outcome) -> None:
        """
        Script the outcomes of ``action``.

        Each outcome is either a response dict or an exception to raise.
        Unconfigured actions answer with an empty dict.
        """
        self._responses[action] = MockResponse(outcomes=list(outcomes) or [{}])

    def execute(
        self,
        action: RemoteAction,
        params: dict[str, Any],
        credential: str | None = None,
    ) -> dict[str, Any]:
        return self._respond(action, params, credential)

    def _respond(
        self,
        action: RemoteAction,
        params: dict[str, Any],
        credential: str | None,
    ) -> dict[str, Any]:
        self._calls.append(
            MockCall(action=action, params=dict(params), credential=credential)
        )
        response = self._responses.get(action)
        if response is None:
            return {}

        outcome = response.next()
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    def was_called(self, action: RemoteAction) -> bool:
        return any(call.action is action for call in self._calls)

    def call_count(self, action: RemoteAction) -> int:
        return sum(1 for call in self._calls if call.action is action)

    def get_calls(self, action: RemoteAction | None = None) -> list[MockCall]:
        """Recorded calls, optionally filtered by action."""
        if action is None:
            return list(self._calls)
        return [call for call in self._calls if call.action is action]

    def reset(self) -> None:
        """Reset all recorded calls and configured responses."""
        self._calls.clear()
        self._responses.clear()

    def close(self) -> None:
        self.closed = True


class AsyncMockTransport(MockTransport):
    """Async variant of :class:`MockTransport`."""

    async def execute(  # type: ignore[override]
        self,
        action: RemoteAction,
        params: dict[str, Any],
        credential: str | None = None,
    ) -> dict[str, Any]:
        return self._respond(action, params, credential)

    async def close(self) -> None:  # type: ignore[override]
        self.closed = True


__all__ = [
    "MockTransport",
    "AsyncMockTransport",
    "MockCall",
    "MockResponse",
]
