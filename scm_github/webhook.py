"""
Webhook event normalizer.

Turns a GitHub ``push`` or ``pull_request`` delivery into a canonical
:class:`RepoEvent` or :class:`PullRequestEvent`. The event kind comes from the
``X-GitHub-Event`` header and is matched exactly; nothing else is handled.
"""

from collections.abc import Mapping
from typing import Any

from scm_github.exceptions import MalformedPayloadError, UnsupportedEventError
from scm_github.types.events import PullRequestEvent, RepoEvent, WebhookEvent

EVENT_HEADER = "x-github-event"
BRANCH_PREFIX = "refs/heads/"

# Pull request actions that start or refresh work. Every other action,
# including ones GitHub adds later, is treated as a close.
_PR_ACTIONS = {
    "opened": "opened",
    "synchronize": "synchronized",
}
_PR_DEFAULT_ACTION = "closed"


def _reach(payload: Mapping[str, Any], path: str, event_kind: str) -> Any:
    """Follow a dotted path, raising MalformedPayloadError if any hop is missing."""
    node: Any = payload
    for key in path.split("."):
        if not isinstance(node, Mapping) or node.get(key) is None:
            raise MalformedPayloadError(event_kind, path)
        node = node[key]
    return node


def _normalize_push(payload: Mapping[str, Any]) -> RepoEvent:
    ref = _reach(payload, "ref", "push")
    if not isinstance(ref, str):
        raise MalformedPayloadError("push", "ref")
    branch = ref[len(BRANCH_PREFIX):] if ref.startswith(BRANCH_PREFIX) else ref

    return RepoEvent(
        branch=branch,
        sha=_reach(payload, "after", "push"),
        checkout_url=_reach(payload, "repository.ssh_url", "push"),
        username=_reach(payload, "sender.login", "push"),
    )


def _normalize_pull_request(payload: Mapping[str, Any]) -> PullRequestEvent:
    kind = "pull_request"
    action = _reach(payload, "action", kind)
    if not isinstance(action, str):
        raise MalformedPayloadError(kind, "action")
    number = _reach(payload, "pull_request.number", kind)
    if isinstance(number, bool) or not isinstance(number, int):
        raise MalformedPayloadError(kind, "pull_request.number")

    return PullRequestEvent(
        action=_PR_ACTIONS.get(action, _PR_DEFAULT_ACTION),
        branch=_reach(payload, "pull_request.base.ref", kind),
        sha=_reach(payload, "pull_request.head.sha", kind),
        checkout_url=_reach(payload, "pull_request.base.repo.ssh_url", kind),
        pr_num=number,
        username=_reach(payload, "sender.login", kind),
    )


_NORMALIZERS = {
    "push": _normalize_push,
    "pull_request": _normalize_pull_request,
}


def normalize(event_kind: str, payload: Mapping[str, Any]) -> WebhookEvent:
    """
    Normalize a webhook payload.

    Args:
        event_kind: The ``X-GitHub-Event`` value, "push" or "pull_request"
        payload: Decoded JSON body

    Returns:
        RepoEvent for pushes, PullRequestEvent for pull requests

    Raises:
        UnsupportedEventError: For any other event kind (payload is not read)
        MalformedPayloadError: If a required field is missing
    """
    normalizer = _NORMALIZERS.get(event_kind)
    if normalizer is None:
        raise UnsupportedEventError(event_kind)

    return normalizer(payload)


def parse_hook(
    headers: Mapping[str, str], payload: Mapping[str, Any]
) -> WebhookEvent:
    """Read the event kind from the request headers and normalize ``payload``."""
    event_kind = next(
        (value for key, value in headers.items() if key.lower() == EVENT_HEADER),
        None,
    )
    if event_kind is None:
        raise UnsupportedEventError(None)

    return normalize(event_kind, payload)


__all__ = ["normalize", "parse_hook", "EVENT_HEADER"]
