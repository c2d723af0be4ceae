"""Canonical webhook event models."""

from dataclasses import dataclass, field
from typing import Any, Literal, Union


@dataclass(frozen=True)
class RepoEvent:
    """A branch was pushed to."""

    branch: str
    sha: str
    checkout_url: str
    username: str
    action: Literal["push"] = "push"
    type: Literal["repo"] = field(default="repo", init=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "action": self.action,
            "branch": self.branch,
            "sha": self.sha,
            "checkoutUrl": self.checkout_url,
            "username": self.username,
        }


@dataclass(frozen=True)
class PullRequestEvent:
    """A pull request was opened, updated or closed."""

    action: Literal["opened", "synchronized", "closed"]
    branch: str  # base branch
    sha: str  # head commit
    checkout_url: str
    pr_num: int
    username: str
    type: Literal["pr"] = field(default="pr", init=False)

    @property
    def pr_ref(self) -> str:
        return f"{self.checkout_url}#pull/{self.pr_num}/merge"

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "action": self.action,
            "branch": self.branch,
            "sha": self.sha,
            "checkoutUrl": self.checkout_url,
            "prNum": self.pr_num,
            "prRef": self.pr_ref,
            "username": self.username,
        }


WebhookEvent = Union[RepoEvent, PullRequestEvent]
