"""Repository-related data models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RepoReference:
    """Human-facing repository reference resolved from a locator."""

    host: str
    user: str
    repo: str
    branch: str
    url: str

    @property
    def name(self) -> str:
        return f"{self.user}/{self.repo}"


@dataclass(frozen=True)
class Permissions:
    """A user's permissions on a repository."""

    admin: bool
    push: bool
    pull: bool


@dataclass(frozen=True)
class CommitInfo:
    """Commit metadata."""

    sha: str
    message: str
    author_login: str | None  # None when the author has no GitHub account
    url: str


@dataclass(frozen=True)
class UserInfo:
    """GitHub user profile."""

    login: str
    name: str | None
    avatar_url: str
    url: str
