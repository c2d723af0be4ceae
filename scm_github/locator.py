"""
Repository identifier codec.

Two identifier surfaces are handled here:

- the *locator*, ``host:repoId:branch``, which stays stable when a repository
  is renamed or transferred because ``repoId`` is assigned by GitHub;
- the legacy *clone reference*, ``git@host:user/repo.git#branch``, which is
  what users type and what older pipelines stored.

Colons inside a locator segment are not escaped, so a branch containing ``:``
cannot be represented.
"""

import re
from dataclasses import dataclass

from scm_github.exceptions import InvalidReferenceError, MalformedLocatorError

DEFAULT_BRANCH = "master"

_SEPARATOR = ":"
_CLONE_REFERENCE = re.compile(r"^git@([^:/\s]+):([^/\s]+)/(\S+?)\.git(?:#(\S+))?$")


@dataclass(frozen=True)
class Locator:
    """Decoded ``host:repoId:branch`` locator."""

    host: str
    repo_id: str
    branch: str

    def __str__(self) -> str:
        return encode_locator(self.host, self.repo_id, self.branch)


@dataclass(frozen=True)
class CloneReference:
    """Parsed legacy clone reference."""

    host: str
    user: str
    repo: str
    branch: str

    @property
    def clone_url(self) -> str:
        return f"git@{self.host}:{self.user}/{self.repo}.git"

    def __str__(self) -> str:
        return f"{self.clone_url}#{self.branch}"


def decode_locator(locator: str) -> Locator:
    """
    Split a locator into its three segments.

    Raises:
        MalformedLocatorError: Unless there are exactly three non-empty segments
    """
    parts = locator.split(_SEPARATOR) if isinstance(locator, str) else []

    if len(parts) != 3 or not all(parts):
        raise MalformedLocatorError(locator)

    host, repo_id, branch = parts
    return Locator(host=host, repo_id=repo_id, branch=branch)


def encode_locator(host: str, repo_id: str | int, branch: str) -> str:
    """Build a locator string. Segments are trusted apart from being non-empty."""
    parts = [str(host), str(repo_id), str(branch)]

    if not all(parts):
        raise MalformedLocatorError(_SEPARATOR.join(parts))

    return _SEPARATOR.join(parts)


def parse_clone_reference(reference: str) -> CloneReference:
    """
    Parse ``git@host:user/repo.git[#branch]``.

    Host, user and repo are lowercased. The branch keeps its case and defaults
    to ``master``.

    Raises:
        InvalidReferenceError: If the whole string does not match the shape
    """
    matched = _CLONE_REFERENCE.match(reference) if isinstance(reference, str) else None

    if not matched:
        raise InvalidReferenceError(reference)

    host, user, repo, branch = matched.groups()

    return CloneReference(
        host=host.lower(),
        user=user.lower(),
        repo=repo.lower(),
        branch=branch or DEFAULT_BRANCH,
    )


def format_clone_reference(reference: str) -> str:
    """Normalize a clone reference, e.g. ``git@github.com:Org/Repo.git`` -> ``git@github.com:org/repo.git#master``."""
    return str(parse_clone_reference(reference))


__all__ = [
    "DEFAULT_BRANCH",
    "Locator",
    "CloneReference",
    "decode_locator",
    "encode_locator",
    "parse_clone_reference",
    "format_clone_reference",
]
