"""
Pytest plugin for scm-github testing fixtures.

To use these fixtures in your tests, add this to your conftest.py:

    pytest_plugins = ["scm_github.testing.conftest"]
"""

from scm_github.testing.fixtures import (
    mock_transport,
    pull_request_payload,
    push_payload,
    sample_locator,
    sample_repository,
    scm,
)

__all__ = [
    "mock_transport",
    "scm",
    "sample_locator",
    "sample_repository",
    "push_payload",
    "pull_request_payload",
]
