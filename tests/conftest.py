"""Shared fixtures for the scm-github test suite."""

from scm_github.testing.fixtures import (  # noqa: F401
    mock_transport,
    pull_request_payload,
    push_payload,
    sample_locator,
    sample_repository,
    scm,
)
