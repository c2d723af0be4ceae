"""scm-github testing utilities.

Provides mock transports, payload builders and fixtures for testing code that
uses the adapter.
"""

from scm_github.testing.fixtures import (
    create_content_payload,
    create_mock_repository,
    create_pull_request_payload,
    create_push_payload,
    fast_retry_config,
    http_error,
)
from scm_github.testing.mock import (
    AsyncMockTransport,
    MockCall,
    MockResponse,
    MockTransport,
)

__all__ = [
    # Mock transports
    "MockTransport",
    "AsyncMockTransport",
    "MockCall",
    "MockResponse",
    # Helper functions
    "create_mock_repository",
    "create_content_payload",
    "create_push_payload",
    "create_pull_request_payload",
    "http_error",
    "fast_retry_config",
]
