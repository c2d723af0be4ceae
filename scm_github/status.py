"""Commit status parameters derived from a build status."""

from typing import Any

STATE_MAP = {
    "SUCCESS": "success",
    "RUNNING": "pending",
    "QUEUED": "pending",
}
DEFAULT_STATE = "failure"

DESCRIPTION_MAP = {
    "SUCCESS": "Everything looks good!",
}
DEFAULT_DESCRIPTION = "Did not work as expected."


def map_state(build_status: str) -> str:
    """``SUCCESS`` -> success, ``RUNNING``/``QUEUED`` -> pending, anything else -> failure."""
    return STATE_MAP.get(build_status, DEFAULT_STATE)


def describe(build_status: str) -> str:
    return DESCRIPTION_MAP.get(build_status, DEFAULT_DESCRIPTION)


def status_context(product: str, job_name: str | None = None) -> str:
    """``product`` or ``product/job_name``."""
    return f"{product}/{job_name}" if job_name else product


def build_status_params(
    user: str,
    repo: str,
    sha: str,
    build_status: str,
    product: str,
    job_name: str | None = None,
    url: str | None = None,
) -> dict[str, Any]:
    """
    Params for the ``CREATE_STATUS`` action.

    Args:
        user: Repository owner
        repo: Repository name
        sha: Commit to decorate
        build_status: Build status enum value (SUCCESS, RUNNING, QUEUED, FAILURE, ...)
        product: Status context prefix
        job_name: Job name appended to the context (optional)
        url: Build log URL, sent as ``target_url`` (optional)
    """
    params: dict[str, Any] = {
        "user": user,
        "repo": repo,
        "sha": sha,
        "state": map_state(build_status),
        "context": status_context(product, job_name),
        "description": describe(build_status),
    }

    if url:
        params["target_url"] = url

    return params
