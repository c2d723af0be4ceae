"""
Tests for the locator and clone reference codec.
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from scm_github.exceptions import InvalidReferenceError, MalformedLocatorError
from scm_github.locator import (
    Locator,
    decode_locator,
    encode_locator,
    format_clone_reference,
    parse_clone_reference,
)

segment_strategy = st.text(
    min_size=1,
    max_size=40,
    alphabet=st.characters(
        whitelist_categories=("L", "N"),
        whitelist_characters="-_./",
    ),
)


@given(host=segment_strategy, repo_id=segment_strategy, branch=segment_strategy)
@settings(max_examples=100)
def test_locator_round_trip(host: str, repo_id: str, branch: str) -> None:
    """
    For any colon-free, non-empty segments, decoding an encoded locator gives
    the segments back, and re-encoding gives the same string.
    """
    encoded = encode_locator(host, repo_id, branch)
    decoded = decode_locator(encoded)

    assert decoded == Locator(host=host, repo_id=repo_id, branch=branch)
    assert str(decoded) == encoded


@pytest.mark.parametrize(
    "locator",
    ["abc", "a:b", "", "a:b:c:d", ":b:c", "a::c", "a:b:"],
)
def test_decode_rejects_malformed_locators(locator: str) -> None:
    with pytest.raises(MalformedLocatorError) as exc_info:
        decode_locator(locator)

    assert exc_info.value.code == "MALFORMED_LOCATOR"
    assert exc_info.value.locator == locator


def test_decode_keeps_branch_case() -> None:
    assert decode_locator("github.com:1296269:Feature/X") == Locator(
        host="github.com", repo_id="1296269", branch="Feature/X"
    )


def test_encode_accepts_integer_repo_id() -> None:
    assert encode_locator("github.com", 1296269, "master") == "github.com:1296269:master"


def test_encode_rejects_empty_segment() -> None:
    with pytest.raises(MalformedLocatorError):
        encode_locator("github.com", "", "master")


class TestCloneReference:
    """Tests for parsing the legacy clone reference."""

    def test_defaults_branch_to_master(self) -> None:
        parsed = parse_clone_reference("git@github.com:org/repo.git")

        assert parsed.branch == "master"

    def test_lowercases_everything_but_branch(self) -> None:
        parsed = parse_clone_reference("git@github.com:Org/Repo.git#Feature")

        assert parsed.host == "github.com"
        assert parsed.user == "org"
        assert parsed.repo == "repo"
        assert parsed.branch == "Feature"

    def test_lowercases_host(self) -> None:
        parsed = parse_clone_reference("git@GitHub.Example.com:org/repo.git#main")

        assert parsed.host == "github.example.com"

    def test_branch_with_slashes(self) -> None:
        parsed = parse_clone_reference("git@github.com:org/repo.git#release/1.2")

        assert parsed.branch == "release/1.2"

    @pytest.mark.parametrize(
        "reference",
        [
            "foo",
            "",
            "https://github.com/org/repo.git",
            "git@github.com:org/repo",
            "git@github.com:repo.git",
            "git@github.com:org/repo.git#",
            "git@github.com:org/repo.git#branch with space",
            " git@github.com:org/repo.git",
        ],
    )
    def test_rejects_other_shapes(self, reference: str) -> None:
        with pytest.raises(InvalidReferenceError) as exc_info:
            parse_clone_reference(reference)

        assert exc_info.value.reference == reference

    def test_error_message_names_reference(self) -> None:
        with pytest.raises(InvalidReferenceError, match="Invalid scmUrl: foo"):
            parse_clone_reference("foo")


class TestFormatCloneReference:
    """Tests for clone reference normalization."""

    def test_adds_master_when_there_is_no_branch(self) -> None:
        assert (
            format_clone_reference("git@github.com:screwdriver-cd/scm-github.git")
            == "git@github.com:screwdriver-cd/scm-github.git#master"
        )

    def test_lowercases_and_adds_master(self) -> None:
        assert (
            format_clone_reference("git@github.com:Screwdriver-cd/scm-github.git")
            == "git@github.com:screwdriver-cd/scm-github.git#master"
        )

    def test_keeps_branch_case(self) -> None:
        assert (
            format_clone_reference("git@github.com:Screwdriver-cd/scm-github.git#Test")
            == "git@github.com:screwdriver-cd/scm-github.git#Test"
        )

    @given(branch=segment_strategy)
    @settings(max_examples=50)
    def test_idempotent(self, branch: str) -> None:
        once = format_clone_reference(f"git@github.com:Org/Repo.git#{branch}")

        assert format_clone_reference(once) == once
