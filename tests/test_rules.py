"""Tests for the string matching rules."""

import random
import re
from datetime import datetime

import pytest

from devops_actions.rules import (
    POSITIVE_EMOJI,
    RELEASE_ADJECTIVES,
    RELEASE_ANIMALS,
    extract_issue_key,
    extract_pull_request_number,
    first_name_from_email,
    parameterize,
    parse_release_title,
    positive_emoji,
    release_date_token,
    release_name,
    release_notes_from_body,
)


@pytest.mark.parametrize(
    ("title", "body", "expected"),
    [
        ("[ISSUE-236] Fix the widget", "", "ISSUE-236"),
        ("Fix the widget [STUDIO2-7]", None, "STUDIO2-7"),
        ("Fix the widget", "[Jira Tech task](https://example.atlassian.net/browse/ISSUE-236)", "ISSUE-236"),
        ("Fix the widget", "See ISSUE-236", None),
        (None, None, None),
        ("[issue-236] lowercase keys are not keys", "", None),
    ],
)
def test_extract_issue_key(title: str | None, body: str | None, expected: str | None) -> None:
    """Test finding issue keys in pull request titles and bodies."""
    assert extract_issue_key(title, body) == expected


def test_extract_issue_key_prefers_title() -> None:
    """Test that the body is only searched when the title has no key."""
    body = "https://example.atlassian.net/browse/OTHER-1"
    assert extract_issue_key("[ISSUE-236] Fix the widget", body) == "ISSUE-236"


@pytest.mark.parametrize(
    ("message", "expected"),
    [
        ("[ISSUE-236] [#12] Fix the widget", 12),
        ("Merge pull request #34 from octokit/dave/issue-236", 34),
        ("Fix the widget", None),
        ("", None),
    ],
)
def test_extract_pull_request_number(message: str, expected: int | None) -> None:
    """Test finding the pull request number in a commit message."""
    assert extract_pull_request_number(message) == expected


def test_parameterize() -> None:
    """Test turning text into branch-safe slugs."""
    assert parameterize("Fix the Widget!") == "fix-the-widget"
    assert parameterize("  Ünïcödé   text ") == "unicode-text"
    assert parameterize("ISSUE-236") == "issue-236"
    assert parameterize("a/b c", separator="_") == "a_b_c"


@pytest.mark.parametrize(
    "text",
    ["Fix the Widget!", "--already-a-slug--", "Crème brûlée & co.", "", "   ", "STUDIO-232 Add [Epic] support/v2"],
)
def test_parameterize_is_idempotent(text: str) -> None:
    """Test that slugs are stable and only contain safe characters."""
    slug = parameterize(text)
    assert parameterize(slug) == slug
    assert re.fullmatch(r"([a-z0-9]+(-[a-z0-9]+)*)?", slug)


def test_first_name_from_email() -> None:
    """Test taking the first name from an email address."""
    assert first_name_from_email("dave.perrett@example.com") == "dave"
    assert first_name_from_email("dave@example.com") == "dave"


def test_parse_release_title() -> None:
    """Test splitting a release candidate title."""
    assert parse_release_title("Release Candidate 2021-01-12-0426 (Energetic Eagle)") == (
        "2021-01-12-0426",
        "Energetic Eagle",
    )
    assert parse_release_title("Release 2021-01-12") is None
    assert parse_release_title(None) is None


def test_release_notes_from_body() -> None:
    """Test that the heading line is dropped from the release notes."""
    assert release_notes_from_body("## Release\nline one\nline two") == "line one\nline two"
    assert release_notes_from_body("") == ""


def test_release_date_token() -> None:
    """Test the date format used in release titles and tags."""
    assert release_date_token(datetime(2021, 1, 12, 4, 26)) == "2021-01-12-0426"


def test_release_name_is_alliterative() -> None:
    """Test that both words of a release name start with the same letter."""
    rng = random.Random(42)
    for _ in range(20):
        adjective, animal = release_name(rng).split(" ")
        letter = adjective[0].lower()
        assert adjective in RELEASE_ADJECTIVES[letter]
        assert animal in RELEASE_ANIMALS[letter]


def test_positive_emoji() -> None:
    """Test picking a celebration emoji."""
    assert positive_emoji(random.Random(1)) in POSITIVE_EMOJI
