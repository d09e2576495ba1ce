"""Tests for the create release pull request trigger."""

import random
from datetime import datetime, timezone

import pytest

from devops_actions.context import ActionContext
from devops_actions.errors import ActionError
from devops_actions.handlers import create_release_pull_request
from devops_actions.models import Branch, Comparison, Commit, PullRequest
from devops_actions.rules import release_name

NOW = datetime(2021, 1, 12, 4, 26, tzinfo=timezone.utc)
EMAIL = "dave.perrett@example.com"
RELEASE_BRANCH = "devops-bot/release-candidate"


@pytest.fixture
def repository(context: ActionContext) -> ActionContext:
    """A repository where develop is two commits ahead of master."""
    context.github.branches["develop"] = Branch(name="develop", sha="d3v")
    context.github.branches["master"] = Branch(name="master", sha="m4s")
    context.github.comparison = Comparison(
        commits=[
            Commit(sha="a1", message="[ISSUE-236] [#12] Fix the widget\n\nMore details", author="dhh"),
            Commit(sha="b2", message="Bump version"),
        ],
        total_commits=2,
    )
    return context


def test_creates_release_pull_request(repository: ActionContext) -> None:
    """Test opening a new release candidate."""
    create_release_pull_request(EMAIL, "webhooks", repository, now=NOW, rng=random.Random(5))

    name = release_name(random.Random(5))
    assert repository.github.called("compare_commits") == [("compare_commits", "webhooks", "master", "develop")]
    assert repository.github.called("set_branch") == [("set_branch", "webhooks", RELEASE_BRANCH, "d3v")]

    (_, repo, base, head, title, body, token) = repository.github.called("create_pull_request")[0]
    assert (repo, base, head, token) == ("webhooks", "master", RELEASE_BRANCH, None)
    assert title == f"Release Candidate 2021-01-12-0426 ({name})"
    assert body.startswith(f"## Release Candidate 2021-01-12-0426 ({name})\n")
    assert "- [ISSUE-236] [#12] Fix the widget (@dhh)\n" in body
    assert "- Bump version\n" in body
    assert "More details" not in body

    assert repository.github.called("assign_owners") == [("assign_owners", "webhooks", 100, ["dperrett"])]
    assert repository.github.called("set_labels") == [("set_labels", "webhooks", 100, ["in-progress", "release"])]
    assert repository.slack.messages == [
        ("U0000000001", "Here's your release pull request: https://github.com/octokit/webhooks/pull/100")
    ]


def test_updates_existing_release_pull_request(repository: ActionContext) -> None:
    """Test refreshing the notes of an open release candidate, keeping its name."""
    repository.github.open_pull_requests.append(
        PullRequest(
            number=40,
            title="Release Candidate 2021-01-10-0900 (Brave Badger)",
            head_ref=RELEASE_BRANCH,
            base_ref="master",
            labels=["release", "in-progress"],
        )
    )

    create_release_pull_request(EMAIL, "webhooks", repository, now=NOW)

    assert repository.github.called("create_pull_request") == []
    (_, repo, number, title, body) = repository.github.called("update_pull_request")[0]
    assert (repo, number, title) == ("webhooks", 40, None)
    assert body.startswith("## Release Candidate 2021-01-10-0900 (Brave Badger)\n")
    assert repository.github.called("set_labels") == []
    assert repository.slack.messages[-1][1].endswith("/pull/40")


def test_nothing_to_release(repository: ActionContext) -> None:
    """Test that an up to date master produces a message and nothing else."""
    repository.github.comparison = Comparison()

    create_release_pull_request(EMAIL, "webhooks", repository, now=NOW)

    assert repository.github.called("set_branch") == []
    assert repository.github.called("create_pull_request") == []
    assert repository.slack.messages == [
        ("U0000000001", "Branch 'master' already contains the latest release - nothing to do")
    ]


def test_main_branch_fallback(repository: ActionContext) -> None:
    """Test that repositories using 'main' are released to 'main'."""
    del repository.github.branches["master"]
    repository.github.branches["main"] = Branch(name="main", sha="m4s")

    create_release_pull_request(EMAIL, "webhooks", repository, now=NOW, rng=random.Random(5))

    assert repository.github.called("compare_commits") == [("compare_commits", "webhooks", "main", "develop")]
    assert repository.github.called("create_pull_request")[0][2] == "main"


def test_creation_failure_is_reported(repository: ActionContext, monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that the requester hears about a failed creation and the run still fails."""

    def fail(*args: object, **kwargs: object) -> None:
        raise ActionError("Validation Failed")

    monkeypatch.setattr(repository.github, "create_pull_request", fail)

    with pytest.raises(ActionError, match="Validation Failed"):
        create_release_pull_request(EMAIL, "webhooks", repository, now=NOW)

    assert repository.slack.messages == [
        (
            "U0000000001",
            "An unknown error occurred while creating a release pull request for repository 'webhooks'",
        )
    ]
    assert repository.github.called("assign_owners") == []


def test_missing_develop_branch(repository: ActionContext) -> None:
    """Test giving up when the repository has no develop branch."""
    del repository.github.branches["develop"]

    create_release_pull_request(EMAIL, "webhooks", repository, now=NOW)

    assert repository.github.calls == []
    assert repository.slack.messages == [
        ("U0000000001", "Branch 'develop' could not be found for repository webhooks - giving up")
    ]


def test_missing_master_branch(repository: ActionContext) -> None:
    """Test giving up when the repository has no production branch."""
    del repository.github.branches["master"]

    create_release_pull_request(EMAIL, "webhooks", repository, now=NOW)

    assert repository.github.calls == []
    assert repository.slack.messages == [
        ("U0000000001", "Master branch could not be found for repository webhooks - giving up")
    ]
