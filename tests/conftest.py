"""Shared fixtures: in-memory platforms implementing the capability interfaces."""

from typing import Any

import pytest

from devops_actions.backend import Chat, CredentialStore, IssueTracker, SourceHost
from devops_actions.config import Settings
from devops_actions.context import ActionContext
from devops_actions.errors import CredentialsError
from devops_actions.models import (
    Assignee,
    Branch,
    Comparison,
    Commit,
    Credentials,
    Issue,
    PullRequest,
    Release,
    Repository,
)


class Recorder:
    """Keeps a log of the mutating calls made against a fake."""

    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []

    def record(self, *call: Any) -> None:
        self.calls.append(call)

    def called(self, name: str) -> list[tuple[Any, ...]]:
        return [call for call in self.calls if call[0] == name]


class FakeSourceHost(SourceHost, Recorder):
    """Source host holding a single organization in memory."""

    def __init__(self) -> None:
        Recorder.__init__(self)
        self.pull_requests: dict[int, PullRequest] = {}
        self.commits: dict[str, Commit] = {}
        self.branches: dict[str, Branch] = {}
        self.repositories: dict[str, Repository] = {}
        self.comparison = Comparison()
        self.open_pull_requests: list[PullRequest] = []
        self.rebase_error: Exception | None = None
        self._next_number = 100

    def get_pull_request(self, repo: str, number: int) -> PullRequest | None:
        return self.pull_requests.get(number)

    def get_commit(self, repo: str, sha: str) -> Commit | None:
        return self.commits.get(sha)

    def get_repository(self, repo: str) -> Repository:
        return self.repositories.get(repo) or Repository(name=repo, owner="octokit", default_branch="develop")

    def get_branch(self, repo: str, branch: str) -> Branch | None:
        return self.branches.get(branch)

    def add_labels(self, repo: str, number: int, labels: list[str]) -> None:
        self.record("add_labels", repo, number, labels)

    def set_labels(self, repo: str, number: int, labels: list[str]) -> None:
        self.record("set_labels", repo, number, labels)

    def assign_owners(self, repo: str, number: int, usernames: list[str]) -> None:
        self.record("assign_owners", repo, number, usernames)

    def create_branch(self, repo: str, base: str, branch: str, path: str, content: str, message: str) -> Branch:
        self.record("create_branch", repo, base, branch, path, content, message)
        created = Branch(name=branch, sha="c0ffee")
        self.branches[branch] = created
        return created

    def set_branch(self, repo: str, branch: str, sha: str) -> Branch:
        self.record("set_branch", repo, branch, sha)
        self.branches[branch] = Branch(name=branch, sha=sha)
        return self.branches[branch]

    def create_pull_request(
        self, repo: str, base: str, head: str, title: str, body: str, token: str | None = None
    ) -> PullRequest:
        self.record("create_pull_request", repo, base, head, title, body, token)
        pull_request = PullRequest(number=self._next_number, title=title, body=body, head_ref=head, base_ref=base)
        self.pull_requests[pull_request.number] = pull_request
        self._next_number += 1
        return pull_request

    def update_pull_request(
        self, repo: str, number: int, title: str | None = None, body: str | None = None
    ) -> PullRequest:
        self.record("update_pull_request", repo, number, title, body)
        current = self.pull_requests.get(number) or next(p for p in self.open_pull_requests if p.number == number)
        updated = PullRequest(
            number=number,
            title=title if title is not None else current.title,
            body=body if body is not None else current.body,
            head_ref=current.head_ref,
            base_ref=current.base_ref,
            labels=list(current.labels),
        )
        self.pull_requests[number] = updated
        return updated

    def list_open_pull_requests(self, repo: str, head: str | None = None) -> list[PullRequest]:
        return [p for p in self.open_pull_requests if head is None or p.head_ref == head]

    def compare_commits(self, repo: str, base: str, head: str) -> Comparison:
        self.record("compare_commits", repo, base, head)
        return self.comparison

    def create_release(self, repo: str, tag: str, name: str, body: str, target: str) -> Release:
        self.record("create_release", repo, tag, name, body, target)
        return Release(tag_name=tag, name=name, body=body)

    def rebase(self, owner: str, repo: str, branch: str, onto: str) -> None:
        self.record("rebase", owner, repo, branch, onto)
        if self.rebase_error is not None:
            raise self.rebase_error

    def pull_request_url(self, repo: str, number: int) -> str:
        return f"https://github.com/octokit/{repo}/pull/{number}"


class FakeIssueTracker(IssueTracker, Recorder):
    def __init__(self) -> None:
        Recorder.__init__(self)
        self.issues: dict[str, Issue] = {}
        self.linked_pull_requests: dict[str, list[int]] = {}

    def get_issue(self, key: str) -> Issue | None:
        return self.issues.get(key)

    def set_issue_status(self, issue_id: str, status: str) -> None:
        self.record("set_issue_status", issue_id, status)

    def get_pull_request_numbers(self, issue_id: str) -> list[int]:
        return self.linked_pull_requests.get(issue_id, [])


class FakeChat(Chat):
    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []
        self.error: Exception | None = None

    def send_message(self, chat_id: str, text: str) -> None:
        if self.error is not None:
            raise self.error
        self.messages.append((chat_id, text))


class FakeCredentialStore(CredentialStore):
    def __init__(self) -> None:
        self.people: dict[str, Credentials] = {}
        self.lookups: list[str] = []

    def fetch(self, lookup: str) -> Credentials:
        self.lookups.append(lookup)
        if lookup not in self.people:
            raise CredentialsError(f"Could not get credentials for the user {lookup}")
        return self.people[lookup]


@pytest.fixture
def settings() -> Settings:
    """Settings for an 'octokit' organization."""
    return Settings(
        github_organization="octokit",
        github_token="automation-token",
        github_write_user="devops-bot",
        jira_host="example.atlassian.net",
        jira_email="jira@example.com",
        jira_token="jira-token",
        slack_token="xoxb-token",
        credentials_api_prefix="https://users.example.com/api/private/credentials/",
        credentials_api_secret="secret",
    )


@pytest.fixture
def assignee_credentials() -> Credentials:
    return Credentials(
        email="dave.perrett@example.com",
        github_username="dperrett",
        github_token="my-github-token",
        slack_id="U0000000001",
    )


@pytest.fixture
def automation_credentials() -> Credentials:
    return Credentials(email="bot@example.com", github_username="devops-bot", slack_id="U0000000BOT")


@pytest.fixture
def pull_request() -> PullRequest:
    return PullRequest(
        number=12,
        title="[ISSUE-236] Fix the widget",
        body="[Jira Tech task](https://example.atlassian.net/browse/ISSUE-236)",
        head_ref="dave/issue-236-fix-the-widget",
        base_ref="develop",
        merged=True,
        html_url="https://github.com/octokit/webhooks/pull/12",
        author="dhh",
    )


@pytest.fixture
def issue() -> Issue:
    return Issue(
        id="10000",
        key="ISSUE-236",
        summary="Fix the widget",
        description="The widget is broken",
        status="In Progress",
        issue_type="Task",
        assignee=Assignee(display_name="Dave Perrett", email="dave.perrett@example.com"),
        repository="webhooks",
    )


@pytest.fixture
def context(settings: Settings, assignee_credentials: Credentials) -> ActionContext:
    """A context backed by empty in-memory platforms; only the assignee has credentials."""
    credentials = FakeCredentialStore()
    credentials.people[assignee_credentials.email] = assignee_credentials
    return ActionContext(
        settings=settings,
        github=FakeSourceHost(),
        jira=FakeIssueTracker(),
        slack=FakeChat(),
        credentials=credentials,
    )
