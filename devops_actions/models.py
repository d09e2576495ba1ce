"""Data models for devops actions."""

import re
from dataclasses import dataclass, field
from typing import Any

# Check suite URLs look like https://api.github.com/repos/<owner>/<repo>/check-suites/<id>.
_REPOSITORY_URL_PATTERN = re.compile(r"^.+/repos/([^/]+)/([^/]+).*$")


@dataclass
class PullRequest:
    """A snapshot of a pull request at fetch time."""

    number: int
    title: str
    body: str = ""
    head_ref: str = ""
    base_ref: str = ""
    merged: bool = False
    html_url: str = ""
    labels: list[str] = field(default_factory=list)
    author: str | None = None
    state: str = "open"

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "PullRequest":
        """Build a pull request from the webhook/REST JSON representation."""
        return cls(
            number=int(data["number"]),
            title=data.get("title") or "",
            body=data.get("body") or "",
            head_ref=(data.get("head") or {}).get("ref", ""),
            base_ref=(data.get("base") or {}).get("ref", ""),
            merged=bool(data.get("merged")),
            html_url=data.get("html_url") or "",
            labels=[label["name"] for label in data.get("labels") or []],
            author=(data.get("user") or {}).get("login"),
            state=data.get("state") or "open",
        )


@dataclass
class Commit:
    """A single git commit."""

    sha: str
    message: str
    author: str | None = None


@dataclass
class Repository:
    """A source repository."""

    name: str
    owner: str
    default_branch: str = "develop"


@dataclass
class Branch:
    """A named git ref and the commit it points at."""

    name: str
    sha: str


@dataclass
class Release:
    """A published release."""

    tag_name: str
    name: str
    body: str = ""
    html_url: str = ""


@dataclass
class Comparison:
    """The commits that one ref has and another does not."""

    commits: list[Commit] = field(default_factory=list)
    total_commits: int = 0


@dataclass
class Assignee:
    """The person an issue is assigned to."""

    display_name: str
    email: str | None = None

    @property
    def lookup(self) -> str:
        """The value used to look up this person's credentials."""
        return self.email or self.display_name


@dataclass
class Issue:
    """A snapshot of a tracker issue."""

    id: str
    key: str
    summary: str = ""
    description: str = ""
    status: str = ""
    issue_type: str = ""
    assignee: Assignee | None = None
    subtasks: list[str] = field(default_factory=list)
    repository: str | None = None


@dataclass
class Credentials:
    """Identities of one person across GitHub, Slack and Jira."""

    email: str
    github_username: str
    github_token: str = ""
    slack_id: str = ""
    jira_account_id: str | None = None


@dataclass
class CheckSuiteEvent:
    """Sent by GitHub when a check suite completes."""

    repository: str
    conclusion: str | None
    app_name: str
    head_sha: str | None = None
    pull_request_numbers: list[int] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "CheckSuiteEvent":
        suite = payload["check_suite"]
        repository = (payload.get("repository") or {}).get("name")
        if not repository:
            repository = _REPOSITORY_URL_PATTERN.sub(r"\2", suite.get("url", ""))
        return cls(
            repository=repository,
            conclusion=suite.get("conclusion"),
            app_name=(suite.get("app") or {}).get("name", ""),
            head_sha=suite.get("after") or suite.get("head_sha"),
            pull_request_numbers=[int(pr["number"]) for pr in suite.get("pull_requests") or []],
        )


@dataclass
class PullRequestEvent:
    """Sent by GitHub when a pull request changes."""

    action: str
    repository: str
    owner: str
    pull_request: PullRequest

    @property
    def name(self) -> str:
        """Short name used in log messages, e.g. ``my-repo#12``."""
        return f"{self.repository}#{self.pull_request.number}"

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "PullRequestEvent":
        repository = payload["repository"]
        return cls(
            action=payload.get("action", ""),
            repository=repository["name"],
            owner=(repository.get("owner") or {}).get("login", ""),
            pull_request=PullRequest.from_payload(payload["pull_request"]),
        )


@dataclass
class TriggerEvent:
    """A manual trigger sent through a workflow dispatch."""

    name: str
    email: str
    param: str = ""

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "TriggerEvent":
        inputs = payload.get("inputs") or {}
        return cls(name=inputs.get("event", ""), email=inputs.get("email", ""), param=inputs.get("param", ""))
