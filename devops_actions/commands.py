"""Side effects a decision can ask for.

Decision functions return lists of these; the executor performs them.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class AddLabels:
    repo: str
    number: int
    labels: list[str]


@dataclass(frozen=True)
class SetLabels:
    repo: str
    number: int
    labels: list[str]


@dataclass(frozen=True)
class AssignOwners:
    repo: str
    number: int
    usernames: list[str]


@dataclass(frozen=True)
class SetIssueStatus:
    issue_id: str
    issue_key: str
    status: str


@dataclass(frozen=True)
class CreateRelease:
    repo: str
    tag: str
    name: str
    body: str
    target: str


@dataclass(frozen=True)
class SendMessage:
    """Message a person whose chat id is already known."""

    chat_id: str
    text: str


@dataclass(frozen=True)
class NotifyUser:
    """Message a person we only know by email or display name.

    Credential lookup and delivery failures are logged, never raised. No message is
    sent when the person resolves to ``skip_username`` on GitHub.
    """

    lookup: str
    text: str
    skip_username: str | None = None


@dataclass(frozen=True)
class RebaseBranch:
    owner: str
    repo: str
    number: int
    branch: str
    onto: str
    # Added to the pull request when the rebase stops on a conflict.
    conflict_labels: list[str] = field(default_factory=list)


Command = AddLabels | SetLabels | AssignOwners | SetIssueStatus | CreateRelease | SendMessage | NotifyUser | RebaseBranch
