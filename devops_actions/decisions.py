"""Pure decision rules.

Each function takes views that a handler has already fetched and returns the
commands the handler should carry out. Nothing here talks to the network.
"""

from devops_actions.commands import (
    AddLabels,
    AssignOwners,
    Command,
    CreateRelease,
    NotifyUser,
    RebaseBranch,
    SendMessage,
    SetIssueStatus,
    SetLabels,
)
from devops_actions.config import Settings
from devops_actions.models import Credentials, Issue, PullRequest, PullRequestEvent
from devops_actions.rules import (
    first_name_from_email,
    parameterize,
    parse_release_title,
    release_notes_from_body,
)


def check_suite_message(
    settings: Settings,
    check_name: str,
    conclusion: str | None,
    pull_request: PullRequest,
    emoji: str = "",
) -> str | None:
    """The chat message for a finished check suite, or None if nobody needs to know."""
    link = f"*<{pull_request.html_url}|{pull_request.title}>*"
    if conclusion == "failure":
        return f"Check suite _*{check_name}*_ failed for {link}"
    if conclusion == "success":
        # These checks are expected to pass every time: we only care when they fail.
        if check_name in settings.suppressed_checks:
            return None
        return f"Check suite _*{check_name}*_ passed for {link} {emoji}".rstrip()
    return None


def decide_check_suite(
    settings: Settings,
    repo: str,
    check_name: str,
    conclusion: str | None,
    pull_request: PullRequest,
    issue: Issue,
    emoji: str = "",
) -> list[Command]:
    commands: list[Command] = []
    if conclusion == "failure":
        commands.append(AddLabels(repo, pull_request.number, [settings.has_issues_label]))

    message = check_suite_message(settings, check_name, conclusion, pull_request, emoji)
    if issue.assignee is not None and message is not None:
        commands.append(NotifyUser(issue.assignee.lookup, message, skip_username=settings.github_write_user))
    return commands


def decide_release_tag(settings: Settings, repo: str, pull_request: PullRequest, target: str) -> list[Command]:
    """Tag a release when a release candidate pull request is merged.

    Returns no commands when the pull request is not a release candidate, or when its
    title does not follow the 'Release Candidate <date> (<name>)' pattern.
    """
    if not pull_request.merged or pull_request.head_ref != settings.release_branch:
        return []
    parsed = parse_release_title(pull_request.title)
    if parsed is None:
        return []
    date_token, name = parsed
    return [
        CreateRelease(
            repo=repo,
            tag=f"v{date_token}",
            name=name,
            body=release_notes_from_body(pull_request.body),
            target=target,
        )
    ]


def decide_issue_status(issue: Issue, status: str) -> list[Command]:
    if issue.status == status:
        return []
    return [SetIssueStatus(issue.id, issue.key, status)]


def decide_pull_request_closed(settings: Settings, issue: Issue) -> list[Command]:
    return decide_issue_status(issue, settings.status_validated)


def decide_ready_for_review(settings: Settings, repo: str, pull_request: PullRequest, issue: Issue) -> list[Command]:
    status_commands = decide_issue_status(issue, settings.status_tech_review)
    if not status_commands:
        return []
    return [AddLabels(repo, pull_request.number, [settings.please_review_label]), *status_commands]


def is_epic(settings: Settings, pull_request: PullRequest) -> bool:
    return pull_request.title.startswith(settings.epic_title_prefix)


def decide_rebase_epic(settings: Settings, event: PullRequestEvent) -> list[Command]:
    pull_request = event.pull_request
    if not is_epic(settings, pull_request):
        return []
    return [
        RebaseBranch(
            owner=event.owner,
            repo=event.repository,
            number=pull_request.number,
            branch=pull_request.head_ref,
            onto=pull_request.base_ref,
            conflict_labels=[settings.has_conflicts_label],
        )
    ]


def branch_name_for_issue(credentials: Credentials, issue: Issue) -> str:
    """e.g. 'dave/studio-232-add-a-widget'."""
    owner = parameterize(first_name_from_email(credentials.email))
    return f"{owner}/{parameterize(issue.key)}-{parameterize(issue.summary)}"


def issue_link(issue_url: str, issue_key: str) -> str:
    return f"<{issue_url}|{issue_key}>"


def reject_issue_for_pull_request(issue: Issue, issue_url: str) -> str | None:
    """Why a pull request cannot be created for this issue, or None if it can."""
    link = issue_link(issue_url, issue.key)
    if issue.subtasks:
        return f"Issue {link} has subtasks, so no pull request was created"
    if not issue.repository:
        return f"No repository is set for issue {link}, so no pull request was created"
    return None


def pull_request_ready_message(url: str, number: int, issue_key: str, branch: str) -> str:
    return (
        f"Here's your pull request: {url}\n"
        f"Please prefix your commits with `[#{number}] [{issue_key}]`\n\n"
        f"Checkout the new branch with:\n"
        f"`git checkout --track origin/{branch}`"
    )


def decide_pull_request_for_issue(
    settings: Settings,
    repo: str,
    number: int,
    url: str,
    issue: Issue,
    credentials: Credentials,
    branch: str,
) -> list[Command]:
    """Label, assign and announce a pull request created (or found) for an issue."""
    return [
        AddLabels(repo, number, [settings.in_progress_label]),
        AssignOwners(repo, number, [credentials.github_username]),
        SendMessage(credentials.slack_id, pull_request_ready_message(url, number, issue.key, branch)),
    ]


def release_pull_request_title(date_token: str, name: str) -> str:
    return f"Release Candidate {date_token} ({name})"


def decide_release_pull_request(
    settings: Settings,
    repo: str,
    pull_request: PullRequest,
    credentials: Credentials,
    url: str,
) -> list[Command]:
    commands: list[Command] = [AssignOwners(repo, pull_request.number, [credentials.github_username])]

    wanted = [settings.in_progress_label, settings.release_label]
    if any(label not in pull_request.labels for label in wanted):
        labels = list(pull_request.labels) + [label for label in wanted if label not in pull_request.labels]
        commands.append(SetLabels(repo, pull_request.number, labels))

    commands.append(SendMessage(credentials.slack_id, f"Here's your release pull request: {url}"))
    return commands
