"""Creates a draft pull request for a Jira issue, on request.

Triggered through a workflow dispatch with the inputs
``{"event": "createPullRequestForJiraIssue", "email": "<requester>", "param": "<ISSUE-KEY>"}``.
"""

from datetime import datetime, timezone

import structlog

from devops_actions.commands import SendMessage
from devops_actions.context import ActionContext
from devops_actions.decisions import (
    branch_name_for_issue,
    decide_pull_request_for_issue,
    issue_link,
    reject_issue_for_pull_request,
)
from devops_actions.executor import Executor
from devops_actions.templates import PULL_REQUEST_FOR_ISSUE, render

logger = structlog.get_logger()


def _tell_requester(context: ActionContext, email: str, message: str) -> None:
    credentials = context.credentials.fetch(email)
    Executor(context).run(SendMessage(credentials.slack_id, message))
    logger.error(message)


def create_pull_request_for_issue(
    email: str,
    issue_key: str,
    context: ActionContext,
    now: datetime | None = None,
) -> None:
    """Create (or find) the pull request for an issue and hand it to the assignee.

    Args:
        email: Email address of the person who asked for the pull request
        issue_key: Key of the Jira issue the pull request is for
        context: Platform clients and settings
        now: Timestamp written to the seed file
    """
    settings = context.settings
    executor = Executor(context)

    logger.info("Fetching the Jira issue details...", issue_key=issue_key)
    issue = context.jira.get_issue(issue_key)
    if issue is None:
        _tell_requester(context, email, f"Issue {issue_key} could not be found, so no pull request was created")
        return

    issue_url = settings.issue_url(issue.key)
    logger.info("The Jira URL is known", url=issue_url)

    logger.info("Finding out who the pull request should belong to...")
    if issue.assignee is None:
        message = f"Issue {issue_link(issue_url, issue.key)} is not assigned to anyone, so no pull request was created"
        _tell_requester(context, email, message)
        return

    credentials = context.credentials.fetch(issue.assignee.lookup)
    branch = branch_name_for_issue(credentials, issue)
    logger.info("The pull request will be assigned", username=credentials.github_username, branch=branch)

    rejection = reject_issue_for_pull_request(issue, issue_url)
    if rejection is not None:
        if issue.subtasks:
            logger.info(rejection)
        else:
            logger.error(rejection)
        executor.run(SendMessage(credentials.slack_id, rejection))
        return

    logger.info("Checking if there is an open pull request for this issue...")
    repository = context.github.get_repository(issue.repository)
    numbers = context.jira.get_pull_request_numbers(issue.id)

    if numbers:
        number = numbers[0]
        logger.info("Pull request already exists", repo=repository.name, number=number)
    else:
        logger.info("There is no open pull request for this issue")
        executor.run(SendMessage(credentials.slack_id, f"Creating a pull request for {issue_link(issue_url, issue.key)}..."))

        base = repository.default_branch
        logger.info("Checking if the branch already exists...", branch=branch)
        if context.github.get_branch(repository.name, branch) is None:
            logger.info("The branch does not exist yet: creating a new branch...", branch=branch)
            created_at = (now or datetime.now(timezone.utc)).isoformat()
            context.github.create_branch(
                repository.name,
                base,
                branch,
                f".meta/{issue.key}.md",
                f"{issue_url}\n\nCreated at {created_at}",
                f"[{issue.key}] [skip ci] Create pull request.",
            )

        logger.info("Creating the pull request...")
        body = render(
            PULL_REQUEST_FOR_ISSUE,
            summary=issue.summary,
            description=issue.description,
            issue_type=issue.issue_type,
            issue_url=issue_url,
        )
        pull_request = context.github.create_pull_request(
            repository.name,
            base,
            branch,
            f"[{issue.key}] {issue.summary}",
            body,
            token=credentials.github_token or None,
        )
        number = pull_request.number
        logger.info("Created pull request", repo=repository.name, number=number)

    url = context.github.pull_request_url(repository.name, number)
    executor.execute(
        decide_pull_request_for_issue(settings, repository.name, number, url, issue, credentials, branch)
    )
    logger.info("Finished creating pull request", url=url, issue_key=issue.key)
