"""Runs whenever a draft pull request is marked as ready for review."""

import structlog

from devops_actions.context import ActionContext
from devops_actions.decisions import decide_ready_for_review
from devops_actions.executor import Executor
from devops_actions.models import PullRequestEvent
from devops_actions.rules import extract_issue_key

logger = structlog.get_logger()


def pull_request_ready_for_review(event: PullRequestEvent, context: ActionContext) -> None:
    pull_request = event.pull_request

    logger.info("Getting the Jira key from the pull request", pull_request=event.name)
    issue_key = extract_issue_key(pull_request.title, pull_request.body)
    if issue_key is None:
        logger.info("Couldn't extract a Jira issue key - ignoring", pull_request=event.name)
        return

    logger.info("Fetching the Jira issue", issue_key=issue_key)
    issue = context.jira.get_issue(issue_key)
    if issue is None:
        logger.info("Couldn't find a Jira issue - ignoring", pull_request=event.name, issue_key=issue_key)
        return

    commands = decide_ready_for_review(context.settings, event.repository, pull_request, issue)
    if not commands:
        logger.info("Jira issue is already in review - ignoring", issue_key=issue_key, status=issue.status)
        return
    Executor(context).execute(commands)
