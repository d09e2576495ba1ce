"""Runs whenever a check suite completes."""

import random

import structlog

from devops_actions.context import ActionContext
from devops_actions.decisions import decide_check_suite
from devops_actions.executor import Executor
from devops_actions.models import CheckSuiteEvent
from devops_actions.rules import extract_issue_key, extract_pull_request_number, positive_emoji

logger = structlog.get_logger()


def check_suite_completed(event: CheckSuiteEvent, context: ActionContext, rng: random.Random | None = None) -> None:
    """Label failing pull requests and tell the Jira assignee how their checks went.

    Args:
        event: The completed check suite
        context: Platform clients and settings
        rng: Random source for the celebration emoji
    """
    # We need to figure out what pull request this check suite is associated with.
    if not event.head_sha and not event.pull_request_numbers:
        logger.error("No commit or pull request associated with this check - giving up", repo=event.repository)
        return

    number = None
    if event.head_sha:
        logger.info("Fetching the commit", sha=event.head_sha, repo=event.repository)
        commit = context.github.get_commit(event.repository, event.head_sha)
        if commit is None:
            logger.error("Couldn't find the commit - giving up", sha=event.head_sha, repo=event.repository)
            return
        logger.info("Looking for an associated pull request number...")
        number = extract_pull_request_number(commit.message)

    if number is None and event.pull_request_numbers:
        number = event.pull_request_numbers[0]

    if number is None:
        logger.info("There are no pull requests associated with this check suite - ignoring", repo=event.repository)
        return

    pr_name = f"{event.repository}#{number}"
    logger.info("Fetching the pull request", pull_request=pr_name)
    pull_request = context.github.get_pull_request(event.repository, number)
    if pull_request is None:
        logger.error("Could not fetch the pull request", pull_request=pr_name)
        return

    logger.info("Getting the Jira key from the pull request", pull_request=pr_name)
    issue_key = extract_issue_key(pull_request.title, pull_request.body)
    if issue_key is None:
        logger.info("Couldn't extract a Jira issue key - ignoring", pull_request=pr_name)
        return

    logger.info("Fetching the Jira issue", issue_key=issue_key)
    issue = context.jira.get_issue(issue_key)
    if issue is None:
        logger.info("Couldn't find a Jira issue - ignoring", pull_request=pr_name, issue_key=issue_key)
        return

    logger.info("The suite has completed", conclusion=event.conclusion, check=event.app_name, status=issue.status)
    commands = decide_check_suite(
        context.settings,
        event.repository,
        event.app_name,
        event.conclusion,
        pull_request,
        issue,
        emoji=positive_emoji(rng),
    )
    Executor(context).execute(commands)
