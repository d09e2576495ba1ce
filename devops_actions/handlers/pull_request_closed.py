"""Runs whenever a pull request is closed (not necessarily merged)."""

import structlog

from devops_actions.context import ActionContext
from devops_actions.decisions import decide_pull_request_closed, decide_release_tag
from devops_actions.executor import Executor
from devops_actions.models import PullRequestEvent
from devops_actions.rules import extract_issue_key

logger = structlog.get_logger()


def pull_request_closed(event: PullRequestEvent, context: ActionContext) -> None:
    """Tag merged releases and mark the Jira issue of a merged pull request as validated."""
    settings = context.settings
    pull_request = event.pull_request
    executor = Executor(context)

    if not pull_request.merged:
        logger.info("Pull request is not merged - ignoring", pull_request=event.name)
        return

    if pull_request.head_ref == settings.release_branch:
        logger.info("Pull request looks like a release - creating a release tag...", pull_request=event.name)
        master = context.github.get_master_branch(event.repository, settings.master_branches)
        if master is None:
            logger.info(
                "Master branch could not be found - no tag will be created",
                pull_request=event.name,
                candidates=list(settings.master_branches),
            )
        else:
            release_commands = decide_release_tag(settings, event.repository, pull_request, master.name)
            if not release_commands:
                logger.info(
                    "Couldn't extract the tag name and release name from the pull request title - no tag will be created",
                    pull_request=event.name,
                    title=pull_request.title,
                )
            executor.execute(release_commands)

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

    commands = decide_pull_request_closed(settings, issue)
    if not commands:
        logger.info("Jira issue is already validated - ignoring", issue_key=issue_key, status=issue.status)
        return
    executor.execute(commands)
