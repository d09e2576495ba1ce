"""Carries out the commands returned by the decision rules."""

from collections.abc import Iterable

import structlog

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
from devops_actions.context import ActionContext
from devops_actions.errors import RebaseConflictError

logger = structlog.get_logger()


class Executor:
    """Performs commands against the platform clients, in order."""

    def __init__(self, context: ActionContext) -> None:
        self.context = context

    def execute(self, commands: Iterable[Command]) -> None:
        for command in commands:
            self.run(command)

    def run(self, command: Command) -> None:
        """Perform a single command.

        Errors from the platforms propagate, except for NotifyUser which only logs them.
        """
        github = self.context.github
        if isinstance(command, AddLabels):
            logger.info("Adding labels", repo=command.repo, number=command.number, labels=command.labels)
            github.add_labels(command.repo, command.number, command.labels)
        elif isinstance(command, SetLabels):
            logger.info("Setting labels", repo=command.repo, number=command.number, labels=command.labels)
            github.set_labels(command.repo, command.number, command.labels)
        elif isinstance(command, AssignOwners):
            logger.info("Assigning owners", repo=command.repo, number=command.number, usernames=command.usernames)
            github.assign_owners(command.repo, command.number, command.usernames)
        elif isinstance(command, SetIssueStatus):
            logger.info("Moving Jira issue", issue_key=command.issue_key, status=command.status)
            self.context.jira.set_issue_status(command.issue_id, command.status)
        elif isinstance(command, CreateRelease):
            logger.info("Creating release", repo=command.repo, tag=command.tag, name=command.name)
            github.create_release(command.repo, command.tag, command.name, command.body, command.target)
            logger.info("Created the release", repo=command.repo, tag=command.tag)
        elif isinstance(command, SendMessage):
            logger.info("Sending a Slack message", chat_id=command.chat_id)
            self.context.slack.send_message(command.chat_id, command.text)
        elif isinstance(command, NotifyUser):
            self._notify_user(command)
        elif isinstance(command, RebaseBranch):
            self._rebase(command)
        else:
            raise TypeError(f"Unknown command: {command!r}")

    def _notify_user(self, command: NotifyUser) -> None:
        logger.info("Sending a Slack message to the Jira assignee...")
        try:
            credentials = self.context.credentials.fetch(command.lookup)
            if command.skip_username and credentials.github_username == command.skip_username:
                logger.info("Not messaging the automation user", username=credentials.github_username)
                return
            self.context.slack.send_message(credentials.slack_id, command.text)
        except Exception as e:
            logger.error("Failed to notify user", lookup=command.lookup, error=str(e))

    def _rebase(self, command: RebaseBranch) -> None:
        logger.info("Rebasing", repo=command.repo, branch=command.branch, onto=command.onto)
        try:
            self.context.github.rebase(command.owner, command.repo, command.branch, command.onto)
        except RebaseConflictError as e:
            logger.warning("Rebase stopped on a conflict", repo=command.repo, number=command.number, error=str(e))
            if command.conflict_labels:
                self.context.github.add_labels(command.repo, command.number, command.conflict_labels)
            return
        logger.info("Rebased", repo=command.repo, branch=command.branch, onto=command.onto)
