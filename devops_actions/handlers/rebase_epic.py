"""Runs whenever commits are added to a pull request.

Epic pull requests (titles starting with '[Epic] ') are kept rebased on their base branch.
"""

import structlog

from devops_actions.context import ActionContext
from devops_actions.decisions import decide_rebase_epic
from devops_actions.executor import Executor
from devops_actions.models import PullRequestEvent

logger = structlog.get_logger()


def rebase_epic(event: PullRequestEvent, context: ActionContext) -> None:
    commands = decide_rebase_epic(context.settings, event)
    if not commands:
        logger.info("Pull request is not an epic - ignoring", pull_request=event.name)
        return
    Executor(context).execute(commands)
