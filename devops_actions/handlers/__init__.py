"""Event handlers, one per event kind."""

from devops_actions.handlers.check_suite_completed import check_suite_completed
from devops_actions.handlers.create_pull_request_for_issue import create_pull_request_for_issue
from devops_actions.handlers.create_release_pull_request import create_release_pull_request
from devops_actions.handlers.pull_request_closed import pull_request_closed
from devops_actions.handlers.pull_request_ready_for_review import pull_request_ready_for_review
from devops_actions.handlers.rebase_epic import rebase_epic

__all__ = [
    "check_suite_completed",
    "create_pull_request_for_issue",
    "create_release_pull_request",
    "pull_request_closed",
    "pull_request_ready_for_review",
    "rebase_epic",
]
