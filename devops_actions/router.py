"""Routes GitHub events to their handlers."""

from collections.abc import Callable
from typing import Any

import structlog

from devops_actions.context import ActionContext
from devops_actions.handlers import (
    check_suite_completed,
    create_pull_request_for_issue,
    create_release_pull_request,
    pull_request_closed,
    pull_request_ready_for_review,
    rebase_epic,
)
from devops_actions.models import CheckSuiteEvent, PullRequestEvent, TriggerEvent

logger = structlog.get_logger()

CREATE_PULL_REQUEST_FOR_ISSUE = "createPullRequestForJiraIssue"
CREATE_RELEASE_PULL_REQUEST = "createReleasePullRequest"

PULL_REQUEST_HANDLERS: dict[str, Callable[[PullRequestEvent, ActionContext], None]] = {
    "closed": pull_request_closed,
    "ready_for_review": pull_request_ready_for_review,
    "opened": rebase_epic,
    "reopened": rebase_epic,
    "edited": rebase_epic,
    "synchronize": rebase_epic,
}


def dispatch(event_name: str, payload: dict[str, Any], context: ActionContext) -> str | None:
    """Hand one event to its handler.

    Args:
        event_name: GitHub event name, e.g. ``check_suite`` or ``pull_request``
        payload: The raw webhook payload
        context: Platform clients and settings

    Returns:
        Name of the handler that ran, or None if the event was ignored
    """
    action = payload.get("action")
    logger.debug("Dispatching event", event_name=event_name, action=action)

    if event_name == "check_suite":
        if action != "completed":
            logger.info("Check suite has not completed - ignoring", action=action)
            return None
        check_suite_completed(CheckSuiteEvent.from_payload(payload), context)
        return check_suite_completed.__name__

    if event_name == "pull_request":
        handler = PULL_REQUEST_HANDLERS.get(action or "")
        if handler is None:
            logger.info("No handler for pull request action - ignoring", action=action)
            return None
        handler(PullRequestEvent.from_payload(payload), context)
        return handler.__name__

    if event_name in ("workflow_dispatch", "repository_dispatch"):
        trigger = TriggerEvent.from_payload(payload)
        if trigger.name == CREATE_PULL_REQUEST_FOR_ISSUE:
            create_pull_request_for_issue(trigger.email, trigger.param, context)
            return create_pull_request_for_issue.__name__
        if trigger.name == CREATE_RELEASE_PULL_REQUEST:
            create_release_pull_request(trigger.email, trigger.param, context)
            return create_release_pull_request.__name__
        logger.info("Unknown trigger - ignoring", trigger=trigger.name)
        return None

    logger.info("No handler for event - ignoring", event_name=event_name)
    return None


def run(event_name: str, payload: dict[str, Any], context: ActionContext) -> str | None:
    """Dispatch an event, turning any failure into a non-zero exit.

    Raises:
        SystemExit: With status 1 if the handler raised
    """
    try:
        return dispatch(event_name, payload, context)
    except Exception as e:
        logger.exception("Action failed", event_name=event_name, error=str(e))
        raise SystemExit(1) from e
