"""Tests for event routing."""

from typing import Any

import pytest

from devops_actions import router
from devops_actions.context import ActionContext
from devops_actions.models import Issue, PullRequest


def _pull_request_payload(action: str, pull_request: PullRequest) -> dict[str, Any]:
    return {
        "action": action,
        "repository": {"name": "webhooks", "owner": {"login": "octokit"}},
        "pull_request": {
            "number": pull_request.number,
            "title": pull_request.title,
            "body": pull_request.body,
            "head": {"ref": pull_request.head_ref},
            "base": {"ref": pull_request.base_ref},
            "merged": pull_request.merged,
        },
    }


def test_pull_request_closed(context: ActionContext, pull_request: PullRequest, issue: Issue) -> None:
    """Test routing a closed pull request."""
    context.jira.issues[issue.key] = issue

    handled = router.dispatch("pull_request", _pull_request_payload("closed", pull_request), context)

    assert handled == "pull_request_closed"
    assert context.jira.calls == [("set_issue_status", "10000", "Validated")]


@pytest.mark.parametrize("action", ["opened", "reopened", "edited", "synchronize"])
def test_pull_request_changes_go_to_epic_rebase(context: ActionContext, action: str) -> None:
    """Test that changed pull requests are checked for epics."""
    epic = PullRequest(number=7, title="[Epic] New billing", head_ref="epic/billing", base_ref="develop")

    handled = router.dispatch("pull_request", _pull_request_payload(action, epic), context)

    assert handled == "rebase_epic"
    assert context.github.called("rebase") == [("rebase", "octokit", "webhooks", "epic/billing", "develop")]


def test_ready_for_review(context: ActionContext, pull_request: PullRequest) -> None:
    """Test routing a pull request marked ready for review."""
    handled = router.dispatch("pull_request", _pull_request_payload("ready_for_review", pull_request), context)
    assert handled == "pull_request_ready_for_review"


def test_unhandled_pull_request_action(context: ActionContext, pull_request: PullRequest) -> None:
    """Test that other pull request actions are ignored."""
    assert router.dispatch("pull_request", _pull_request_payload("labeled", pull_request), context) is None


def test_check_suite(context: ActionContext) -> None:
    """Test that only completed check suites are handled."""
    payload = {
        "action": "completed",
        "check_suite": {"conclusion": "success", "app": {"name": "CircleCI"}, "pull_requests": []},
        "repository": {"name": "webhooks"},
    }
    assert router.dispatch("check_suite", payload, context) == "check_suite_completed"

    payload["action"] = "requested"
    assert router.dispatch("check_suite", payload, context) is None


def test_manual_triggers(context: ActionContext) -> None:
    """Test routing the workflow dispatch triggers."""
    payload = {
        "inputs": {"event": router.CREATE_PULL_REQUEST_FOR_ISSUE, "email": "dave.perrett@example.com", "param": "X-1"}
    }
    assert router.dispatch("workflow_dispatch", payload, context) == "create_pull_request_for_issue"
    assert context.slack.messages == [
        ("U0000000001", "Issue X-1 could not be found, so no pull request was created")
    ]

    payload["inputs"]["event"] = router.CREATE_RELEASE_PULL_REQUEST
    payload["inputs"]["param"] = "webhooks"
    assert router.dispatch("repository_dispatch", payload, context) == "create_release_pull_request"

    payload["inputs"]["event"] = "somethingElse"
    assert router.dispatch("workflow_dispatch", payload, context) is None


def test_unknown_event(context: ActionContext) -> None:
    """Test that unknown events are ignored."""
    assert router.dispatch("push", {}, context) is None


def test_run_turns_errors_into_exit(context: ActionContext) -> None:
    """Test that a failing handler exits with status 1."""
    payload = {"inputs": {"event": router.CREATE_RELEASE_PULL_REQUEST, "email": "nobody@example.com", "param": "x"}}

    with pytest.raises(SystemExit) as exc_info:
        router.run("workflow_dispatch", payload, context)

    assert exc_info.value.code == 1
