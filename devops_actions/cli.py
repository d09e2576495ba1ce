"""CLI for devops actions."""

import json
import os
from pathlib import Path
from typing import Annotated, Any, Literal

import structlog
from cyclopts import App, Parameter

from devops_actions import router
from devops_actions.config import load_settings
from devops_actions.config_commands import config_app
from devops_actions.context import ActionContext, build_context
from devops_actions.errors import ConfigError

logger = structlog.get_logger()

app = App(
    help="DevOps Actions - keeps GitHub, Jira and Slack in sync",
)

trigger_app = App(name="trigger", help="Run a manual trigger")

app.command(config_app)
app.command(trigger_app)


def configure_logging(log_level: str) -> None:
    """Configure structlog with the specified log level."""
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(min_level=log_level.lower()))


def get_context() -> ActionContext:
    """Build the platform clients from configuration."""
    try:
        settings = load_settings()
    except ConfigError as e:
        logger.error("Invalid configuration", error=str(e))
        raise SystemExit(1) from e
    return build_context(settings)


def load_payload(event_path: Path | None) -> dict[str, Any]:
    """Read the webhook payload the runner saved for this job."""
    path = event_path or os.environ.get("GITHUB_EVENT_PATH")
    if not path:
        raise ConfigError("No event payload: pass --event-path or set GITHUB_EVENT_PATH")
    with open(path, "r") as f:
        return json.load(f)


@app.command
def event(name: str | None = None, event_path: Path | None = None) -> None:
    """Handle a GitHub event.

    Args:
        name: Event name (defaults to $GITHUB_EVENT_NAME)
        event_path: Path to the JSON payload (defaults to $GITHUB_EVENT_PATH)
    """
    event_name = name or os.environ.get("GITHUB_EVENT_NAME")
    if not event_name:
        logger.error("No event name: pass one or set GITHUB_EVENT_NAME")
        raise SystemExit(1)
    try:
        payload = load_payload(event_path)
    except (ConfigError, OSError, json.JSONDecodeError) as e:
        logger.error("Could not read the event payload", error=str(e))
        raise SystemExit(1) from e

    handled = router.run(event_name, payload, get_context())
    print(f"Handled {event_name} with {handled}" if handled else f"Ignored {event_name}")


def _trigger(name: str, email: str, param: str) -> None:
    payload = {"inputs": {"event": name, "email": email, "param": param}}
    router.run("workflow_dispatch", payload, get_context())


@trigger_app.command(name="create-pull-request-for-issue")
def create_pull_request_for_issue(email: str, issue_key: str) -> None:
    """Create a draft pull request for a Jira issue.

    Args:
        email: Email address of the person asking
        issue_key: Jira issue key, e.g. STUDIO-232
    """
    _trigger(router.CREATE_PULL_REQUEST_FOR_ISSUE, email, issue_key)


@trigger_app.command(name="create-release-pull-request")
def create_release_pull_request(email: str, repository: str) -> None:
    """Create or refresh the release candidate pull request of a repository.

    Args:
        email: Email address of the person asking
        repository: Repository name
    """
    _trigger(router.CREATE_RELEASE_PULL_REQUEST, email, repository)


@app.meta.default
def main(
    *tokens: Annotated[str, Parameter(show=False, allow_leading_hyphen=True)],
    log_level: Literal["debug", "info", "warning", "error", "critical"] = "info",
) -> None:
    """Main entry point with global options."""
    configure_logging(log_level)
    app(tokens)


if __name__ == "__main__":
    app.meta()
