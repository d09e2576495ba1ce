"""Creates or refreshes the release candidate pull request for a repository.

Triggered through a workflow dispatch with the inputs
``{"event": "createReleasePullRequest", "email": "<requester>", "param": "<repository>"}``.
"""

import random
from datetime import datetime, timezone

import structlog

from devops_actions.commands import SendMessage
from devops_actions.context import ActionContext
from devops_actions.decisions import decide_release_pull_request, release_pull_request_title
from devops_actions.executor import Executor
from devops_actions.models import Comparison
from devops_actions.rules import parse_release_title, release_date_token, release_name
from devops_actions.templates import RELEASE_PULL_REQUEST, render

logger = structlog.get_logger()


def _release_body(date_token: str, name: str, comparison: Comparison) -> str:
    commits = [
        {"title": (commit.message.splitlines() or [""])[0], "author": commit.author} for commit in comparison.commits
    ]
    return render(RELEASE_PULL_REQUEST, date_token=date_token, name=name, commits=commits)


def create_release_pull_request(
    email: str,
    repo: str,
    context: ActionContext,
    now: datetime | None = None,
    rng: random.Random | None = None,
) -> None:
    """Open a pull request from develop to the production branch listing what will be released.

    Args:
        email: Email address of the person asking for the release
        repo: Repository name
        context: Platform clients and settings
        now: Timestamp the release is named after
        rng: Random source for the release name
    """
    settings = context.settings
    executor = Executor(context)
    credentials = context.credentials.fetch(email)

    def report_error(message: str) -> None:
        logger.error(message)
        executor.run(SendMessage(credentials.slack_id, message))

    develop = context.github.get_branch(repo, settings.develop_branch)
    if develop is None:
        report_error(f"Branch '{settings.develop_branch}' could not be found for repository {repo} - giving up")
        return

    master = context.github.get_master_branch(repo, settings.master_branches)
    if master is None:
        report_error(f"Master branch could not be found for repository {repo} - giving up")
        return

    comparison = context.github.compare_commits(repo, master.name, develop.name)
    if comparison.total_commits == 0:
        message = f"Branch '{master.name}' already contains the latest release - nothing to do"
        logger.info(message)
        executor.run(SendMessage(credentials.slack_id, message))
        return

    context.github.set_branch(repo, settings.release_branch, develop.sha)

    existing = context.github.list_open_pull_requests(repo, head=settings.release_branch)
    try:
        if existing:
            pull_request = existing[0]
            logger.info(
                f"An existing release pull request was found ({repo}#{pull_request.number}) - updating the release notes..."
            )
            # Keep the name the release was announced with.
            parsed = parse_release_title(pull_request.title)
            date_token, name = parsed or (release_date_token(now or datetime.now(timezone.utc)), release_name(rng))
            pull_request = context.github.update_pull_request(
                repo, pull_request.number, body=_release_body(date_token, name, comparison)
            )
        else:
            logger.info("No existing release pull request was found - creating it...")
            date_token = release_date_token(now or datetime.now(timezone.utc))
            name = release_name(rng)
            pull_request = context.github.create_pull_request(
                repo,
                master.name,
                settings.release_branch,
                release_pull_request_title(date_token, name),
                _release_body(date_token, name, comparison),
            )
    except Exception:
        report_error(f"An unknown error occurred while creating a release pull request for repository '{repo}'")
        raise

    url = context.github.pull_request_url(repo, pull_request.number)
    executor.execute(decide_release_pull_request(settings, repo, pull_request, credentials, url))
    logger.info("Release pull request is ready", url=url, commits=comparison.total_commits)
