"""Everything a handler needs for one invocation."""

from dataclasses import dataclass

import structlog

from devops_actions.backend import Chat, CredentialStore, IssueTracker, SourceHost
from devops_actions.backends import CredentialsClient, GitHubHost, JiraTracker, SlackChat
from devops_actions.config import Settings

logger = structlog.get_logger()


@dataclass
class ActionContext:
    """The configured platform clients for one invocation."""

    settings: Settings
    github: SourceHost
    jira: IssueTracker
    slack: Chat
    credentials: CredentialStore


def build_context(settings: Settings) -> ActionContext:
    """Connect to the real platforms."""
    logger.debug("Building action context", organization=settings.github_organization)
    return ActionContext(
        settings=settings,
        github=GitHubHost(
            organization=settings.github_organization,
            token=settings.github_token,
            timeout=settings.http_timeout,
            write_user=settings.github_write_user,
        ),
        jira=JiraTracker(
            host=settings.jira_host,
            email=settings.jira_email,
            token=settings.jira_token,
            repository_field=settings.jira_repository_field,
            timeout=settings.http_timeout,
        ),
        slack=SlackChat(token=settings.slack_token, timeout=settings.http_timeout),
        credentials=CredentialsClient(
            api_prefix=settings.credentials_api_prefix,
            secret=settings.credentials_api_secret,
            signature_header=settings.credentials_signature_header,
            timeout=settings.http_timeout,
        ),
    )
