"""Backend implementations."""

from devops_actions.backends.credentials import CredentialsClient
from devops_actions.backends.github import GitHubHost
from devops_actions.backends.jira import JiraTracker
from devops_actions.backends.slack import SlackChat

__all__ = ["CredentialsClient", "GitHubHost", "JiraTracker", "SlackChat"]
