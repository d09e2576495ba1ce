"""DevOps automation for GitHub, Jira and Slack."""

__version__ = "0.1.0"
