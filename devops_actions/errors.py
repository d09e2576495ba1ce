"""Exceptions raised by devops-actions."""


class ActionError(Exception):
    """Base class for errors raised while handling an event."""


class ConfigError(ActionError, ValueError):
    """Raised when a required configuration value is missing or invalid."""


class CredentialsError(ActionError):
    """Raised when the credentials service has no mapping for a user."""


class RebaseConflictError(ActionError):
    """Raised when a branch cannot be rebased without conflicts."""

    def __init__(self, branch: str, onto: str) -> None:
        super().__init__(f"Branch '{branch}' could not be rebased onto '{onto}' without conflicts")
        self.branch = branch
        self.onto = onto
