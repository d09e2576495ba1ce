"""Capability interfaces for the platforms the actions talk to."""

from abc import ABC, abstractmethod

from devops_actions.models import (
    Branch,
    Comparison,
    Commit,
    Credentials,
    Issue,
    PullRequest,
    Release,
    Repository,
)


class SourceHost(ABC):
    """Abstract base class for the source hosting platform."""

    @abstractmethod
    def get_pull_request(self, repo: str, number: int) -> PullRequest | None:
        """Fetch a pull request, or None if it does not exist."""
        pass

    @abstractmethod
    def get_commit(self, repo: str, sha: str) -> Commit | None:
        """Fetch a commit, or None if it does not exist."""
        pass

    @abstractmethod
    def get_repository(self, repo: str) -> Repository:
        """Fetch a repository."""
        pass

    @abstractmethod
    def get_branch(self, repo: str, branch: str) -> Branch | None:
        """Fetch a branch, or None if it does not exist."""
        pass

    def get_master_branch(self, repo: str, candidates: tuple[str, ...] = ("master", "main")) -> Branch | None:
        """Return the first of the candidate production branches that exists."""
        for name in candidates:
            branch = self.get_branch(repo, name)
            if branch is not None:
                return branch
        return None

    @abstractmethod
    def add_labels(self, repo: str, number: int, labels: list[str]) -> None:
        """Add labels to an issue or pull request, keeping existing ones."""
        pass

    @abstractmethod
    def set_labels(self, repo: str, number: int, labels: list[str]) -> None:
        """Replace all labels on an issue or pull request."""
        pass

    @abstractmethod
    def assign_owners(self, repo: str, number: int, usernames: list[str]) -> None:
        """Add assignees to an issue or pull request."""
        pass

    @abstractmethod
    def create_branch(
        self,
        repo: str,
        base: str,
        branch: str,
        path: str,
        content: str,
        message: str,
    ) -> Branch:
        """Create a branch from base with a single commit adding one file."""
        pass

    @abstractmethod
    def set_branch(self, repo: str, branch: str, sha: str) -> Branch:
        """Point a branch at a commit, creating it if needed."""
        pass

    @abstractmethod
    def create_pull_request(
        self,
        repo: str,
        base: str,
        head: str,
        title: str,
        body: str,
        token: str | None = None,
    ) -> PullRequest:
        """Open a draft pull request, optionally on behalf of the owner of token."""
        pass

    @abstractmethod
    def update_pull_request(
        self,
        repo: str,
        number: int,
        title: str | None = None,
        body: str | None = None,
    ) -> PullRequest:
        """Update the title and/or body of a pull request."""
        pass

    @abstractmethod
    def list_open_pull_requests(self, repo: str, head: str | None = None) -> list[PullRequest]:
        """List open pull requests, optionally only those from the head branch."""
        pass

    @abstractmethod
    def compare_commits(self, repo: str, base: str, head: str) -> Comparison:
        """List the commits head has that base does not."""
        pass

    @abstractmethod
    def create_release(self, repo: str, tag: str, name: str, body: str, target: str) -> Release:
        """Tag target and publish a release."""
        pass

    @abstractmethod
    def rebase(self, owner: str, repo: str, branch: str, onto: str) -> None:
        """Rebase branch onto another branch and force-push it.

        Raises:
            RebaseConflictError: If the rebase stops on a conflict
        """
        pass

    @abstractmethod
    def pull_request_url(self, repo: str, number: int) -> str:
        """Browser URL of a pull request."""
        pass


class IssueTracker(ABC):
    """Abstract base class for the issue tracker."""

    @abstractmethod
    def get_issue(self, key: str) -> Issue | None:
        """Fetch an issue by key, or None if it does not exist."""
        pass

    @abstractmethod
    def set_issue_status(self, issue_id: str, status: str) -> None:
        """Transition an issue to the named status."""
        pass

    @abstractmethod
    def get_pull_request_numbers(self, issue_id: str) -> list[int]:
        """Numbers of the open pull requests linked to an issue."""
        pass


class Chat(ABC):
    """Abstract base class for the team chat."""

    @abstractmethod
    def send_message(self, chat_id: str, text: str) -> None:
        """Send a direct message."""
        pass


class CredentialStore(ABC):
    """Abstract base class for the service that maps people to their platform identities."""

    @abstractmethod
    def fetch(self, lookup: str) -> Credentials:
        """Resolve an email address or display name.

        Raises:
            CredentialsError: If no mapping exists
        """
        pass
