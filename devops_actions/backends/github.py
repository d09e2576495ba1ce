"""GitHub REST API backend implementation using PyGithub."""

from typing import Any

import structlog
from github import Auth, Github, GithubException
from github.Commit import Commit as GithubCommit
from github.PullRequest import PullRequest as GithubPullRequest
from github.Repository import Repository as GithubRepository

from devops_actions.backend import SourceHost
from devops_actions.backends.git import GitWorkspace
from devops_actions.models import (
    Branch,
    Comparison,
    Commit,
    PullRequest,
    Release,
    Repository,
)

logger = structlog.get_logger()


def _is_not_found(error: GithubException) -> bool:
    return error.status == 404


class GitHubHost(SourceHost):
    """GitHub organization backend."""

    def __init__(
        self,
        organization: str,
        token: str | None = None,
        timeout: float = 30.0,
        write_user: str = "devops-bot",
        workspace: GitWorkspace | None = None,
    ) -> None:
        """Initialize GitHub backend.

        Args:
            organization: Organization that owns the repositories
            token: GitHub token of the automation user
            timeout: HTTP timeout in seconds
            write_user: Automation account that authors rewritten commits
            workspace: Local git workspace used for rebases
        """
        self.organization = organization
        self.token = token
        self.timeout = timeout
        if not self.token:
            raise ValueError("GitHub token required")

        logger.debug("Initializing GitHub backend", organization=organization)
        self.client = Github(auth=Auth.Token(self.token), timeout=int(timeout))
        self.workspace = workspace or GitWorkspace(
            token=self.token, user_name=write_user, user_email=f"{write_user}@users.noreply.github.com"
        )
        logger.info("GitHub backend initialized", organization=organization)

    def _repo(self, repo: str, client: Github | None = None) -> GithubRepository:
        return (client or self.client).get_repo(f"{self.organization}/{repo}", lazy=True)

    def _to_pull_request(self, pull: GithubPullRequest) -> PullRequest:
        logger.debug("Converting GitHub pull request", number=pull.number)
        return PullRequest(
            number=pull.number,
            title=pull.title or "",
            body=pull.body or "",
            head_ref=pull.head.ref,
            base_ref=pull.base.ref,
            merged=bool(pull.merged),
            html_url=pull.html_url,
            labels=[label.name for label in pull.labels],
            author=pull.user.login if pull.user else None,
            state=pull.state.lower(),
        )

    def _to_commit(self, commit: GithubCommit) -> Commit:
        return Commit(
            sha=commit.sha,
            message=commit.commit.message,
            author=commit.author.login if commit.author else None,
        )

    def get_pull_request(self, repo: str, number: int) -> PullRequest | None:
        """Fetch a pull request by number."""
        logger.debug("Fetching pull request", repo=repo, number=number)
        try:
            pull = self._repo(repo).get_pull(number)
        except GithubException as e:
            if _is_not_found(e):
                logger.debug("Pull request not found", repo=repo, number=number)
                return None
            raise
        return self._to_pull_request(pull)

    def get_commit(self, repo: str, sha: str) -> Commit | None:
        """Fetch a commit by SHA."""
        logger.debug("Fetching commit", repo=repo, sha=sha)
        try:
            commit = self._repo(repo).get_commit(sha)
        except GithubException as e:
            if _is_not_found(e):
                logger.debug("Commit not found", repo=repo, sha=sha)
                return None
            raise
        return self._to_commit(commit)

    def get_repository(self, repo: str) -> Repository:
        logger.debug("Fetching repository", repo=repo)
        repository = self.client.get_repo(f"{self.organization}/{repo}")
        return Repository(name=repository.name, owner=repository.owner.login, default_branch=repository.default_branch)

    def get_branch(self, repo: str, branch: str) -> Branch | None:
        logger.debug("Fetching branch", repo=repo, branch=branch)
        try:
            found = self._repo(repo).get_branch(branch)
        except GithubException as e:
            if _is_not_found(e):
                logger.debug("Branch not found", repo=repo, branch=branch)
                return None
            raise
        return Branch(name=found.name, sha=found.commit.sha)

    def add_labels(self, repo: str, number: int, labels: list[str]) -> None:
        logger.debug("Adding labels", repo=repo, number=number, labels=labels)
        self._repo(repo).get_issue(number).add_to_labels(*labels)

    def set_labels(self, repo: str, number: int, labels: list[str]) -> None:
        logger.debug("Setting labels", repo=repo, number=number, labels=labels)
        self._repo(repo).get_issue(number).set_labels(*labels)

    def assign_owners(self, repo: str, number: int, usernames: list[str]) -> None:
        logger.debug("Assigning owners", repo=repo, number=number, usernames=usernames)
        self._repo(repo).get_issue(number).add_to_assignees(*usernames)

    def create_branch(
        self,
        repo: str,
        base: str,
        branch: str,
        path: str,
        content: str,
        message: str,
    ) -> Branch:
        """Create a branch from base and commit a single file to it.

        GitHub will not open a pull request for a branch without commits, so every
        branch we create gets a seed file.
        """
        logger.info("Creating branch", repo=repo, base=base, branch=branch)
        repository = self._repo(repo)
        base_sha = repository.get_branch(base).commit.sha
        repository.create_git_ref(ref=f"refs/heads/{branch}", sha=base_sha)
        result = repository.create_file(path=path, message=message, content=content, branch=branch)
        sha = result["commit"].sha
        logger.info("Branch created", repo=repo, branch=branch, sha=sha)
        return Branch(name=branch, sha=sha)

    def set_branch(self, repo: str, branch: str, sha: str) -> Branch:
        logger.info("Pointing branch at commit", repo=repo, branch=branch, sha=sha)
        repository = self._repo(repo)
        try:
            repository.get_git_ref(f"heads/{branch}").edit(sha=sha, force=True)
        except GithubException as e:
            if not _is_not_found(e):
                raise
            logger.debug("Branch does not exist yet, creating it", repo=repo, branch=branch)
            repository.create_git_ref(ref=f"refs/heads/{branch}", sha=sha)
        return Branch(name=branch, sha=sha)

    def create_pull_request(
        self,
        repo: str,
        base: str,
        head: str,
        title: str,
        body: str,
        token: str | None = None,
    ) -> PullRequest:
        """Open a draft pull request.

        When a token is given the pull request is opened as its owner, so that it shows
        up as theirs rather than the automation user's.
        """
        logger.info("Creating pull request", repo=repo, base=base, head=head, title=title)
        client = Github(auth=Auth.Token(token), timeout=int(self.timeout)) if token else self.client
        pull = self._repo(repo, client=client).create_pull(base=base, head=head, title=title, body=body, draft=True)
        logger.info("Pull request created", repo=repo, number=pull.number)
        return self._to_pull_request(pull)

    def update_pull_request(
        self,
        repo: str,
        number: int,
        title: str | None = None,
        body: str | None = None,
    ) -> PullRequest:
        logger.info("Updating pull request", repo=repo, number=number)
        pull = self._repo(repo).get_pull(number)
        changes: dict[str, Any] = {}
        if title is not None:
            changes["title"] = title
        if body is not None:
            changes["body"] = body
        if changes:
            pull.edit(**changes)
        return self._to_pull_request(self._repo(repo).get_pull(number))

    def list_open_pull_requests(self, repo: str, head: str | None = None) -> list[PullRequest]:
        logger.debug("Listing open pull requests", repo=repo, head=head)
        if head:
            pulls = self._repo(repo).get_pulls(state="open", head=f"{self.organization}:{head}")
        else:
            pulls = self._repo(repo).get_pulls(state="open")
        return [self._to_pull_request(pull) for pull in pulls]

    def compare_commits(self, repo: str, base: str, head: str) -> Comparison:
        logger.debug("Comparing commits", repo=repo, base=base, head=head)
        comparison = self._repo(repo).compare(base, head)
        commits = [self._to_commit(commit) for commit in comparison.commits]
        return Comparison(commits=commits, total_commits=comparison.total_commits)

    def create_release(self, repo: str, tag: str, name: str, body: str, target: str) -> Release:
        logger.info("Creating release", repo=repo, tag=tag, name=name, target=target)
        release = self._repo(repo).create_git_release(
            tag=tag,
            name=name,
            message=body,
            draft=False,
            prerelease=False,
            target_commitish=target,
        )
        return Release(tag_name=release.tag_name, name=release.title, body=release.body or "", html_url=release.html_url)

    def rebase(self, owner: str, repo: str, branch: str, onto: str) -> None:
        self.workspace.rebase(owner or self.organization, repo, branch, onto)

    def pull_request_url(self, repo: str, number: int) -> str:
        return f"https://github.com/{self.organization}/{repo}/pull/{number}"
