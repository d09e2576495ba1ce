"""Local git operations that the GitHub REST API cannot do, run through the git CLI."""

import subprocess
import tempfile
from pathlib import Path

import structlog

from devops_actions.errors import RebaseConflictError

logger = structlog.get_logger()


class GitWorkspace:
    """Clones a repository into a temporary directory to rewrite its history."""

    def __init__(self, token: str, user_name: str, user_email: str, host: str = "github.com") -> None:
        """Initialize the workspace.

        Args:
            token: Token with push access, embedded in the clone URL
            user_name: Committer name for rewritten commits
            user_email: Committer email for rewritten commits
            host: Git host name
        """
        self.token = token
        self.user_name = user_name
        self.user_email = user_email
        self.host = host

    def _remote_url(self, owner: str, repo: str) -> str:
        return f"https://x-access-token:{self.token}@{self.host}/{owner}/{repo}.git"

    def _run_git_command(self, args: list[str], cwd: Path | None = None) -> str:
        """Run a git command and return its stdout.

        Args:
            args: Command arguments (excluding 'git')
            cwd: Working directory

        Returns:
            Stripped stdout
        """
        cmd = ["git"] + args
        # Never log the remote URL: it carries the token.
        logger.debug("Running git command", subcommand=args[0])

        try:
            result = subprocess.run(cmd, cwd=cwd, capture_output=True, text=True, check=True)
        except subprocess.CalledProcessError as e:
            logger.error("git command failed", subcommand=args[0], stderr=e.stderr, returncode=e.returncode)
            raise
        return result.stdout.strip()

    def rebase(self, owner: str, repo: str, branch: str, onto: str) -> None:
        """Rebase branch onto another branch and force-push the result.

        Raises:
            RebaseConflictError: If git stops on a conflict (the rebase is aborted and nothing is pushed)
        """
        with tempfile.TemporaryDirectory(prefix="devops-actions-") as tmp:
            workdir = Path(tmp) / repo
            self._run_git_command(["clone", "--branch", branch, self._remote_url(owner, repo), str(workdir)])
            self._run_git_command(["config", "user.name", self.user_name], cwd=workdir)
            self._run_git_command(["config", "user.email", self.user_email], cwd=workdir)
            self._run_git_command(["fetch", "origin", onto], cwd=workdir)

            try:
                self._run_git_command(["rebase", f"origin/{onto}"], cwd=workdir)
            except subprocess.CalledProcessError as e:
                self._run_git_command(["rebase", "--abort"], cwd=workdir)
                raise RebaseConflictError(branch, onto) from e

            self._run_git_command(["push", "--force-with-lease", "origin", branch], cwd=workdir)
            logger.info("Rebased branch", repo=repo, branch=branch, onto=onto)
