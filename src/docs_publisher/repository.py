"""Repository access for the documentation publisher.

The publisher talks to Git through the small ``DocumentationRepository``
interface. ``GitRepository`` implements it on top of GitPython for a real
working tree.
"""

from pathlib import Path
from typing import List, Optional, Protocol, Sequence

from git import PushInfo, Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from docs_publisher.change_tracker import ChangeTracker
from docs_publisher.exceptions import GitOperationError, RepositoryEnvironmentError
from docs_publisher.logging_config import get_logger
from docs_publisher.models import ChangeSet, GitIdentity

logger = get_logger(__name__)

PUSH_FAILURE_FLAGS = (
    PushInfo.ERROR | PushInfo.REJECTED | PushInfo.REMOTE_REJECTED | PushInfo.REMOTE_FAILURE
)


class DocumentationRepository(Protocol):
    """Operations the publisher needs from a working tree."""

    def stage(self, paths: Sequence[str]) -> List[str]:
        """Stage the given paths and return the ones that were staged."""
        ...

    def untracked_files(self) -> List[str]:
        """Return paths present on disk but unknown to the repository."""
        ...

    def current_changes(self) -> ChangeSet:
        """Return the status of the working tree relative to HEAD."""
        ...

    def commit(self, message: str, restrict_paths: Sequence[str]) -> str:
        """Commit only ``restrict_paths`` and return the new commit hash."""
        ...

    def push(self, remote_name: str) -> Optional[str]:
        """Push the current branch with tags; return a rejection message or None."""
        ...

    def current_branch(self) -> str:
        """Return the short name of the checked out branch."""
        ...

    def close(self) -> None:
        """Release resources held by the handle."""
        ...


def build_ssh_command(ssh_key_path: str) -> str:
    """Build a GIT_SSH_COMMAND value that authenticates with a single key.

    Args:
        ssh_key_path: Path to the SSH private key file

    Returns:
        ssh command line for Git transports
    """
    return (
        f'ssh -i "{ssh_key_path}" '
        '-o IdentitiesOnly=yes '
        '-o StrictHostKeyChecking=no '
        '-o UserKnownHostsFile=/dev/null'
    )


class GitRepository:
    """GitPython backed ``DocumentationRepository``.

    Identity and SSH key are applied to this repository's own ``git``
    command environment, so neither the process environment nor
    ``.git/config`` is touched.

    Attributes:
        repo: GitPython Repo object for the working tree
        identity: Author and committer identity
        ssh_key_path: SSH private key used by the push
    """

    def __init__(self, repo: Repo, identity: GitIdentity, ssh_key_path: Optional[str] = None):
        self.repo = repo
        self.identity = identity
        self.ssh_key_path = ssh_key_path
        self._change_tracker = ChangeTracker()

        environment = {
            "GIT_AUTHOR_NAME": identity.username,
            "GIT_AUTHOR_EMAIL": identity.email,
            "GIT_COMMITTER_NAME": identity.username,
            "GIT_COMMITTER_EMAIL": identity.email,
        }
        if ssh_key_path:
            environment["GIT_SSH_COMMAND"] = build_ssh_command(ssh_key_path)
        self.repo.git.update_environment(**environment)

    @classmethod
    def open(
        cls,
        repo_path: str,
        identity: GitIdentity,
        ssh_key_path: Optional[str] = None
    ) -> "GitRepository":
        """Open an existing Git working directory.

        Args:
            repo_path: Root of the working tree
            identity: Author and committer identity
            ssh_key_path: SSH private key used by the push

        Returns:
            GitRepository for the working tree

        Raises:
            RepositoryEnvironmentError: If the path does not exist, is not
                the root of a Git repository or is a bare repository
        """
        path = Path(repo_path)

        if not path.exists():
            raise RepositoryEnvironmentError(
                f"Repository path does not exist: {repo_path}"
            )

        try:
            repo = Repo(path)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise RepositoryEnvironmentError(
                f"Not a valid Git repository: {repo_path}"
            ) from e

        if repo.bare:
            repo.close()
            raise RepositoryEnvironmentError(
                f"Repository has no working tree: {repo_path}"
            )

        return cls(repo, identity, ssh_key_path)

    @property
    def working_dir(self) -> str:
        return str(self.repo.working_dir)

    def stage(self, paths: Sequence[str]) -> List[str]:
        """Stage files that exist in the working tree.

        Paths missing from disk are skipped, matching ``git add`` with a
        pathspec that matches nothing. Re-staging an unchanged file is a
        no-op.

        Args:
            paths: Paths relative to the working tree root

        Returns:
            Paths that were passed to the index

        Raises:
            GitOperationError: If the index cannot be updated
        """
        root = Path(self.working_dir)
        existing = []
        for path in paths:
            if (root / path).is_file():
                existing.append(path)
            else:
                logger.warning("Skipping missing file", extra={"path": path})

        if not existing:
            return []

        try:
            self.repo.index.add(existing)
        except (GitCommandError, OSError) as e:
            raise GitOperationError(
                f"Can't stage files: {e}", operation="stage", cause=e
            ) from e
        return existing

    def untracked_files(self) -> List[str]:
        try:
            return list(self.repo.untracked_files)
        except GitCommandError as e:
            raise GitOperationError(
                "Can't list untracked files", operation="stage", cause=e
            ) from e

    def current_changes(self) -> ChangeSet:
        try:
            return self._change_tracker.get_changes(self.repo)
        except GitCommandError as e:
            raise GitOperationError(
                "Can't compute repository status", operation="status", cause=e
            ) from e

    def commit(self, message: str, restrict_paths: Sequence[str]) -> str:
        """Create a commit holding only ``restrict_paths``.

        Uses ``git commit --only`` so content staged for any other path
        stays in the index and out of the commit.

        Args:
            message: Commit message to use
            restrict_paths: Paths included in the commit

        Returns:
            The SHA hash of the created commit

        Raises:
            GitOperationError: If commit creation fails
        """
        if not restrict_paths:
            raise GitOperationError(
                "Can't commit changes: no paths to commit", operation="commit"
            )

        try:
            self.repo.git.commit("--only", "-m", message, "--", *restrict_paths)
            return self.repo.head.commit.hexsha
        except (GitCommandError, ValueError) as e:
            raise GitOperationError(
                f"Can't commit changes: {e}", operation="commit", cause=e
            ) from e

    def current_branch(self) -> str:
        """Retrieve the name of the current active branch.

        Raises:
            RepositoryEnvironmentError: If HEAD is detached (no active branch)
        """
        if self.repo.head.is_detached:
            raise RepositoryEnvironmentError("HEAD is detached - not on any branch")
        return self.repo.head.ref.name

    def current_branch_ref(self) -> str:
        """Full ref name of the current branch, e.g. ``refs/heads/main``."""
        if self.repo.head.is_detached:
            raise RepositoryEnvironmentError("HEAD is detached - not on any branch")
        return self.repo.head.ref.path

    def push(self, remote_name: str) -> Optional[str]:
        """Push the current branch and all tags to ``remote_name``.

        Args:
            remote_name: Name of the remote, usually ``origin``

        Returns:
            None on success, otherwise the rejection message reported for
            the failed refs

        Raises:
            GitOperationError: If the remote is unknown or the transport fails
        """
        try:
            remote = self.repo.remote(remote_name)
        except ValueError as e:
            raise GitOperationError(
                f"Remote is not configured: {remote_name}", operation="push", cause=e
            ) from e

        branch_ref = self.current_branch_ref()

        try:
            push_infos = remote.push(refspec=branch_ref, tags=True)
        except GitCommandError as e:
            raise GitOperationError(
                f"Can't push: {e}", operation="push", cause=e
            ) from e

        failures = [
            f"{info.remote_ref_string}: {info.summary.strip()}"
            for info in push_infos
            if info.flags & PUSH_FAILURE_FLAGS
        ]
        if failures:
            return "; ".join(failures)

        error = getattr(push_infos, "error", None)
        if error is not None:
            raise GitOperationError(
                f"Can't push: {error}", operation="push", cause=error
            ) from error

        if not push_infos:
            return "Push operation returned no information"

        return None

    def close(self) -> None:
        self.repo.close()

    def __enter__(self) -> "GitRepository":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
