"""Change tracking component for detecting Git repository changes."""

from typing import List
from git import Repo, Diff

from docs_publisher.models import ChangeSet


def _append(paths: List[str], path: str) -> None:
    if path and path not in paths:
        paths.append(path)


class ChangeTracker:
    """Tracks changes in a Git repository since the last commit.

    Builds the same status groups ``git status`` reports: what the index
    holds relative to HEAD (added, changed, removed), what the working tree
    holds relative to the index (modified, missing) and untracked files.
    """

    def get_changes(self, repo: Repo) -> ChangeSet:
        """Detect all changes in the working directory since the last commit.

        Args:
            repo: GitPython Repo object representing the repository

        Returns:
            ChangeSet object containing categorized file changes

        Raises:
            GitCommandError: If Git operations fail
        """
        changes = ChangeSet()

        # Staged changes (HEAD vs index)
        if repo.head.is_valid():
            staged_diff = repo.head.commit.diff()
            for diff_item in staged_diff:
                self._record_staged(changes, diff_item)
        else:
            # No HEAD exists (empty repository), so everything indexed is new
            for path, _stage in repo.index.entries:
                _append(changes.added, path)

        # Unstaged changes (index vs working tree)
        for diff_item in repo.index.diff(None):
            if diff_item.deleted_file:
                _append(changes.missing, diff_item.a_path)
            else:
                _append(changes.modified, diff_item.a_path or diff_item.b_path)

        for path in repo.untracked_files:
            _append(changes.untracked, path)

        return changes

    @staticmethod
    def _record_staged(changes: ChangeSet, diff_item: Diff) -> None:
        if diff_item.renamed_file:
            _append(changes.removed, diff_item.rename_from)
            _append(changes.added, diff_item.rename_to)
        elif diff_item.new_file:
            _append(changes.added, diff_item.b_path)
        elif diff_item.deleted_file:
            _append(changes.removed, diff_item.a_path)
        else:
            _append(changes.changed, diff_item.a_path or diff_item.b_path)
