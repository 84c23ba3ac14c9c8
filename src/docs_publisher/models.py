"""Data models for the documentation publisher."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


@dataclass(frozen=True)
class GitIdentity:
    """Author and committer identity used for the documentation commit.

    Attributes:
        email: Committer email address
        username: Committer display name
    """
    email: Optional[str]
    username: Optional[str]

    def missing_fields(self) -> List[str]:
        """Return the names of identity fields that are empty or unset."""
        missing = []
        if not self.email:
            missing.append("email")
        if not self.username:
            missing.append("username")
        return missing


@dataclass
class ChangeSet:
    """Status of a working tree relative to its last commit.

    Attributes:
        added: Paths present in the index but not in HEAD
        changed: Paths whose indexed content differs from HEAD
        modified: Paths whose working tree content differs from the index
        removed: Paths deleted in the index
        missing: Tracked paths deleted from the working tree only
        untracked: Paths on disk that are unknown to the repository
    """
    added: List[str] = field(default_factory=list)
    changed: List[str] = field(default_factory=list)
    modified: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)
    untracked: List[str] = field(default_factory=list)

    def has_changes(self) -> bool:
        """Check whether any tracked file differs from the last commit.

        Untracked files are ignored: they never take part in a commit
        unless they were staged, in which case they show up as added.

        Returns:
            True if anything was added, changed, modified, removed or missing
        """
        return bool(
            self.added or self.changed or self.modified
            or self.removed or self.missing
        )

    def committable(self) -> List[str]:
        """Paths with new content that may be written into a commit.

        Returns:
            Added, modified and changed paths, in that order, without duplicates
        """
        paths: List[str] = []
        for path in self.added + self.modified + self.changed:
            if path not in paths:
                paths.append(path)
        return paths


class PublishOutcome(str, Enum):
    """Terminal successful states of a publish run."""

    NO_CHANGES = "no_changes"
    PUSHED = "pushed"


@dataclass
class PublishResult:
    """Result of a publish run.

    Attributes:
        outcome: Whether a commit was pushed or nothing had to be done
        branch: Short name of the branch the run operated on
        commit_hash: SHA of the created commit, if any
        staged_files: Paths passed to the staging step
        committed_files: Paths included in the commit
        message: Human-readable status message
    """
    outcome: PublishOutcome
    branch: str
    commit_hash: Optional[str] = None
    staged_files: List[str] = field(default_factory=list)
    committed_files: List[str] = field(default_factory=list)
    message: str = ""

    def to_dict(self) -> dict:
        """Serialise the result for JSON-speaking callers."""
        return {
            "outcome": self.outcome.value,
            "branch": self.branch,
            "commit_hash": self.commit_hash,
            "staged_files": list(self.staged_files),
            "committed_files": list(self.committed_files),
            "message": self.message,
        }
