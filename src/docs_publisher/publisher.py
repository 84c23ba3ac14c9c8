"""Commit and push rendered documentation.

A publish run stages the rendered output of every root documentation file
together with any new image assets, commits them with a fixed message when
the working tree changed and pushes the current branch with its tags.
"""

import posixpath
import time
from typing import Callable, List, Optional, Sequence

from docs_publisher.config import PublisherConfig
from docs_publisher.exceptions import PublishError, PushRejectedError
from docs_publisher.logging_config import get_logger, get_run_id, log_git_operation, set_run_id
from docs_publisher.models import ChangeSet, PublishOutcome, PublishResult
from docs_publisher.repository import DocumentationRepository, GitRepository

logger = get_logger(__name__)

RepositoryFactory = Callable[[PublisherConfig], DocumentationRepository]

NOTHING_TO_COMMIT = "Nothing to commit"


def derive_output_path(root_file: str, source_extension: str, output_extension: str) -> str:
    """Map a documentation source file to its rendered output file.

    Only a trailing ``source_extension`` is replaced; names without it are
    returned unchanged.

    >>> derive_output_path("guide.adoc", ".adoc", ".html")
    'guide.html'
    """
    if root_file.endswith(source_extension):
        return root_file[: -len(source_extension)] + output_extension
    return root_file


def normalize_repo_path(path: str) -> str:
    """Rewrite a path the way Git reports it, relative to the working tree root.

    >>> normalize_repo_path("./docs/../index.html")
    'index.html'
    """
    return posixpath.normpath(path)


def open_git_repository(config: PublisherConfig) -> DocumentationRepository:
    """Default repository factory: open ``config.repo_path`` with GitPython."""
    return GitRepository.open(config.repo_path, config.identity, config.ssh_key_path)


class DocumentationPublisher:
    """Publishes rendered documentation from a Git working tree.

    Attributes:
        config: Settings of the run
        repository_factory: Callable opening the repository for a config
    """

    def __init__(
        self,
        config: PublisherConfig,
        repository_factory: Optional[RepositoryFactory] = None
    ):
        self.config = config
        self.repository_factory = repository_factory or open_git_repository

    def derived_outputs(self) -> List[str]:
        """Rendered output paths for the configured root files, in order."""
        outputs: List[str] = []
        for root_file in self.config.root_files:
            output = normalize_repo_path(derive_output_path(
                root_file,
                self.config.source_extension,
                self.config.output_extension
            ))
            if output not in outputs:
                outputs.append(output)
        return outputs

    def is_image(self, path: str) -> bool:
        return path.endswith(self.config.image_extension)

    def staging_set(self, untracked: Sequence[str]) -> List[str]:
        """Paths to stage: derived outputs followed by untracked images."""
        paths = self.derived_outputs()
        for path in untracked:
            if self.is_image(path) and path not in paths:
                paths.append(path)
        return paths

    def commit_paths(self, changes: ChangeSet) -> List[str]:
        """Select the paths the documentation commit may contain.

        Derived outputs and images qualify only when they were added,
        modified or changed; every other change is left out.

        Args:
            changes: Status of the working tree after staging

        Returns:
            Derived outputs in root file order, then images
        """
        committable = changes.committable()
        paths = [path for path in self.derived_outputs() if path in committable]
        for path in committable:
            if self.is_image(path) and path not in paths:
                paths.append(path)
        return paths

    def publish(self) -> PublishResult:
        """Run the publish workflow.

        Returns:
            PublishResult with outcome NO_CHANGES or PUSHED

        Raises:
            ConfigurationError: If identity or SSH key path is missing
            RepositoryEnvironmentError: If the repository cannot be opened
            GitOperationError: If staging, committing or pushing fails
            PushRejectedError: If the remote rejects the push
        """
        self.config.validate()

        if get_run_id() is None:
            set_run_id()

        repository = self.repository_factory(self.config)
        try:
            return self._publish(repository)
        finally:
            repository.close()

    def _publish(self, repository: DocumentationRepository) -> PublishResult:
        # The branch is resolved once and used for both the log and the push
        branch = repository.current_branch()

        staged = self._timed(
            "stage",
            lambda: repository.stage(self.staging_set(repository.untracked_files()))
        )

        changes = repository.current_changes()
        commit_paths = self.commit_paths(changes) if changes.has_changes() else []

        if not commit_paths:
            logger.info(NOTHING_TO_COMMIT)
            return PublishResult(
                outcome=PublishOutcome.NO_CHANGES,
                branch=branch,
                staged_files=staged,
                message=NOTHING_TO_COMMIT,
            )

        logger.info("Commit files from the index", extra={"files": commit_paths})
        commit_hash = self._timed(
            "commit",
            lambda: repository.commit(self.config.commit_message, commit_paths),
            {"files_changed": len(commit_paths)}
        )

        logger.info(f"Push to the branch={branch}")
        self._timed(
            "push",
            lambda: self._push(repository),
            {"branch": branch, "remote": self.config.remote_name}
        )

        return PublishResult(
            outcome=PublishOutcome.PUSHED,
            branch=branch,
            commit_hash=commit_hash,
            staged_files=staged,
            committed_files=commit_paths,
            message=f"Pushed {len(commit_paths)} file(s) to {self.config.remote_name}/{branch}",
        )

    def _push(self, repository: DocumentationRepository) -> None:
        result_message = repository.push(self.config.remote_name)
        if result_message:
            raise PushRejectedError(result_message)

    def _timed(self, operation: str, action: Callable, details: Optional[dict] = None):
        start_time = time.time()
        try:
            result = action()
        except PublishError as e:
            log_git_operation(
                operation=operation,
                repository=self.config.repo_path,
                success=False,
                duration=time.time() - start_time,
                details=details,
                error=str(e)
            )
            raise
        log_git_operation(
            operation=operation,
            repository=self.config.repo_path,
            success=True,
            duration=time.time() - start_time,
            details=details
        )
        return result


def publish(
    config: PublisherConfig,
    repository_factory: Optional[RepositoryFactory] = None
) -> PublishResult:
    """Commit and push rendered documentation for ``config``."""
    return DocumentationPublisher(config, repository_factory).publish()
