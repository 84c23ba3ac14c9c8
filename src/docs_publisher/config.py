"""Configuration management for the documentation publisher."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Tuple

from dotenv import load_dotenv

from docs_publisher.exceptions import ConfigurationError
from docs_publisher.models import GitIdentity

SSH_KEY_ENV_VAR = "GIT_PRIVATE_SSH_KEY_PATH"

DEFAULT_COMMIT_MESSAGE = (
    "[Documentation Publisher] Commit with a rendered new or modified docs"
)

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def parse_root_files(value: Optional[str]) -> Tuple[str, ...]:
    """Split a comma separated list of root documentation files.

    Args:
        value: Raw value such as ``"index.adoc, guide.adoc"``

    Returns:
        Tuple of non-empty, stripped file names in their original order
    """
    if not value:
        return ()
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass(frozen=True)
class PublisherConfig:
    """Settings for one publish run, built once by the caller.

    Attributes:
        identity: Email and username recorded as author and committer
        root_files: Documentation source files whose rendered output is committed
        ssh_key_path: Path to the SSH private key used for the push
        repo_path: Root of the Git working tree
        source_extension: Extension of documentation sources
        output_extension: Extension of rendered documentation pages
        image_extension: Extension of image assets picked up when untracked
        remote_name: Remote the current branch is pushed to
        commit_message: Fixed message of the documentation commit
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    identity: GitIdentity
    root_files: Tuple[str, ...] = ()
    ssh_key_path: Optional[str] = None
    repo_path: str = "."
    source_extension: str = ".adoc"
    output_extension: str = ".html"
    image_extension: str = ".png"
    remote_name: str = "origin"
    commit_message: str = DEFAULT_COMMIT_MESSAGE
    log_level: str = "INFO"

    @classmethod
    def create(
        cls,
        root_files: Iterable[str],
        email: Optional[str],
        username: Optional[str],
        ssh_key_path: Optional[str],
        **kwargs,
    ) -> "PublisherConfig":
        """Build a config from plain values.

        Args:
            root_files: Documentation source file names
            email: Committer email
            username: Committer name
            ssh_key_path: Path to the SSH private key
            **kwargs: Any other ``PublisherConfig`` field

        Returns:
            Immutable PublisherConfig
        """
        return cls(
            identity=GitIdentity(email=email, username=username),
            root_files=tuple(root_files),
            ssh_key_path=ssh_key_path,
            **kwargs,
        )

    @classmethod
    def from_env(cls, env_file: Optional[str] = None, **overrides) -> "PublisherConfig":
        """Load configuration from environment variables.

        Values passed in ``overrides`` take precedence over the environment;
        an override of ``None`` means "not given".

        Args:
            env_file: Optional path to a .env file to load first
            **overrides: ``root_files``, ``email``, ``username``,
                ``ssh_key_path`` or any other ``PublisherConfig`` field

        Returns:
            PublisherConfig populated from the environment
        """
        if env_file:
            load_dotenv(env_file)

        given = {key: value for key, value in overrides.items() if value is not None}

        root_files = given.pop("root_files", None)
        if root_files is None or len(root_files) == 0:
            root_files = parse_root_files(os.getenv("DOCS_ROOT_FILES"))

        return cls.create(
            root_files=root_files,
            email=given.pop("email", os.getenv("GIT_USER_EMAIL")),
            username=given.pop("username", os.getenv("GIT_USER_NAME")),
            ssh_key_path=given.pop("ssh_key_path", os.getenv(SSH_KEY_ENV_VAR)),
            repo_path=given.pop("repo_path", os.getenv("DOCS_REPO_PATH", ".")),
            source_extension=given.pop(
                "source_extension", os.getenv("DOCS_SOURCE_EXTENSION", ".adoc")
            ),
            output_extension=given.pop(
                "output_extension", os.getenv("DOCS_OUTPUT_EXTENSION", ".html")
            ),
            image_extension=given.pop(
                "image_extension", os.getenv("DOCS_IMAGE_EXTENSION", ".png")
            ),
            remote_name=given.pop("remote_name", os.getenv("DOCS_REMOTE", "origin")),
            log_level=given.pop("log_level", os.getenv("LOG_LEVEL", "INFO")).upper(),
            **given,
        )

    def validate(self) -> None:
        """Validate configuration values.

        Identity is checked first so that a run without identity never
        looks at the key or the repository.

        Raises:
            ConfigurationError: If any configuration value is missing or invalid
        """
        missing = self.identity.missing_fields()
        if missing:
            raise ConfigurationError(
                "Cannot publish documentation: "
                f"git user email [{self.identity.email}] or "
                f"git user name [{self.identity.username}] is missing "
                f"(missing: {', '.join(missing)})"
            )

        if not self.ssh_key_path:
            raise ConfigurationError(
                f"SSH private key path is missing: set {SSH_KEY_ENV_VAR}"
            )

        ssh_key = Path(self.ssh_key_path)
        if not ssh_key.is_file():
            raise ConfigurationError(
                f"SSH key file not found: {self.ssh_key_path}"
            )

        for name in ("source_extension", "output_extension", "image_extension"):
            value = getattr(self, name)
            if not value.startswith(".") or len(value) < 2:
                raise ConfigurationError(
                    f"Invalid {name}: {value!r}. Must start with '.'"
                )

        if not self.remote_name:
            raise ConfigurationError("Remote name must not be empty")

        if self.log_level not in VALID_LOG_LEVELS:
            raise ConfigurationError(
                f"Invalid log_level: {self.log_level}. "
                f"Must be one of {VALID_LOG_LEVELS}"
            )
