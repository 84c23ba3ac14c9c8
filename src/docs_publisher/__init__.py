"""Docs Git Publisher - commit and push rendered documentation from a build."""

__version__ = "0.1.0"

from docs_publisher.config import PublisherConfig
from docs_publisher.exceptions import (
    ConfigurationError,
    GitOperationError,
    PublishError,
    PushRejectedError,
    RepositoryEnvironmentError,
)
from docs_publisher.models import GitIdentity, PublishOutcome, PublishResult
from docs_publisher.publisher import DocumentationPublisher, publish
from docs_publisher.repository import DocumentationRepository, GitRepository

__all__ = [
    "ConfigurationError",
    "DocumentationPublisher",
    "DocumentationRepository",
    "GitIdentity",
    "GitOperationError",
    "GitRepository",
    "PublishError",
    "PublishOutcome",
    "PublishResult",
    "PublisherConfig",
    "PushRejectedError",
    "RepositoryEnvironmentError",
    "publish",
]
