"""Exceptions raised by the documentation publisher."""

from typing import Optional


class PublishError(Exception):
    """Base class for every failure of a publish run."""


class ConfigurationError(PublishError):
    """Required identity fields or the SSH key path are missing or invalid."""


class RepositoryEnvironmentError(PublishError):
    """The target directory is not a usable Git working tree."""


class GitOperationError(PublishError):
    """Staging, committing or pushing failed inside the Git library.

    Attributes:
        operation: Name of the failed operation (stage, commit, push)
        cause: The original exception raised by the Git library
    """

    def __init__(self, message: str, operation: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.operation = operation
        self.cause = cause


class PushRejectedError(PublishError):
    """The remote reported a non-empty result message for the push.

    Attributes:
        result_message: The message returned by the push, unchanged
    """

    def __init__(self, result_message: str):
        super().__init__(f"Can't push: {result_message}")
        self.result_message = result_message
