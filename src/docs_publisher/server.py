"""MCP server exposing the documentation publisher as a tool."""

import os
from typing import List, Optional

from fastmcp import FastMCP

from docs_publisher.config import SSH_KEY_ENV_VAR, PublisherConfig
from docs_publisher.exceptions import PublishError
from docs_publisher.logging_config import clear_run_id, get_logger, set_run_id, setup_logging
from docs_publisher.publisher import RepositoryFactory, publish

# Get logger for this module
logger = get_logger(__name__)

# Initialize FastMCP server
mcp = FastMCP("docs-publisher")


def execute_publish_documentation(
    root_files: List[str],
    git_user_email: Optional[str],
    git_user_name: Optional[str],
    repository_path: str = ".",
    ssh_key_path: Optional[str] = None,
    repository_factory: Optional[RepositoryFactory] = None,
) -> dict:
    """Run a publish and report the outcome as a dictionary.

    Errors never escape: they are returned in the ``error`` field so the
    calling agent can show them.

    Args:
        root_files: Documentation source files whose rendered output is committed
        git_user_email: Committer email
        git_user_name: Committer name
        repository_path: Root of the Git working tree
        ssh_key_path: SSH private key; defaults to GIT_PRIVATE_SSH_KEY_PATH
        repository_factory: Optional factory used instead of GitPython

    Returns:
        Dictionary with ``success``, ``error`` and the PublishResult fields
    """
    run_id = set_run_id()
    try:
        config = PublisherConfig.create(
            root_files=root_files,
            email=git_user_email,
            username=git_user_name,
            ssh_key_path=ssh_key_path or os.getenv(SSH_KEY_ENV_VAR),
            repo_path=repository_path,
        )
        result = publish(config, repository_factory)
    except PublishError as e:
        logger.error(
            "Documentation publish failed",
            extra={"repository": repository_path, "error": str(e)}
        )
        return {
            "success": False,
            "run_id": run_id,
            "message": str(e),
            "error": str(e),
            "error_type": type(e).__name__,
        }
    finally:
        clear_run_id()

    response = result.to_dict()
    response.update({"success": True, "run_id": run_id, "error": None})
    return response


@mcp.tool()
def publish_documentation(
    root_files: List[str],
    git_user_email: str,
    git_user_name: str,
    repository_path: str = "."
) -> dict:
    """
    Commit and push rendered documentation.

    Stages the rendered ``.html`` file of every root ``.adoc`` file and any
    untracked ``.png`` images, commits them with a fixed message if the
    working tree changed, and pushes the current branch with tags to origin.
    The SSH key is read from GIT_PRIVATE_SSH_KEY_PATH.

    Args:
        root_files: Documentation source files, e.g. ["index.adoc"]
        git_user_email: Committer email
        git_user_name: Committer name
        repository_path: Root of the Git working tree (default: current directory)

    Returns:
        Dictionary containing:
            - success: Whether the run completed without error
            - outcome: "pushed" or "no_changes"
            - branch: Branch that was pushed
            - commit_hash: SHA of the created commit
            - committed_files: Files included in the commit
            - message: Human-readable status message
            - error: Error message if the run failed
    """
    return execute_publish_documentation(
        root_files, git_user_email, git_user_name, repository_path
    )


def run_stdio_server() -> None:
    """Run the MCP server with stdio transport."""
    mcp.run(transport="stdio")


def main() -> None:
    """Console entry point for the MCP server."""
    # stdout is reserved for the MCP protocol
    setup_logging(log_level=os.getenv("LOG_LEVEL", "INFO"), use_json=False, stream="stderr")
    run_stdio_server()


if __name__ == "__main__":
    main()
