"""Command line entry point used by build pipelines.

Examples:
    docs-publisher --root-file index.adoc --email doc-bot@example.com --username doc-bot
    DOCS_ROOT_FILES=index.adoc,guide.adoc python -m docs_publisher --json-logs

Exit codes:
    0: Documentation pushed, or nothing to commit
    1: Publish failed (configuration, repository, Git or push error)
"""

import sys
from typing import Optional, Tuple

import click

from docs_publisher import __version__
from docs_publisher.config import SSH_KEY_ENV_VAR, VALID_LOG_LEVELS, PublisherConfig
from docs_publisher.exceptions import PublishError
from docs_publisher.logging_config import get_logger, set_run_id, setup_logging
from docs_publisher.publisher import publish

logger = get_logger(__name__)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--root-file", "root_files", multiple=True,
    help="Documentation source file whose rendered output is committed (repeatable).",
)
@click.option("--email", help="Committer email (default: $GIT_USER_EMAIL).")
@click.option("--username", help="Committer name (default: $GIT_USER_NAME).")
@click.option(
    "--repo", "repo_path", default=None,
    help="Root of the Git working tree (default: current directory).",
)
@click.option(
    "--ssh-key", "ssh_key_path",
    help=f"SSH private key used for the push (default: ${SSH_KEY_ENV_VAR}).",
)
@click.option("--env-file", type=click.Path(dir_okay=False), default=None,
              help="Load environment variables from this .env file first.")
@click.option(
    "--log-level", default=None,
    type=click.Choice(VALID_LOG_LEVELS, case_sensitive=False),
    help="Logging level (default: $LOG_LEVEL or INFO).",
)
@click.option("--json-logs", is_flag=True, help="Emit structured JSON log lines.")
@click.version_option(__version__, prog_name="docs-publisher")
def main(
    root_files: Tuple[str, ...],
    email: Optional[str],
    username: Optional[str],
    repo_path: Optional[str],
    ssh_key_path: Optional[str],
    env_file: Optional[str],
    log_level: Optional[str],
    json_logs: bool,
) -> None:
    """Commit and push rendered documentation to the current branch."""
    config = PublisherConfig.from_env(
        env_file=env_file,
        root_files=root_files,
        email=email,
        username=username,
        repo_path=repo_path,
        ssh_key_path=ssh_key_path,
        log_level=log_level,
    )

    setup_logging(
        log_level=config.log_level if config.log_level in VALID_LOG_LEVELS else "INFO",
        use_json=json_logs,
        stream="stderr",
    )
    set_run_id()

    try:
        result = publish(config)
    except PublishError as e:
        logger.error("Documentation publish failed", extra={"error": str(e)})
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(result.message)
