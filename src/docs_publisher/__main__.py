"""Entry point for ``python -m docs_publisher``."""

from docs_publisher.cli import main


if __name__ == "__main__":
    main()
