"""Entry point for the Javadoc writer.

Delegates to the Click command group, which loads configuration and
sets up logging before running a subcommand.
"""

from docwriter.cli.commands import docwriter


def main() -> None:
    """Launch the CLI."""
    docwriter()


if __name__ == "__main__":
    main()
