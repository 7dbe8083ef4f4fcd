"""CLI commands for the Javadoc writer.

Provides the Click-based command group 'docwriter' with subcommands
for adding missing Javadoc to a source tree and for listing the
declarations that lack it.
"""

import logging
from pathlib import Path
from typing import Optional

import click

from docwriter import __version__
from docwriter.analysis.scanner import MissingDocScanner
from docwriter.generators.doc_writer import DocWriter
from docwriter.generators.llm_client import LLMClient
from docwriter.parsers.java_parser import JavaParser, ParseError
from docwriter.utils.config import AppConfig, ConfigError, apply_overrides, load_config
from docwriter.utils.files import PersistError, collect_source_files
from docwriter.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def _log_settings(config: AppConfig) -> None:
    """Log the effective settings, never the API key itself."""
    logger.info("model: %s", config.api.model)
    logger.info("srcDir: %s", config.run.src_dir)
    logger.info("maxFilesToChange: %d", config.run.max_files_to_change)
    logger.info("maxErrors: %d", config.run.max_errors)
    logger.info("classDoc: %s", config.docs.class_doc)
    logger.info("publicMethodDoc: %s", config.docs.public_method_doc)
    logger.info("nonPublicMethodDoc: %s", config.docs.non_public_method_doc)
    logger.debug("API key configured: %s", "yes" if config.api.api_key else "no")


def _source_files(config: AppConfig) -> list[Path]:
    """Collect the Java files below the configured source directory.

    Raises:
        click.ClickException: If the source directory cannot be opened.
    """
    try:
        return collect_source_files(
            config.run.src_dir,
            extensions=config.run.extensions,
            exclude_patterns=config.run.exclude_patterns,
        )
    except OSError as e:
        raise click.ClickException(f"Cannot open source directory: {e}") from e


def _echo_missing(config: AppConfig, files: list[Path]) -> int:
    """Print every declaration that would receive documentation.

    Returns:
        Number of declarations listed.
    """
    parser = JavaParser()
    scanner = MissingDocScanner(config.docs)
    missing = 0
    for f in files:
        try:
            source = parser.parse_file(str(f))
        except (ParseError, OSError, UnicodeDecodeError) as e:
            logger.warning("Skipping %s: %s", f, e)
            continue
        for node in scanner.scan(source):
            missing += 1
            click.echo(f"  Missing: {f}:{node.span.start_line} {node.kind.value} {node.name}")
    return missing


_SRC_DIR_OPTION = click.option(
    "--src-dir",
    type=click.Path(file_okay=False),
    default=None,
    envvar="DOCWRITER_SRC_DIR",
    help="Root directory scanned recursively for Java files.",
)
_CLASS_DOC_OPTION = click.option(
    "--class-doc/--no-class-doc",
    default=None,
    envvar="DOCWRITER_CLASS_DOC",
    help="Document undocumented top-level classes and interfaces.",
)
_PUBLIC_METHOD_DOC_OPTION = click.option(
    "--public-method-doc/--no-public-method-doc",
    default=None,
    envvar="DOCWRITER_PUBLIC_METHOD_DOC",
    help="Document undocumented public methods.",
)
_NON_PUBLIC_METHOD_DOC_OPTION = click.option(
    "--non-public-method-doc/--no-non-public-method-doc",
    default=None,
    envvar="DOCWRITER_NON_PUBLIC_METHOD_DOC",
    help="Document undocumented non-public methods.",
)


@click.group()
@click.version_option(version=__version__, prog_name="docwriter")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    envvar="DOCWRITER_CONFIG",
    help="Path to a YAML configuration file.",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default=None,
    envvar="DOCWRITER_LOG_LEVEL",
    help="Logging threshold.",
)
@click.pass_context
def docwriter(ctx: click.Context, config_path: Optional[str], log_level: Optional[str]) -> None:
    """Javadoc writer: add generated Javadoc to undocumented Java code."""
    try:
        config = load_config(config_path)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e
    config = apply_overrides(config, level=log_level.upper() if log_level else None)
    setup_logging(
        level=config.logging.level,
        log_format=config.logging.format,
        log_file=config.logging.file,
    )
    ctx.obj = config


@docwriter.command()
@_SRC_DIR_OPTION
@click.option("--author", default=None, envvar="DOCWRITER_AUTHOR", help="Author for @author tags.")
@click.option("--model", default=None, envvar="DOCWRITER_MODEL", help="Model identifier.")
@click.option(
    "--max-files-to-change",
    type=click.IntRange(min=0),
    default=None,
    envvar="DOCWRITER_MAX_FILES_TO_CHANGE",
    help="Maximum number of files rewritten in this run.",
)
@click.option(
    "--max-errors",
    type=click.IntRange(min=0),
    default=None,
    envvar="DOCWRITER_MAX_ERRORS",
    help="Number of failures tolerated before the run aborts.",
)
@_CLASS_DOC_OPTION
@_PUBLIC_METHOD_DOC_OPTION
@_NON_PUBLIC_METHOD_DOC_OPTION
@click.option("--dry-run", is_flag=True, help="List missing Javadoc without calling the API.")
@click.pass_obj
def write(
    config: AppConfig,
    src_dir: Optional[str],
    author: Optional[str],
    model: Optional[str],
    max_files_to_change: Optional[int],
    max_errors: Optional[int],
    class_doc: Optional[bool],
    public_method_doc: Optional[bool],
    non_public_method_doc: Optional[bool],
    dry_run: bool,
) -> None:
    """Add generated Javadoc to undocumented declarations.

    Rewrites at most --max-files-to-change files in place. Files where
    nothing was documented are left untouched.
    """
    config = apply_overrides(
        config,
        src_dir=src_dir,
        author=author,
        model=model,
        max_files_to_change=max_files_to_change,
        max_errors=max_errors,
        class_doc=class_doc,
        public_method_doc=public_method_doc,
        non_public_method_doc=non_public_method_doc,
    )
    _log_settings(config)

    files = _source_files(config)
    click.echo(f"Found {len(files)} Java files")

    if dry_run:
        missing = _echo_missing(config, files)
        click.echo(f"Found {missing} declarations without Javadoc")
        click.echo("Dry run complete. No API calls made.")
        return

    if not config.api.api_key:
        raise click.ClickException("ANTHROPIC_API_KEY environment variable is not set.")

    writer = DocWriter(config, LLMClient(config=config.api))
    try:
        report = writer.run(files)
    except PersistError as e:
        raise click.ClickException(str(e)) from e

    for path in report.files_changed:
        click.echo(f"  Updated: {path}")
    click.echo(
        f"Documented {len(report.documented)} declarations in "
        f"{len(report.files_changed)} files "
        f"({report.usage.total_tokens} tokens)"
    )

    if not report.succeeded:
        raise click.ClickException(f"Run aborted: {report.aborted.reason}")


@docwriter.command()
@_SRC_DIR_OPTION
@_CLASS_DOC_OPTION
@_PUBLIC_METHOD_DOC_OPTION
@_NON_PUBLIC_METHOD_DOC_OPTION
@click.pass_obj
def scan(
    config: AppConfig,
    src_dir: Optional[str],
    class_doc: Optional[bool],
    public_method_doc: Optional[bool],
    non_public_method_doc: Optional[bool],
) -> None:
    """List declarations that are missing Javadoc.

    Uses the same selection rules as 'write' but never calls the API
    and never modifies files.
    """
    config = apply_overrides(
        config,
        src_dir=src_dir,
        class_doc=class_doc,
        public_method_doc=public_method_doc,
        non_public_method_doc=non_public_method_doc,
    )
    files = _source_files(config)
    click.echo(f"Found {len(files)} Java files")
    missing = _echo_missing(config, files)
    click.echo(f"Found {missing} declarations without Javadoc")
