"""Main CLI entry point for the confluence-export command.

This module provides the Typer application that exports one Confluence
space to a tree of static HTML files with a hierarchical index.html.
"""

import asyncio
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer

from .. import __version__
from ..confluence_client.api_wrapper import APIWrapper
from ..confluence_client.auth import Authenticator
from ..confluence_client.errors import (
    ConfluenceError,
    ExportError,
    InvalidCredentialsError,
    RemoteFetchError,
)
from ..html_export.exporter import ExportResult, SpaceExporter
from ..page_tree.builder import PageTreeBuilder
from ..page_tree.directory import PageDirectory
from ..page_tree.errors import DataInconsistencyError
from .config import ConfigLoader
from .errors import ConfigError
from .models import ExitCode, ExportConfig
from .output import OutputHandler

app = typer.Typer(
    name="confluence-export",
    help="""Export a Confluence space to static HTML files.

EXAMPLE:
  confluence-export --space TEAM --output ./team-mirror

Credentials are read from CONFLUENCE_URL, CONFLUENCE_USER and
CONFLUENCE_API_TOKEN (a .env file in the working directory is honored).""",
    add_completion=False,
    rich_markup_mode=None,
)

logger = logging.getLogger(__name__)

APP_LOGGER_NAME = "confluence_export"


def _configure_logging(verbosity: int, logdir: Optional[str] = None) -> None:
    """Configure logging based on verbosity level.

    Configures only the package logger to avoid affecting third-party
    libraries. The root logger is left unchanged.

    Args:
        verbosity: Verbosity level (0=WARNING, 1=INFO, 2=DEBUG)
        logdir: Optional directory for log files (creates timestamped log file)
    """
    if verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    app_logger = logging.getLogger(APP_LOGGER_NAME)
    app_logger.setLevel(level)

    date_format = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter("%(asctime)s [%(levelname)8s] %(message)s", datefmt=date_format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    app_logger.addHandler(console_handler)

    if logdir:
        log_path = Path(logdir)
        log_path.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_path / f"confluence-export_{timestamp}.log"

        file_formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt=date_format
        )
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(file_formatter)
        app_logger.addHandler(file_handler)

        logger.info(f"Logging to file: {log_file}")


def _run_export(config: ExportConfig, output: OutputHandler) -> ExitCode:
    """Run one export and translate failures into exit codes."""
    output.info(f"Exporting space {config.space_key} to {config.output_dir}")

    try:
        api = APIWrapper(Authenticator())
        directory = PageDirectory(api, config.space_key, page_size=config.page_size)
        builder = PageTreeBuilder(strict=config.strict_hierarchy)

        exporter = SpaceExporter(
            api,
            directory,
            Path(config.output_dir),
            builder=builder,
            include_content=config.include_content,
            include_attachments=config.include_attachments,
        )

        with output.spinner(f"Reading page hierarchy of {config.space_key}..."):
            forest = asyncio.run(exporter.build_tree())

        with output.progress_bar() as progress:
            task = progress.add_task(f"Exporting {config.space_key}", total=None)
            exporter.on_page_exported = lambda node: progress.update(task, advance=1)
            result = asyncio.run(exporter.export(forest))

    except InvalidCredentialsError as e:
        output.error(f"Authentication failed: {e}")
        return ExitCode.AUTH_ERROR

    except RemoteFetchError as e:
        logger.error(f"Hierarchy build aborted at page {e.page_id}: {e}")
        output.error(f"Could not fetch child pages of page {e.page_id}; export aborted")
        if isinstance(e.__cause__, InvalidCredentialsError):
            return ExitCode.AUTH_ERROR
        return ExitCode.NETWORK_ERROR

    except DataInconsistencyError as e:
        output.error(f"Inconsistent page hierarchy: {e}")
        return ExitCode.DATA_INCONSISTENCY

    except ConfluenceError as e:
        output.error(f"Confluence API error: {e}")
        return ExitCode.NETWORK_ERROR

    except ExportError as e:
        output.error(f"Export failed: {e}")
        return ExitCode.GENERAL_ERROR

    except Exception as e:
        logger.exception("Unexpected error during export")
        output.error(f"Unexpected error: {e}")
        return ExitCode.GENERAL_ERROR

    _print_result(result, output, config)
    return ExitCode.SUCCESS


def _print_result(result: ExportResult, output: OutputHandler, config: ExportConfig) -> None:
    stats = result.stats
    output.print_tree(result.forest, config.space_key)
    output.print_summary(
        root_count=len(result.forest),
        page_count=stats.node_count if stats else 0,
        pages_written=result.pages_written,
        attachments_written=result.attachments_written,
        attachments_skipped=len(result.attachments_skipped),
        reassigned_count=stats.reassigned_count if stats else 0,
    )
    for title in result.attachments_skipped:
        output.warning(f"Attachment not exported: {title}")
    output.success(f"Index written to {result.index_path}")


@app.command()
def main_command(
    space: Optional[str] = typer.Option(
        None,
        "--space",
        "-s",
        help="Key of the Confluence space to export",
        metavar="KEY",
    ),
    output_dir: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Export directory (default: ./confluence_pages)",
        metavar="DIR",
    ),
    config_file: Optional[str] = typer.Option(
        None,
        "--config",
        help="YAML configuration file",
        metavar="FILE",
    ),
    no_content: bool = typer.Option(
        False,
        "--no-content",
        help="Only write index.html, skip page files",
    ),
    no_attachments: bool = typer.Option(
        False,
        "--no-attachments",
        help="Do not download attachments",
    ),
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Fail if a page is listed under more than one parent",
    ),
    page_size: Optional[int] = typer.Option(
        None,
        "--page-size",
        help="Batch size for paginated API listings",
    ),
    logdir: Optional[str] = typer.Option(
        None,
        "--logdir",
        help="Directory for log files (creates timestamped log file)",
    ),
    verbosity: int = typer.Option(
        0,
        "--verbosity",
        "-v",
        help="Verbosity level: 0=summary, 1=info, 2=debug",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
    ),
) -> None:
    """Export a Confluence space to static HTML files."""
    if version:
        typer.echo(f"confluence-export version {__version__}")
        raise typer.Exit()

    _configure_logging(verbosity, logdir)
    output = OutputHandler(verbosity=verbosity, no_color=no_color)

    overrides = {
        'space_key': space,
        'output_dir': output_dir,
        'page_size': page_size,
        'include_content': False if no_content else None,
        'include_attachments': False if no_attachments else None,
        'strict_hierarchy': True if strict else None,
    }

    try:
        config = ConfigLoader.resolve(config_file, overrides)
    except ConfigError as e:
        output.error(str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    raise typer.Exit(_run_export(config, output))


def main() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    main()
