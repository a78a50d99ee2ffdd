"""Main CLI entry point and application setup."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import click
from click.exceptions import Exit
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from bibcheck import __version__
from bibcheck.cli.config import OUTPUT_FORMATS, CheckSettings, load_config
from bibcheck.core.models import BibDatabase, BibDatabaseMode
from bibcheck.exceptions import ConfigError
from bibcheck.integrity.check import IntegrityCheck
from bibcheck.integrity.reporting import IntegrityReport, get_reporter
from bibcheck.storage.files import FileDirectoryPreferences
from bibcheck.storage.parser import BibtexParser, ParseError

logger = logging.getLogger(__name__)

EXIT_ISSUES = 1
EXIT_USAGE = 2


@dataclass
class Context:
    """CLI context that holds shared resources."""

    console: Console
    settings: CheckSettings = field(default_factory=CheckSettings)
    config: dict | None = None
    debug: bool = False


def setup_logging(
    verbose: bool = False, quiet: bool = False, debug: bool = False
) -> None:
    """Configure logging based on CLI flags."""
    if quiet:
        level = logging.WARNING
    elif verbose or debug:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s"
        if not debug
        else "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def create_console(no_color: bool = False, width: int | None = None) -> Console:
    """Create Rich console with appropriate settings."""
    return Console(
        no_color=no_color,
        width=width or 120,
        highlight=not no_color,
        color_system=None if no_color else "auto",
    )


class BibcheckGroup(click.Group):
    """Custom group that handles KeyboardInterrupt and unexpected errors."""

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except KeyboardInterrupt:
            console = getattr(ctx.obj, "console", None) if ctx.obj else None
            if console:
                console.print("[yellow]Interrupted[/yellow]")
            ctx.exit(130)
        except (click.ClickException, click.Abort, Exit, SystemExit):
            raise
        except Exception as e:
            debug = getattr(ctx.obj, "debug", False) if ctx.obj else False
            if debug:
                raise
            console = getattr(ctx.obj, "console", None) if ctx.obj else None
            if console:
                console.print(f"[red]Error:[/red] {escape(str(e))}")
            else:
                click.echo(f"Error: {e}", err=True)
            ctx.exit(1)


@click.group(cls=BibcheckGroup)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-error output")
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.option("--debug", is_flag=True, help="Enable debug mode with full tracebacks")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file",
)
@click.version_option(
    version=__version__, prog_name="bibcheck", message="bibcheck version %(version)s"
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    no_color: bool,
    debug: bool,
    config: Path | None,
) -> None:
    """Bibliography integrity checker.

    Reports malformed names, unbalanced braces, unprotected capitals, bad
    years and page ranges, stray macro delimiters, encoded characters,
    broken links and invalid ISSN/ISBN numbers.
    """
    setup_logging(verbose=verbose, quiet=quiet, debug=debug)
    console = create_console(no_color=no_color)

    try:
        config_data = load_config(config)
        settings = CheckSettings.from_config(config_data)
    except ConfigError as e:
        if debug:
            raise
        console.print(f"[red]Error loading configuration:[/red] {escape(str(e))}")
        ctx.exit(EXIT_USAGE)

    ctx.obj = Context(
        console=console, settings=settings, config=config_data, debug=debug
    )


def _load_database(
    obj: Context, bibfile: Path, biblatex: bool | None
) -> BibDatabase:
    """Read a bibliography and settle its mode.

    An explicit flag wins over the file's own database type, which wins over
    the configured default.
    """
    parser = BibtexParser(default_mode=obj.settings.mode or BibDatabaseMode.BIBTEX)
    database = parser.parse_file(bibfile)

    for error in parser.errors:
        style = "red" if error.severity == "error" else "yellow"
        obj.console.print(f"[{style}]{escape(str(error))}[/{style}]")

    if biblatex is not None:
        database.mode = BibDatabaseMode.BIBLATEX if biblatex else BibDatabaseMode.BIBTEX
    logger.debug(f"Loaded {len(database.entries)} entries from {bibfile}")
    return database


def _print_table(console: Console, report: IntegrityReport) -> None:
    if not report.has_issues:
        console.print(
            f"[green]✓[/green] No issues found in {report.total_entries} entries"
        )
        return

    table = Table(title=f"Integrity issues in {escape(report.source or '')}")
    table.add_column("Entry", style="bold")
    table.add_column("Field", style="blue")
    table.add_column("Message")

    for message in report.messages:
        table.add_row(
            escape(message.entry_key), escape(message.field), escape(message.message)
        )

    console.print(table)
    console.print(
        f"\n[bold]Summary:[/bold] {len(report.messages)} issue(s) in "
        f"{len(report.entries_with_issues)} of {report.total_entries} entries"
    )


@cli.command()
@click.argument(
    "bibfile", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option(
    "--biblatex/--bibtex",
    "biblatex",
    default=None,
    help="Force the bibliography dialect (default: from file or config)",
)
@click.option(
    "--file-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory to search for linked files",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(OUTPUT_FORMATS),
    default=None,
    help="Output format",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the report to a file",
)
@click.option(
    "--workers",
    type=click.IntRange(min=1),
    default=1,
    show_default=True,
    help="Check entries in parallel threads",
)
@click.pass_obj
def check(
    obj: Context,
    bibfile: Path,
    biblatex: bool | None,
    file_dir: Path | None,
    output_format: str | None,
    output: Path | None,
    workers: int,
) -> None:
    """Check a bibliography file for integrity problems.

    Exits with status 1 when issues are found.
    """
    console = obj.console
    ctx = click.get_current_context()

    try:
        database = _load_database(obj, bibfile, biblatex)
    except ParseError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        ctx.exit(EXIT_USAGE)

    preferences = obj.settings.file_preferences
    if file_dir is not None:
        preferences = FileDirectoryPreferences(
            main_file_directory=file_dir,
            field_directories=preferences.field_directories,
            bib_location_as_primary=preferences.bib_location_as_primary,
        )

    checker = IntegrityCheck(
        database,
        file_preferences=preferences,
        field_properties=obj.settings.field_properties,
    )
    report = IntegrityReport(
        messages=checker.check_database(workers=workers),
        total_entries=len(database.entries),
        mode=database.mode.value,
        source=str(bibfile),
    )

    output_format = output_format or obj.settings.format
    if output_format == "table":
        if output is not None:
            get_reporter("markdown").save(report, output)
            console.print(f"Report written to {escape(str(output))}")
        else:
            _print_table(console, report)
    else:
        reporter = get_reporter(output_format)
        if output is not None:
            reporter.save(report, output)
            console.print(f"Report written to {escape(str(output))}")
        else:
            click.echo(reporter.format(report))

    if report.has_issues:
        ctx.exit(EXIT_ISSUES)


@cli.command("checkers")
@click.option(
    "--biblatex/--bibtex", "biblatex", default=False, help="Dialect to list for"
)
@click.pass_obj
def list_checkers(obj: Context, biblatex: bool) -> None:
    """List the checkers applied to each entry, in order."""
    mode = BibDatabaseMode.BIBLATEX if biblatex else BibDatabaseMode.BIBTEX
    checker = IntegrityCheck(
        BibDatabase(mode=mode), field_properties=obj.settings.field_properties
    )

    table = Table(title=f"Checkers ({mode.value} mode)")
    table.add_column("#", justify="right")
    table.add_column("Checker", style="bold")
    table.add_column("Description")
    for index, item in enumerate(checker.checkers(), start=1):
        doc = (type(item).__doc__ or "").strip().splitlines()
        table.add_row(str(index), escape(repr(item)), escape(doc[0] if doc else ""))
    obj.console.print(table)


def main() -> None:
    cli(prog_name="bibcheck")


if __name__ == "__main__":
    main()
