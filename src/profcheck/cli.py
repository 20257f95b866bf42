"""Command-line interface for profcheck."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer

from profcheck import __version__
from profcheck.api import check
from profcheck.config import ConfigError, load_config
from profcheck.loader import DocumentDecodeError

# Exit codes
EXIT_OK = 0
EXIT_FINDINGS = 1
EXIT_ERROR = 2

app = typer.Typer(
    name="profcheck",
    help="Verify that an OTLP profiles document conforms with the signal schema requirements",
    add_completion=False,
)


@app.command(name="check")
def check_cmd(
    file: Annotated[Path, typer.Argument(help="Path to a ProfilesData document (binary protobuf, .json or .yaml)")],
    check_dupes: Annotated[
        Optional[bool],
        typer.Option(
            "--check-dupes/--no-check-dupes",
            help="Enable check for duplicates in the dictionary",
            show_default=False,
        ),
    ] = None,
    check_sample_shapes: Annotated[
        Optional[bool],
        typer.Option(
            "--check-sample-shapes/--no-check-sample-shapes",
            help="Enable check for sample shapes",
            show_default=False,
        ),
    ] = None,
    config_file: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="YAML/JSON file with checker options"),
    ] = None,
    format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format (text, console, json)"),
    ] = "text",
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Write the JSON report to this file"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Enable debug logging"),
    ] = False,
) -> None:
    """Check a profiles document for structural conformance."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if format not in ("text", "console", "json"):
        typer.echo(f"Error: Unknown format: {format}", err=True)
        raise typer.Exit(EXIT_ERROR)

    if not file.exists():
        typer.echo(f"Error: File not found: {file}", err=True)
        raise typer.Exit(EXIT_ERROR)

    try:
        config = load_config(
            config_file,
            check_dictionary_duplicates=check_dupes,
            check_sample_timestamp_shape=check_sample_shapes,
        )
        report = check(file, config)
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(EXIT_ERROR)
    except DocumentDecodeError as e:
        typer.echo(f"Failed to read file {file} as ProfilesData: {e}", err=True)
        raise typer.Exit(EXIT_ERROR)
    except OSError as e:
        typer.echo(f"Error reading file: {e}", err=True)
        raise typer.Exit(EXIT_ERROR)

    if output:
        output.write_text(report.to_json())

    if format == "json":
        if not output:
            typer.echo(report.to_json())
    elif format == "console":
        report.print()
    elif report.is_valid:
        typer.echo(f"{file}: conformance checks passed")
    else:
        typer.echo(f"{file}: conformance checks failed:")
        typer.echo(report.render())

    if report.has_findings:
        raise typer.Exit(EXIT_FINDINGS)


@app.command(name="version")
def version_cmd() -> None:
    """Print the profcheck version."""
    typer.echo(f"profcheck {__version__}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
