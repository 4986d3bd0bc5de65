"""Command-line interface for the CSS enhancer.

Usage:
    css-enhancer parse styles.css
    css-enhancer enhance design.json styles.css --format json
"""

import io
import json
import sys
from pathlib import Path
from typing import Any

import click

from . import __version__
from .config import load_options
from .design import load_design_tree
from .enhancer import CSSEnhancer
from .enhancer_logging import setup_logging
from .errors import DesignTreeError, handle_exception
from .parser import StylesheetParser
from .reporter import CLIReporter, JSONReporter


def common_options(f: Any) -> Any:
    """Logging options shared by all commands."""
    f = click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")(f)
    f = click.option(
        "--quiet", "-q", is_flag=True, help="Suppress log output on stderr"
    )(f)
    f = click.option(
        "--log-file",
        type=click.Path(dir_okay=False, path_type=Path),
        help="Also write logs to this file (rotated)",
    )(f)
    return f


def output_options(f: Any) -> Any:
    """Report format and destination options."""
    f = click.option(
        "--format",
        "output_format",
        type=click.Choice(["text", "json"]),
        default="text",
        help="Report format",
    )(f)
    f = click.option(
        "--output",
        "-o",
        type=click.Path(dir_okay=False, path_type=Path),
        help="Write the report to a file instead of stdout",
    )(f)
    return f


def _start(verbose: bool, quiet: bool, log_file: Path | None) -> None:
    if quiet and verbose:
        click.echo("Error: --quiet and --verbose are mutually exclusive", err=True)
        sys.exit(1)
    setup_logging(level="WARNING", quiet=quiet, verbose=verbose, log_file=log_file)


def _fail(error: Exception, verbose: bool) -> None:
    use_color = hasattr(sys.stderr, "isatty") and sys.stderr.isatty()
    message, exit_code = handle_exception(error, use_color=use_color, verbose=verbose)
    click.echo(message, err=True)
    sys.exit(exit_code)


def _emit(text: str, output: Path | None) -> None:
    if output is None:
        click.echo(text, nl=False)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    click.echo(f"Report written to {output}", err=True)


def _reporter(output_format: str, stream: io.StringIO, output: Path | None):
    if output_format == "json":
        return JSONReporter(stream)
    use_color = output is None and sys.stdout.isatty()
    return CLIReporter(stream, use_color=use_color)


def _read_design(path: Path) -> Any:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise DesignTreeError(f"Invalid design JSON in {path}: {e}") from e
    return load_design_tree(data)


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """CSS enhancer - map stylesheet rules onto design nodes."""


@cli.command()
@click.argument(
    "stylesheet", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option(
    "--summary", is_flag=True, help="Also list the design tokens the stylesheet uses"
)
@output_options
@common_options
def parse(stylesheet, summary, output_format, output, verbose, quiet, log_file):
    """Parse a stylesheet and list its rules."""
    _start(verbose, quiet, log_file)
    try:
        result = StylesheetParser().parse(stylesheet.read_bytes())
        buffer = io.StringIO()
        reporter = _reporter(output_format, buffer, output)
        reporter.report_parse(result)
        if summary and isinstance(reporter, CLIReporter):
            reporter.report_summary(result.summary)
        _emit(buffer.getvalue(), output)
        if not result.is_valid:
            sys.exit(1)
    except Exception as e:
        _fail(e, verbose)


@cli.command()
@click.argument(
    "design_json", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.argument(
    "stylesheet", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option(
    "--strategy",
    type=click.Choice(["name", "class", "id", "hybrid"], case_sensitive=False),
    help="Selector matching strategy",
)
@click.option(
    "--min-confidence",
    type=click.FloatRange(0.0, 1.0),
    help="Discard mappings below this confidence",
)
@click.option(
    "--max-suggestions", type=click.IntRange(min=0), help="Limit suggestions"
)
@click.option("--ignore-colors", is_flag=True, help="Skip color checks")
@click.option("--ignore-typography", is_flag=True, help="Skip typography checks")
@click.option(
    "--ignore-spacing", is_flag=True, help="Skip spacing, layout and effects checks"
)
@click.option(
    "--no-auto-mapping",
    is_flag=True,
    help="Classify name-less mappings as manual instead of auto",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Options file (default: css-enhancer.config.json)",
)
@output_options
@common_options
def enhance(
    design_json,
    stylesheet,
    strategy,
    min_confidence,
    max_suggestions,
    ignore_colors,
    ignore_typography,
    ignore_spacing,
    no_auto_mapping,
    config_path,
    output_format,
    output,
    verbose,
    quiet,
    log_file,
):
    """Map the rules of STYLESHEET onto the nodes of DESIGN_JSON."""
    _start(verbose, quiet, log_file)
    try:
        options = load_options(config_path=config_path).merged(
            {
                "mapping_strategy": strategy,
                "min_confidence": min_confidence,
                "max_suggestions": max_suggestions,
                "ignore_colors": ignore_colors or None,
                "ignore_typography": ignore_typography or None,
                "ignore_spacing": ignore_spacing or None,
                "enable_auto_mapping": False if no_auto_mapping else None,
            }
        )
        tree = _read_design(design_json)
        result = CSSEnhancer(options).enhance(tree, stylesheet.read_bytes())

        buffer = io.StringIO()
        _reporter(output_format, buffer, output).report(result)
        _emit(buffer.getvalue(), output)
    except Exception as e:
        _fail(e, verbose)


if __name__ == "__main__":
    cli()
