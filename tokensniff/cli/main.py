"""TokenSniff command-line interface.

Commands:
    check   Run the rules over files and directories
    init    Write a default configuration file
    rules   List the builtin rules
    tokens  Dump the token stream of a file
"""

from __future__ import annotations

import json
from pathlib import Path

import click

from tokensniff import __version__
from tokensniff.config import SnifferConfig
from tokensniff.constants import CONFIG_DIR_NAME, CONFIG_FILE_NAME
from tokensniff.rules.registry import RULE_CLASSES, available_rules
from tokensniff.services.check_service import CheckService, read_error
from tokensniff.tokens.backends import BACKEND_NAMES
from tokensniff.tokens.orchestrator import TokenizerOrchestrator
from tokensniff.tokens.types import TokenKind
from tokensniff.types.errors import TokenSniffError
from tokensniff.utils.logger import configure_logging, logger
from tokensniff.utils.report_formatter import ReportFormat, format_report
from tokensniff.utils.serialization import serialize_to_primitives

EXIT_OK = 0
EXIT_FINDINGS = 1
EXIT_ERROR = 1
EXIT_USAGE = 2


def _fail(error: TokenSniffError, code: int = EXIT_USAGE) -> None:
    click.echo(error.get_formatted_message(), err=True)
    raise SystemExit(code)


def _load_config(config_path: str | None) -> SnifferConfig:
    if config_path is not None:
        return SnifferConfig.load(config_path)
    return SnifferConfig.discover()


@click.group(invoke_without_command=True)
@click.option("--version", is_flag=True, help="Show version and exit.")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, version: bool, verbose: bool) -> None:
    """TokenSniff - Token-stream static analysis for PHP.

    Finds nullable class properties that are never initialized, plus a
    few comment conventions.
    """
    configure_logging(verbose)

    if version:
        click.echo(f"TokenSniff v{__version__}")
        ctx.exit(EXIT_OK)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# ============================================================================
# check
# ============================================================================


@cli.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path())
@click.option(
    "--format",
    "output_format",
    type=click.Choice([f.value for f in ReportFormat]),
    default=ReportFormat.TEXT.value,
    show_default=True,
    help="Report format.",
)
@click.option("--rule", "rules", multiple=True, help="Only run this rule (repeatable).")
@click.option("--exclude", "excludes", multiple=True, help="Skip this rule (repeatable).")
@click.option(
    "--tokenizer",
    type=click.Choice(list(BACKEND_NAMES)),
    default=None,
    help="Preferred tokenizer backend.",
)
@click.option("--jobs", "-j", type=int, default=None, help="Files to analyse in parallel.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to a config.json file.",
)
def check(
    paths: tuple[str, ...],
    output_format: str,
    rules: tuple[str, ...],
    excludes: tuple[str, ...],
    tokenizer: str | None,
    jobs: int | None,
    config_path: str | None,
) -> None:
    """Check PHP files and report diagnostics.

    Exits with 1 when findings or unreadable files are reported, 2 on
    configuration errors.
    """
    try:
        config = _load_config(config_path).with_overrides(
            rules=list(rules) or None,
            exclude=list(excludes) or None,
            tokenizer=tokenizer,
            jobs=jobs,
        )
    except TokenSniffError as e:
        _fail(e)
        return

    report = CheckService(config).check_paths(paths)
    click.echo(format_report(report, output_format))

    if report.has_findings or report.errors:
        raise SystemExit(EXIT_FINDINGS)


# ============================================================================
# init
# ============================================================================


@cli.command()
@click.argument("path", default=".", type=click.Path(file_okay=False))
@click.option("--force", is_flag=True, help="Overwrite an existing configuration.")
def init(path: str, force: bool) -> None:
    """Initialize TokenSniff configuration in a project."""
    root = Path(path)
    config_file = root / CONFIG_DIR_NAME / CONFIG_FILE_NAME
    if config_file.exists() and not force:
        click.echo(f"Already initialized: {config_file} (use --force to overwrite)")
        return

    try:
        written = SnifferConfig().save(root)
    except TokenSniffError as e:
        _fail(e)
        return

    logger.debug("Wrote {}", written)
    click.echo(f"TokenSniff initialized: {written}")


# ============================================================================
# rules
# ============================================================================


@cli.command("rules")
def list_rules() -> None:
    """List the builtin rules."""
    for name in available_rules():
        click.echo(f"{name}")
        click.echo(f"    {RULE_CLASSES[name].description}")


# ============================================================================
# tokens
# ============================================================================


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--tokenizer",
    type=click.Choice(list(BACKEND_NAMES)),
    default="lexer",
    show_default=True,
    help="Tokenizer backend.",
)
@click.option("--json", "as_json", is_flag=True, help="Emit JSON.")
@click.option("--all", "show_all", is_flag=True, help="Include whitespace tokens.")
def tokens(file: str, tokenizer: str, as_json: bool, show_all: bool) -> None:
    """Dump the token stream of FILE."""
    try:
        content = Path(file).read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        _fail(read_error(file, e, operation="tokens"), code=EXIT_ERROR)
        return

    try:
        stream = TokenizerOrchestrator(preferred=tokenizer).tokenize(content, file)
    except TokenSniffError as e:
        _fail(e, code=EXIT_ERROR)
        return

    selected = [t for t in stream if show_all or t.kind is not TokenKind.WHITESPACE]
    if as_json:
        click.echo(json.dumps(serialize_to_primitives(selected), indent=2))
        return

    for token in selected:
        click.echo(f"{token.index:>5} {token.line:>4}:{token.column:<4} {token.kind:<16} {token.text!r}")


if __name__ == "__main__":
    cli()
