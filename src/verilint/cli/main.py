"""CLI entry point for verilint.

Invoked as::

    verilint [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m verilint.cli.main

Commands
--------
lint        Run lint rules against Verilog files
rules       List registered rules and their parameters
version     Show version information
"""
from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.markdown import Markdown
from rich.table import Table

if TYPE_CHECKING:
    from verilint.linter.config import RuleSetting
    from verilint.linter.linter import TokenStreamLinter
    from verilint.linter.status import LintRuleStatus

console = Console()
err_console = Console(stderr=True)

EXIT_OK = 0
EXIT_VIOLATIONS = 1
EXIT_ERROR = 2


def _read_source(path: str) -> str | None:
    """Read a source file, reporting failures instead of raising."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        err_console.print(f"[red]Error:[/red] File not found: {path}")
    except (OSError, UnicodeDecodeError) as exc:
        err_console.print(f"[red]Error:[/red] Cannot read {path}: {exc}")
    return None


def _collect_settings(rules: str | None, rules_config: str | None) -> dict[str, "RuleSetting"]:
    """Merge the rules file and the ``--rules`` flag; the flag wins."""
    from verilint.linter.config import load_rules_file, merge_settings, parse_rules_flag

    settings: dict[str, RuleSetting] = {}
    if rules_config:
        settings = load_rules_file(rules_config)
    if rules:
        settings = merge_settings(settings, parse_rules_flag(rules))
    return settings


def _build_linter(rules: str | None, rules_config: str | None, plugins: bool) -> "TokenStreamLinter":
    """Build the linter, exiting with status 2 on any configuration problem."""
    from verilint.linter.config import ConfigurationError
    from verilint.linter.linter import TokenStreamLinter
    from verilint.linter.registry import RuleNotFoundError, default_registry

    try:
        settings = _collect_settings(rules, rules_config)
        return TokenStreamLinter(settings, default_registry(load_plugins=plugins))
    except ConfigurationError as exc:
        err_console.print(f"[red]Configuration error:[/red] {exc}")
    except RuleNotFoundError as exc:
        err_console.print(f"[red]Configuration error:[/red] {exc.args[0]}")
    sys.exit(EXIT_ERROR)


def _violation_rows(path: str, statuses: list["LintRuleStatus"]) -> list[dict[str, object]]:
    rows: list[dict[str, object]] = []
    for status in statuses:
        for violation in status.sorted_violations():
            rows.append({
                "file": path,
                "line": violation.line,
                "col": violation.col,
                "rule": status.rule_name,
                "topic": status.descriptor.topic,
                "message": violation.reason,
            })
    rows.sort(key=lambda r: (r["line"], r["col"], r["rule"]))
    return rows


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="verilint")
def cli() -> None:
    """Token-stream style checks for Verilog and SystemVerilog."""


# ---------------------------------------------------------------------------
# version command
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from verilint import __version__

    table = Table(show_header=False, box=None)
    table.add_row("[bold]verilint[/bold]", f"v{__version__}")
    table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    table.add_row("Platform", sys.platform)
    console.print(table)


# ---------------------------------------------------------------------------
# rules command
# ---------------------------------------------------------------------------


@cli.command(name="rules")
@click.option("--markdown", is_flag=True, default=False, help="Print full help as markdown")
@click.option("--plugins", is_flag=True, default=False, help="Include rules from installed plugins")
def rules_command(markdown: bool, plugins: bool) -> None:
    """List registered rules and their parameters."""
    from verilint.linter.registry import default_registry

    descriptors = default_registry(load_plugins=plugins).descriptors()

    if markdown:
        console.print(Markdown("\n".join(d.to_markdown() for d in descriptors)))
        return

    table = Table(title="Lint rules", show_lines=True)
    table.add_column("Rule", style="bold", min_width=14, no_wrap=True)
    table.add_column("Description")
    table.add_column("Parameters", no_wrap=True)
    for descriptor in descriptors:
        params = "\n".join(f"{p.name} (default: {p.default})" for p in descriptor.params)
        table.add_row(descriptor.name, descriptor.desc, params or "[dim]none[/dim]")
    console.print(table)


# ---------------------------------------------------------------------------
# lint command
# ---------------------------------------------------------------------------


@cli.command(name="lint")
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=False))
@click.option(
    "--rules",
    default=None,
    help="Comma-separated rule selection, e.g. 'explicit-begin=if_enable:false;else_enable:false,-other'",
)
@click.option(
    "--rules-config",
    default=None,
    type=click.Path(exists=False),
    help="YAML rules file; --rules entries override it",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "text", "json"], case_sensitive=False),
    default="table",
    help="Output format",
)
@click.option("--plugins", is_flag=True, default=False, help="Also run rules from installed plugins")
def lint_command(
    files: tuple[str, ...],
    rules: str | None,
    rules_config: str | None,
    output_format: str,
    plugins: bool,
) -> None:
    """Run lint rules against Verilog files.

    FILES are the paths of the .v / .sv files to lint.

    Exit status is 0 when clean, 1 when violations were found and 2 when a
    file could not be read or tokenized or the configuration is invalid.
    """
    from verilint.lexer import LexError

    linter = _build_linter(rules, rules_config, plugins)

    rows: list[dict[str, object]] = []
    failed = False
    for path in files:
        source = _read_source(path)
        if source is None:
            failed = True
            continue
        try:
            statuses = linter.lint_source(source)
        except LexError as exc:
            err_console.print(f"[red]Lex error[/red] in {path}: {exc}")
            failed = True
            continue
        rows.extend(_violation_rows(path, statuses))

    if output_format == "json":
        click.echo(json.dumps(rows, indent=2))
    elif output_format == "text":
        for row in rows:
            click.echo(
                f"{row['file']}:{row['line']}:{row['col']}: {row['message']} "
                f"[Style: {row['topic']}] [{row['rule']}]"
            )
    elif rows:
        table = Table(title="Lint", show_lines=True)
        table.add_column("Location", min_width=12)
        table.add_column("Rule", min_width=14, no_wrap=True)
        table.add_column("Message")
        for row in rows:
            table.add_row(
                f"{row['file']}:{row['line']}:{row['col']}",
                f"[yellow]{row['rule']}[/yellow]",
                str(row["message"]),
            )
        console.print(table)
        console.print(f"\n[bold]{len(rows)}[/bold] lint finding(s)")
    elif not failed:
        console.print(f"[green]OK[/green] {len(files)} file(s), no lint issues found")

    if failed:
        sys.exit(EXIT_ERROR)
    if rows:
        sys.exit(EXIT_VIOLATIONS)


if __name__ == "__main__":
    cli()
