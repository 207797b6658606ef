"""
Shared CLI helpers — project resolution, option decorators, report output.
"""

from __future__ import annotations

import functools
import json
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

from cordova_sync.core.errors import CordovaSyncError


def resolve_project_root(ctx: click.Context) -> Path:
    """Project root from --project, else auto-detected from the CWD."""
    from cordova_sync.core.config.loader import require_project_root

    project_dir: Path | None = ctx.obj.get("project_dir")
    return require_project_root(project_dir)


def parse_variables(values: tuple[str, ...]) -> dict[str, str]:
    """``("API_KEY=abc", ...)`` → ``{"API_KEY": "abc"}``."""
    variables: dict[str, str] = {}
    for raw in values:
        name, sep, value = raw.partition("=")
        if not sep or not name.strip():
            raise click.BadParameter(f"expected KEY=VALUE, got '{raw}'", param_hint="--variable")
        variables[name.strip().upper()] = value
    return variables


def command_options(*, searchpath: bool = True, variables: bool = True) -> Callable[[Callable], Callable]:
    """Options shared by restore and rm commands.

    ``--searchpath`` and ``--variable`` are only attached to commands
    that forward them.
    """
    decorators = [
        click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON."),
        click.option("--dry-run", is_flag=True, help="Validate and report without changing anything."),
    ]
    if variables:
        decorators.append(click.option(
            "--variable", "variables", multiple=True, metavar="KEY=VALUE",
            help="Plugin variable (repeatable).",
        ))
    if searchpath:
        decorators.append(click.option(
            "--searchpath", multiple=True, type=click.Path(),
            help="Local directory to search for plugins/platforms (repeatable).",
        ))
    decorators.append(click.option(
        "--save/--nosave", "save", default=None,
        help="Persist changes to config.xml and package.json.",
    ))

    def apply(func: Callable) -> Callable:
        for decorator in decorators:
            func = decorator(func)
        return func

    return apply


def build_options(
    settings: Any,
    *,
    save: bool | None,
    save_default: bool,
    searchpath: tuple[str, ...] = (),
    variables: tuple[str, ...] = (),
    dry_run: bool = False,
) -> Any:
    from cordova_sync.core.models.options import CommandOptions

    return CommandOptions(
        save=save_default if save is None else save,
        searchpath=list(searchpath) or list(settings.searchpath),
        cli_variables=parse_variables(variables),
        dry_run=dry_run,
    )


def make_registry(ctx: click.Context, settings: Any, dry_run: bool) -> Any:
    from cordova_sync.core.use_cases.common import create_registry

    return create_registry(settings, mock_mode=ctx.obj.get("mock", False), dry_run=dry_run)


def handle_errors(func: Callable) -> Callable:
    """Print CordovaSyncError in red and exit 1."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except CordovaSyncError as e:
            click.secho(f"❌ {e}", fg="red", err=True)
            sys.exit(1)

    return wrapper


_STATUS_MARKERS = {
    "ok": ("✓", "green"),
    "skipped": ("⊘", "bright_black"),
    "failed": ("✗", "red"),
}


def print_result(result: Any, as_json: bool, quiet: bool = False) -> None:
    """Render a CommandResult and exit with its exit code."""
    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(result.exit_code)

    report = result.report
    for reconciled in result.reconciled:
        for name in reconciled.migrated:
            click.echo(f"   ↪ {name}: config.xml → package.json")
        for name in reconciled.backfilled:
            click.echo(f"   ↩ {name}: package.json → config.xml")

    for outcome in report.outcomes:
        if quiet and not outcome.failed:
            continue
        marker, color = _STATUS_MARKERS[outcome.status]
        click.secho(f"   {marker} {outcome.name}", fg=color, nl=False)
        if outcome.failed:
            click.echo(f"  [{outcome.step}] {outcome.error}")
        elif outcome.reason:
            click.echo(f"  ({outcome.reason})")
        else:
            click.echo()

    status_color = {"ok": "green", "partial": "yellow", "failed": "red"}[report.status]
    click.echo()
    click.secho(
        f"{report.operation}: {report.succeeded} ok, {report.skipped} skipped, {report.failed} failed",
        fg=status_color,
        bold=True,
    )
    sys.exit(result.exit_code)
