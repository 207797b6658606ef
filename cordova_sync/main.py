"""
cordova-sync — CLI entrypoint.

Usage:
    cordova-sync --help
    cordova-sync status
    cordova-sync restore
    cordova-sync plugin rm cordova-plugin-camera --save
"""

from __future__ import annotations

import json
import os
from pathlib import Path

import click

from cordova_sync import __version__
from cordova_sync.core.observability.logging_config import (
    ENV_FILE,
    ENV_FILE_LEVEL,
    resolve_level,
    setup_logging,
)
from cordova_sync.ui.cli.helpers import (
    build_options,
    command_options,
    handle_errors,
    make_registry,
    print_result,
    resolve_project_root,
)
from cordova_sync.ui.cli.platform import platform
from cordova_sync.ui.cli.plugin import plugin


@click.group()
@click.version_option(version=__version__, prog_name="cordova-sync")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--project",
    "-C",
    "project_dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Cordova project directory (default: auto-detect from CWD).",
)
@click.option("--mock", is_flag=True, help="Simulate cordova/npm/hook primitives.")
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    project_dir: str | None,
    mock: bool,
) -> None:
    """cordova-sync — keep config.xml, package.json and the project on disk in step."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["project_dir"] = Path(project_dir) if project_dir else None
    ctx.obj["mock"] = mock

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=resolve_level(verbose=verbose, quiet=quiet, debug=debug),
        log_file=os.environ.get(ENV_FILE),
        log_file_level=os.environ.get(ENV_FILE_LEVEL),
        quiet_third_party=not debug,
    )


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
@handle_errors
def status(ctx: click.Context, as_json: bool) -> None:
    """Show declared platforms/plugins and what is installed."""
    from cordova_sync.core.use_cases.status import project_status

    result = project_status(resolve_project_root(ctx))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    if not ctx.obj.get("quiet", False):
        title = result.display_name or result.package_name or result.project_root.name
        click.secho(f"\n📱 {title}", fg="cyan", bold=True)
        if result.package_name:
            click.echo(f"   {result.package_name} {result.version or ''}".rstrip())
        click.echo()

    for label, items in (("Platforms", result.platforms), ("Plugins", result.plugins)):
        click.secho(f"   {label}: {len(items)}", fg="white", bold=True)
        for item in items:
            marker = "✓" if item.installed else "·"
            spec = f" {item.spec}" if item.spec else ""
            stores = []
            if not item.in_descriptor:
                stores.append("not in config.xml")
            if not item.in_manifest:
                stores.append("not in package.json")
            note = f"  ({', '.join(stores)})" if stores else ""
            click.echo(f"     {marker} {item.name}{spec}{note}")

    undeclared = result.undeclared_platforms + result.undeclared_plugins
    if undeclared:
        click.echo()
        click.secho("⚠️  Installed but not declared:", fg="yellow")
        for name in undeclared:
            click.echo(f"     • {name}")

    if result.missing:
        click.echo()
        click.echo(f"   {len(result.missing)} declared item(s) not installed — run `cordova-sync restore`")
    click.echo()


@cli.command()
@command_options()
@click.pass_context
@handle_errors
def restore(
    ctx: click.Context,
    save: bool | None,
    searchpath: tuple[str, ...],
    variables: tuple[str, ...],
    dry_run: bool,
    as_json: bool,
) -> None:
    """Restore every declared platform, then every declared plugin."""
    from cordova_sync.core.config.loader import load_settings
    from cordova_sync.core.use_cases.restore import restore_all

    project_root = resolve_project_root(ctx)
    settings = load_settings(project_root)
    options = build_options(
        settings, save=save, save_default=False,
        searchpath=searchpath, variables=variables, dry_run=dry_run,
    )

    result = restore_all(
        project_root,
        options=options,
        settings=settings,
        registry=make_registry(ctx, settings, dry_run),
    )
    print_result(result, as_json, quiet=ctx.obj.get("quiet", False))


cli.add_command(platform)
cli.add_command(plugin)


if __name__ == "__main__":
    cli()
