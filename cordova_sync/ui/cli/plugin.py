"""
CLI commands for plugins.

Thin wrappers over ``cordova_sync.core.use_cases``.
"""

from __future__ import annotations

import json

import click

from cordova_sync.ui.cli.helpers import (
    build_options,
    command_options,
    handle_errors,
    make_registry,
    print_result,
    resolve_project_root,
)


@click.group()
def plugin() -> None:
    """Plugins — list, restore, rm."""


@plugin.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
@handle_errors
def plugin_list(ctx: click.Context, as_json: bool) -> None:
    """List declared and installed plugins."""
    from cordova_sync.core.use_cases.status import project_status

    result = project_status(resolve_project_root(ctx))

    if as_json:
        click.echo(json.dumps({
            "plugins": [p.to_dict() for p in result.plugins],
            "undeclared": result.undeclared_plugins,
        }, indent=2))
        return

    if not result.plugins and not result.undeclared_plugins:
        click.secho("No plugins declared or installed.", fg="yellow")
        return

    click.secho("Plugins:", fg="cyan", bold=True)
    for item in result.plugins:
        marker = "✓" if item.installed else "·"
        spec = f" {item.spec}" if item.spec else ""
        click.echo(f"   {marker} {item.name}{spec}")
    for name in result.undeclared_plugins:
        click.echo(f"   ? {name} (installed, not declared)")


@plugin.command("restore")
@click.argument("targets", nargs=-1)
@command_options()
@click.pass_context
@handle_errors
def plugin_restore(
    ctx: click.Context,
    targets: tuple[str, ...],
    save: bool | None,
    searchpath: tuple[str, ...],
    variables: tuple[str, ...],
    dry_run: bool,
    as_json: bool,
) -> None:
    """Add declared plugins that are missing from plugins/."""
    from cordova_sync.core.config.loader import load_settings
    from cordova_sync.core.use_cases.restore import restore_plugins

    project_root = resolve_project_root(ctx)
    settings = load_settings(project_root)
    options = build_options(
        settings, save=save, save_default=False,
        searchpath=searchpath, variables=variables, dry_run=dry_run,
    )

    result = restore_plugins(
        project_root,
        list(targets) or None,
        options=options,
        settings=settings,
        registry=make_registry(ctx, settings, dry_run),
    )
    print_result(result, as_json, quiet=ctx.obj.get("quiet", False))


@plugin.command("rm")
@click.argument("targets", nargs=-1)
@click.option("--force", is_flag=True, help="Forward --force to the uninstall primitives.")
@command_options(searchpath=False)
@click.pass_context
@handle_errors
def plugin_rm(
    ctx: click.Context,
    targets: tuple[str, ...],
    force: bool,
    save: bool | None,
    variables: tuple[str, ...],
    dry_run: bool,
    as_json: bool,
) -> None:
    """Remove plugins from every installed platform and the project."""
    from cordova_sync.core.config.loader import load_settings
    from cordova_sync.core.use_cases.plugin_remove import remove_plugins

    project_root = resolve_project_root(ctx)
    settings = load_settings(project_root)
    options = build_options(
        settings, save=save, save_default=settings.save,
        variables=variables, dry_run=dry_run,
    )
    options.force = force

    result = remove_plugins(
        project_root,
        list(targets),
        options=options,
        settings=settings,
        registry=make_registry(ctx, settings, dry_run),
    )
    print_result(result, as_json, quiet=ctx.obj.get("quiet", False))
