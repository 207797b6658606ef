"""
CLI commands for platforms.

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
def platform() -> None:
    """Platforms — list, restore, rm."""


@platform.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
@handle_errors
def platform_list(ctx: click.Context, as_json: bool) -> None:
    """List declared and installed platforms."""
    from cordova_sync.core.use_cases.status import project_status

    result = project_status(resolve_project_root(ctx))

    if as_json:
        click.echo(json.dumps({
            "platforms": [p.to_dict() for p in result.platforms],
            "undeclared": result.undeclared_platforms,
        }, indent=2))
        return

    if not result.platforms and not result.undeclared_platforms:
        click.secho("No platforms declared or installed.", fg="yellow")
        return

    click.secho("Platforms:", fg="cyan", bold=True)
    for item in result.platforms:
        marker = "✓" if item.installed else "·"
        spec = f" {item.spec}" if item.spec else ""
        click.echo(f"   {marker} {item.name}{spec}")
    for name in result.undeclared_platforms:
        click.echo(f"   ? {name} (installed, not declared)")


@platform.command("restore")
@click.argument("targets", nargs=-1)
@command_options(variables=False)
@click.pass_context
@handle_errors
def platform_restore(
    ctx: click.Context,
    targets: tuple[str, ...],
    save: bool | None,
    searchpath: tuple[str, ...],
    dry_run: bool,
    as_json: bool,
) -> None:
    """Add declared platforms that are missing from platforms/."""
    from cordova_sync.core.config.loader import load_settings
    from cordova_sync.core.use_cases.restore import restore_platforms

    project_root = resolve_project_root(ctx)
    settings = load_settings(project_root)
    options = build_options(
        settings, save=save, save_default=False,
        searchpath=searchpath, dry_run=dry_run,
    )

    result = restore_platforms(
        project_root,
        list(targets) or None,
        options=options,
        settings=settings,
        registry=make_registry(ctx, settings, dry_run),
    )
    print_result(result, as_json, quiet=ctx.obj.get("quiet", False))


@platform.command("rm")
@click.argument("targets", nargs=-1)
@command_options(searchpath=False, variables=False)
@click.pass_context
@handle_errors
def platform_rm(
    ctx: click.Context,
    targets: tuple[str, ...],
    save: bool | None,
    dry_run: bool,
    as_json: bool,
) -> None:
    """Remove platforms (and, with --save, their declarations)."""
    from cordova_sync.core.config.loader import load_settings
    from cordova_sync.core.use_cases.platform_remove import remove_platforms

    project_root = resolve_project_root(ctx)
    settings = load_settings(project_root)
    options = build_options(
        settings, save=save, save_default=settings.save,
        dry_run=dry_run,
    )

    result = remove_platforms(
        project_root,
        list(targets),
        options=options,
        settings=settings,
        registry=make_registry(ctx, settings, dry_run),
    )
    print_result(result, as_json, quiet=ctx.obj.get("quiet", False))
