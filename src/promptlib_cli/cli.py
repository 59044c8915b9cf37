"""CLI command definitions using Click."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import click
from rich.console import Console

from promptlib_cli import __version__
from promptlib_cli.config import ConfigManager
from promptlib_cli.content.registry import ContentRegistry
from promptlib_cli.display import Display, configure_logging
from promptlib_cli.errors import LibraryError
from promptlib_cli.globs import normalize_path
from promptlib_cli.manifests.loader import ManifestLoader
from promptlib_cli.manifests.resolver import CollectionResolver
from promptlib_cli.models import ContentKind
from promptlib_cli.validator import LibraryValidator, exit_code


def _root(ctx: click.Context, root: str | None) -> Path:
    config: ConfigManager = ctx.obj["config"]
    return Path(root or config.settings.root)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.option("--config", "-c", "config_path", default=None, help="Custom config file")
@click.option("--json-output", "json_out", is_flag=True, help="Output as JSON")
@click.version_option(__version__, prog_name="promptlib")
@click.pass_context
def main(
    ctx: click.Context,
    verbose: bool,
    config_path: str | None,
    json_out: bool,
) -> None:
    """Prompt library lint tool: validate prompts, instructions, agents and collections."""
    overrides: dict[str, Any] = {}
    if verbose:
        overrides["log_level"] = "DEBUG"

    ctx.ensure_object(dict)
    config = ConfigManager(config_path=config_path, cli_overrides=overrides)
    configure_logging(config.settings.log_level, Console(stderr=True))
    ctx.obj["config"] = config
    ctx.obj["display"] = Display()
    ctx.obj["json_out"] = json_out


@main.command()
@click.argument("root", required=False)
@click.option("--strict", is_flag=True, help="Treat warnings as errors")
@click.pass_context
def validate(ctx: click.Context, root: str | None, strict: bool) -> None:
    """Validate every content file and collection manifest under ROOT."""
    config: ConfigManager = ctx.obj["config"]
    display: Display = ctx.obj["display"]
    settings = config.settings
    library = _root(ctx, root)

    if not library.is_dir():
        display.print_error(f"Not a directory: {library}")
        sys.exit(2)

    report = LibraryValidator(library, settings).run()

    if ctx.obj["json_out"]:
        click.echo(json.dumps(report.to_dict(), indent=2))
    else:
        display.print_report(report)

    sys.exit(exit_code(report, strict=strict or settings.strict))


@main.command("list")
@click.argument("root", required=False)
@click.option(
    "--kind", "-k", type=click.Choice([k.value for k in ContentKind]),
    default=None, help="Only list files of this kind",
)
@click.pass_context
def list_cmd(ctx: click.Context, root: str | None, kind: str | None) -> None:
    """List content files with their descriptions."""
    config: ConfigManager = ctx.obj["config"]
    display: Display = ctx.obj["display"]

    registry = ContentRegistry(_root(ctx, root), config.settings)
    files = registry.list_files(ContentKind(kind) if kind else None)

    if ctx.obj["json_out"]:
        click.echo(
            json.dumps(
                [
                    {
                        "path": f.path,
                        "kind": f.kind.value,
                        "description": f.description,
                        "front_matter": f.front_matter,
                    }
                    for f in files
                ],
                indent=2,
                default=str,
            )
        )
        return

    display.print_content_table(files)


@main.command()
@click.argument("path")
@click.option("--root", "-r", default=None, help="Library root")
@click.pass_context
def show(ctx: click.Context, path: str, root: str | None) -> None:
    """Show the front matter and body of one content file."""
    config: ConfigManager = ctx.obj["config"]
    display: Display = ctx.obj["display"]
    library = _root(ctx, root)

    registry = ContentRegistry(library, config.settings)
    if normalize_path(path) not in registry.known_kinds():
        display.print_error(f"Not a content file in {library}: {path}")
        sys.exit(1)

    try:
        content = registry.loader.load(library / normalize_path(path), library)
    except LibraryError as e:
        display.print_error(str(e))
        sys.exit(1)

    display.print_content(content)


@main.command()
@click.argument("manifest")
@click.option("--root", "-r", default=None, help="Library root")
@click.pass_context
def collection(ctx: click.Context, manifest: str, root: str | None) -> None:
    """Resolve one collection manifest and list its items."""
    config: ConfigManager = ctx.obj["config"]
    display: Display = ctx.obj["display"]
    library = _root(ctx, root)

    manifest_path = Path(manifest)
    if not manifest_path.is_absolute() and not manifest_path.is_file():
        manifest_path = library / manifest

    try:
        parsed = ManifestLoader().load(manifest_path, library)
    except LibraryError as e:
        display.print_error(str(e))
        sys.exit(1)

    registry = ContentRegistry(library, config.settings)
    resolver = CollectionResolver(registry.known_kinds())
    problems = resolver.problems(parsed)
    if problems:
        for problem in problems:
            display.print_error(str(problem))
        sys.exit(1)

    items = resolver.display_order(parsed)
    if ctx.obj["json_out"]:
        click.echo(
            json.dumps(
                {
                    "id": parsed.id,
                    "name": parsed.name,
                    "description": parsed.description,
                    "tags": parsed.tags,
                    "items": [{"path": i.path, "kind": i.kind.value} for i in items],
                },
                indent=2,
            )
        )
        return

    display.print_collection(parsed, items)


@main.command("applies-to")
@click.argument("target")
@click.option("--root", "-r", default=None, help="Library root")
@click.pass_context
def applies_to(ctx: click.Context, target: str, root: str | None) -> None:
    """List instruction files whose applyTo glob matches TARGET."""
    config: ConfigManager = ctx.obj["config"]
    display: Display = ctx.obj["display"]

    registry = ContentRegistry(_root(ctx, root), config.settings)
    found = registry.instructions_for(target)

    if ctx.obj["json_out"]:
        click.echo(json.dumps([f.path for f in found], indent=2))
        return

    if not found:
        display.print_info(f"No instructions apply to {target}")
        return
    display.print_content_table(found)


@main.group("config")
@click.pass_context
def config_cmd(ctx: click.Context) -> None:
    """View configuration."""


@config_cmd.command("get")
@click.argument("key")
@click.pass_context
def config_get(ctx: click.Context, key: str) -> None:
    """Get a config value."""
    config: ConfigManager = ctx.obj["config"]
    value = config.get(key)
    if value is None:
        click.echo(f"Key '{key}' not found")
    else:
        click.echo(f"{key} = {value}")


@config_cmd.command("show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Show the merged configuration."""
    config: ConfigManager = ctx.obj["config"]
    for key, value in sorted(config.raw.items()):
        click.echo(f"{key} = {value}")
