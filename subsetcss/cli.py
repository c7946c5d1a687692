"""
CLI commands for subsetcss.

Provides the `subsetcss` command-line interface for running the language
server, previewing completions and validating subset configuration files.
"""

import json
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from config.defaults import DEFAULT_CONFIG_FILENAME, get_example_subset_config
from config.loader import ConfigLoadError, SubsetConfigLoader
from core import __version__
from core.models.config import ServerSettings
from core.resolution.pipeline import CompletionResolver, ResolutionPath
from subsetcss.logging_setup import setup_logging

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="subsetcss")
def main():
    """
    subsetcss CLI.

    Complete CSS values from the subset a project's configuration allows.
    """
    pass


@main.command()
@click.option('--tcp', metavar='HOST:PORT', help='Listen on TCP instead of stdio')
@click.option(
    '--log-level',
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
    help='Override SUBSETCSS_LOG_LEVEL'
)
@click.option('--watch-config', is_flag=True, help='Reload the config file when it changes on disk')
def serve(tcp: Optional[str], log_level: Optional[str], watch_config: bool):
    """Run the language server."""
    from subsetcss.lsp_server.server import main as run_server

    overrides = {}
    if log_level:
        overrides["log_level"] = log_level
    if watch_config:
        overrides["watch_config"] = True
    settings = ServerSettings(**overrides)

    try:
        run_server(tcp=tcp, settings=settings)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--tcp")


@main.command()
@click.argument('file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--line', '-l', type=int, required=True, help='Zero-based cursor line')
@click.option(
    '--config', '-c', 'config_path',
    type=click.Path(dir_okay=False, path_type=Path),
    help=f'Subset config file (default: {DEFAULT_CONFIG_FILENAME} in the current directory)'
)
@click.option('--json', 'as_json', is_flag=True, help='Print completion items as JSON')
@click.option('--verbose', '-v', is_flag=True, help='Log resolution details to stderr')
def complete(file: Path, line: int, config_path: Optional[Path], as_json: bool, verbose: bool):
    """Show the completions offered at a line of a stylesheet."""
    setup_logging("DEBUG" if verbose else "WARNING")

    loader = SubsetConfigLoader()
    path = loader.resolve_path(config_path, Path.cwd())
    try:
        config = loader.load(path)
    except ConfigLoadError as e:
        console.print(f"[red]❌ {e}[/red]")
        sys.exit(1)

    text = file.read_text(encoding='utf-8')
    resolver = CompletionResolver()
    resolution = resolver.explain(text, line, config)
    items = resolver.resolve(text, line, config)

    if as_json:
        click.echo(json.dumps([item.to_dict() for item in items], indent=2))
        return

    if resolution.path == ResolutionPath.NO_DECLARATION:
        console.print(f"[yellow]⚠️  No declaration at line {line}[/yellow]")
        return

    scope_label = "override" if resolution.is_override else "root"
    if resolution.path == ResolutionPath.FALLBACK:
        console.print(f"[dim]Parse failed ({resolution.parse_error}), using line fallback[/dim]")

    table = Table(title=f"{resolution.prop or '?'} ({scope_label} scope)")
    table.add_column("Sort", style="dim", no_wrap=True)
    table.add_column("Value", style="cyan")
    table.add_column("Kind", style="white")
    for item in items:
        table.add_row(item.sort_key, item.label, item.kind.value)

    if items:
        console.print(table)
    else:
        console.print(f"[yellow]No subset values for {resolution.prop or 'this line'}[/yellow]")


@main.command('check-config')
@click.argument('path', type=click.Path(path_type=Path), default=DEFAULT_CONFIG_FILENAME)
def check_config(path: Path):
    """Validate a subset configuration file."""
    loader = SubsetConfigLoader()
    try:
        config = loader.load(path)
    except ConfigLoadError as e:
        console.print(f"[red]❌ {e.path}[/red]")
        console.print(f"[red]{e.message}[/red]")
        sys.exit(1)

    table = Table(title=f"Subset config: {path}")
    table.add_column("Scope", style="cyan", no_wrap=True)
    table.add_column("Property", style="white")
    table.add_column("Values", style="dim")

    for prop, values in config.subsets.items():
        table.add_row("root", prop, ", ".join(values))

    for name, scopes in config.overrides.items():
        for scope in scopes:
            params = ", ".join(
                f"{key}: {value if isinstance(value, str) else ' | '.join(value)}"
                for key, value in scope.params.items()
            )
            for prop, values in scope.subsets.items():
                table.add_row(f"{name} ({params})", prop, ", ".join(values))

    console.print(table)
    console.print("[green]✅ Config is valid[/green]")


@main.command()
@click.option('--force', '-f', is_flag=True, help='Overwrite an existing config file')
@click.option(
    '--path', 'config_path',
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_CONFIG_FILENAME,
    help='Where to write the config file'
)
def init(force: bool, config_path: Path):
    """Write a starter subset configuration."""
    if config_path.exists() and not force:
        console.print("[yellow]⚠️  Config already exists. Use --force to overwrite.[/yellow]")
        return

    try:
        with open(config_path, 'w', encoding='utf-8') as f:
            json.dump(get_example_subset_config(), f, indent=2)
            f.write("\n")
    except OSError as e:
        console.print(f"[red]❌ Failed to write config: {e}[/red]")
        sys.exit(1)

    console.print(f"[green]✅ Created {config_path}[/green]")


if __name__ == "__main__":
    main()
