"""CLI entry point for repopick."""

from __future__ import annotations

import asyncio
import fnmatch
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.console import Console
from rich.table import Table
from rich.tree import Tree

from repopick.config import DEFAULT_CONFIG_TEMPLATE, RepopickConfig, load_config
from repopick.logging_setup import configure_logging
from repopick.selection import EmptySelectionError, ProgressEvent, RepoSession, aggregate
from repopick.tree import Node, build_tree, count_nodes, iter_files
from repopick.vcs import VCSError, VCSProvider, create_provider, validate_repo_id
from repopick.vcs.models import RepoSummary

app = typer.Typer(
    name="repopick",
    help="Pick files from your GitHub repositories and combine them into one text document.",
)

config_app = typer.Typer(help="Manage repopick configuration.")
app.add_typer(config_app, name="config")

# Global state
_config: RepopickConfig | None = None

err_console = Console(stderr=True)


def _get_config() -> RepopickConfig:
    if _config is None:
        return load_config()
    return _config


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to repopick.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    configure_logging(_config.log_level, _config.log_format)


def _make_provider(cfg: RepopickConfig) -> VCSProvider:
    try:
        return create_provider(cfg.vcs)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


def _checked_repo_id(repo: str) -> str:
    try:
        validate_repo_id(repo)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    return repo


def _display_repo_list(repos: list[RepoSummary]) -> None:
    """Display the account's repos as a Rich table."""
    table = Table(title=f"Repositories ({len(repos)})")
    table.add_column("Name", style="cyan")
    table.add_column("Visibility")
    table.add_column("Description", style="dim")
    for r in repos:
        table.add_row(
            r.full_name,
            "[yellow]private[/yellow]" if r.private else "public",
            r.description or "-",
        )
    rprint(table)


def _add_children(branch: Tree, node: Node) -> None:
    for child in node.children or []:
        if child.is_dir:
            _add_children(branch.add(f"[bold blue]{child.name}/[/bold blue]"), child)
        else:
            branch.add(child.name)


def _load_tree(provider: VCSProvider, repo_id: str) -> Node:
    """Fetch the flat listing and build the nested tree, warning on truncation."""
    try:
        flat = asyncio.run(provider.get_flat_tree(repo_id))
    except VCSError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    if flat.truncated:
        rprint(
            "[yellow]Warning:[/yellow] the repository listing was truncated upstream; "
            "the tree is incomplete."
        )
    return build_tree(flat.entries, root_name=repo_id)


@app.command()
def repos() -> None:
    """List repositories owned by the authenticated account."""
    cfg = _get_config()
    provider = _make_provider(cfg)
    try:
        result = asyncio.run(provider.list_repos())
    except VCSError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    if not result:
        rprint("[yellow]No repositories found or token lacks permissions.[/yellow]")
        return
    _display_repo_list(result)


@app.command()
def tree(
    repo: str = typer.Argument(..., help="Repository as owner/repo"),
) -> None:
    """Show the repository's default-branch file tree."""
    cfg = _get_config()
    repo_id = _checked_repo_id(repo)
    provider = _make_provider(cfg)
    root = _load_tree(provider, repo_id)

    if not root.children:
        rprint("This repository is empty.")
        return
    display = Tree(f"[bold]{repo_id}[/bold]")
    _add_children(display, root)
    rprint(display)
    dirs, files = count_nodes(root)
    rprint(f"\n[dim]{dirs} directories, {files} files[/dim]")


@app.command()
def combine(
    repo: str = typer.Argument(..., help="Repository as owner/repo"),
    paths: list[str] | None = typer.Argument(None, help="File paths to include"),
    select_all: bool = typer.Option(False, "--all", help="Include every file in the tree"),
    match: list[str] | None = typer.Option(
        None, "--match", "-m", help="Include files matching a glob (repeatable)"
    ),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Write the combined text to a file instead of stdout"
    ),
) -> None:
    """Fetch the selected files and print them as one combined document."""
    cfg = _get_config()
    repo_id = _checked_repo_id(repo)
    provider = _make_provider(cfg)

    session = RepoSession()
    session.switch_repo(*validate_repo_id(repo_id))
    selection = session.selection
    selection.set_all(paths or [], True)
    if select_all or match:
        root = _load_tree(provider, session.repo_id)
        in_view = [n.path for n in iter_files(root)]
        if select_all:
            selection.set_all(in_view, True)
        for pattern in match or []:
            selection.set_all(fnmatch.filter(in_view, pattern), True)

    def _progress(event: ProgressEvent) -> None:
        style = {"fetching": "dim", "done": "green", "error": "red"}[event.kind]
        err_console.print(f"[{style}]{event.describe()}[/{style}]")

    async def _fetch(path: str) -> str:
        return await provider.get_raw_file(session.repo_id, path)

    try:
        doc = asyncio.run(
            aggregate(
                session.repo_id,
                selection,
                _fetch,
                _progress,
                include_header=cfg.output.include_header,
            )
        )
    except EmptySelectionError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if output:
        output.write_text(doc.text + "\n", encoding="utf-8")
        err_console.print(f"[green]Wrote:[/green] {output}")
    else:
        typer.echo(doc.text)

    summary = f"{doc.ok_count} file(s) combined"
    if doc.error_count:
        summary += f", [red]{doc.error_count} failed[/red]"
    err_console.print(summary)


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", help="Bind address"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port to listen on"),
) -> None:
    """Run the local web UI and API proxy."""
    from repopick.server import create_app

    cfg = _get_config()
    provider = _make_provider(cfg)
    bind_host = host or cfg.server.host
    bind_port = port or cfg.server.port
    rprint(f"[bold]repopick[/bold] running on http://{bind_host}:{bind_port}")
    create_app(cfg, provider).run(host=bind_host, port=bind_port, debug=cfg.server.debug)


@config_app.command("init")
def config_init(
    path: str = typer.Option("repopick.yaml", "--path", help="Where to write the config"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
) -> None:
    """Write a default repopick.yaml."""
    dest = Path(path)
    if dest.exists() and not force:
        rprint(f"[yellow]{dest} already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    dest.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {dest}")


@config_app.command("show")
def config_show() -> None:
    """Print the effective configuration as YAML."""
    cfg = _get_config()
    typer.echo(yaml.safe_dump(cfg.model_dump(), default_flow_style=False, sort_keys=False))
