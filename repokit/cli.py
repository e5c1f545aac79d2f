"""CLI entry point for RepoKit."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from repokit import __version__
from repokit import config as repokit_config
from repokit.config import get_settings, load_settings
from repokit.errors import RepoKitError
from repokit.git import GitRepository, classify_path, resolve_git_binary
from repokit.utils.logging import setup_logging

app = typer.Typer(
    name="repokit",
    help="Inspect and create local git repositories",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold]RepoKit[/bold] version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration file",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output",
    ),
    version: bool = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """RepoKit - drive local git repositories."""
    try:
        settings = load_settings(config_path=config, force_reload=config is not None)
    except RepoKitError as e:
        console.print(f"[red]Configuration error:[/red] {e.message}")
        raise typer.Exit(1)

    setup_logging(
        level=settings.logging.level,
        log_file=settings.logging.resolved_file,
        verbose=verbose,
    )


def _open(path: Path) -> GitRepository:
    """Open a repository or exit with the error."""
    try:
        return GitRepository.open(path)
    except RepoKitError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1)


def _print_list(title: str, items: list[str], empty: str) -> None:
    if not items:
        console.print(f"[dim]{empty}[/dim]")
        return

    table = Table(title=title)
    table.add_column("Name", style="cyan")
    for item in items:
        table.add_row(item)
    console.print(table)


@app.command()
def init(
    path: Path = typer.Argument(..., help="Repository directory"),
    remote: Optional[str] = typer.Option(None, "--remote", "-r", help="Clone this repository"),
    bare: bool = typer.Option(False, "--bare", help="Make the clone bare"),
) -> None:
    """Open a repository, creating or cloning it if needed."""
    try:
        repo = GitRepository(path, create=True, remote=remote, bare=bare)
    except RepoKitError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Ready:[/green] {repo.path} ({repo.kind.value})")


@app.command()
def info(
    path: Path = typer.Argument(Path("."), help="Path to inspect"),
) -> None:
    """Show what kind of repository a path is."""
    state = classify_path(path)
    if state.kind is None:
        console.print(f"[yellow]{path}[/yellow]: {state.value.replace('_', ' ')}")
        raise typer.Exit(1)

    repo = _open(path)
    try:
        description = repo.description.strip()
    except (OSError, UnicodeDecodeError):
        description = "-"

    console.print(Panel(f"[bold]{repo.path}[/bold]", border_style="blue"))
    console.print(f"  Kind:        {repo.kind.value}")
    console.print(f"  Git dir:     {repo.git_dir}")
    console.print(f"  Description: {description or '-'}")


@app.command()
def branches(
    path: Path = typer.Argument(Path("."), help="Repository path"),
    remote: bool = typer.Option(False, "--remote", "-r", help="List remote-tracking branches"),
) -> None:
    """List branches, marking the active one."""
    repo = _open(path)
    try:
        if remote:
            _print_list("Remote Branches", repo.list_remote_branches(), "No remote branches.")
            return

        names = repo.list_branches(keep_marker=True)
    except RepoKitError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1)

    if not names:
        console.print("[dim]No branches yet.[/dim]")
        return

    table = Table(title="Branches")
    table.add_column("", justify="center")
    table.add_column("Name", style="cyan")
    for name in names:
        active = name.startswith("* ")
        table.add_row(
            "[green]*[/green]" if active else "",
            name[2:] if active else name,
        )
    console.print(table)


@app.command()
def tags(
    path: Path = typer.Argument(Path("."), help="Repository path"),
    pattern: Optional[str] = typer.Option(None, "--pattern", "-p", help="Shell wildcard filter"),
) -> None:
    """List tags."""
    repo = _open(path)
    try:
        names = repo.list_tags(pattern)
    except RepoKitError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1)

    _print_list("Tags", names, "No tags found.")


@app.command()
def remotes(
    path: Path = typer.Argument(Path("."), help="Repository path"),
) -> None:
    """List registered remotes."""
    repo = _open(path)
    try:
        found = repo.list_remotes()
    except RepoKitError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1)

    if not found:
        console.print("[dim]No remotes configured.[/dim]")
        return

    table = Table(title="Remotes")
    table.add_column("Name", style="cyan")
    table.add_column("URL", style="green")
    table.add_column("Direction", style="yellow")
    for remote in found:
        table.add_row(remote.name, remote.url, remote.direction.name.lower())
    console.print(table)


@app.command()
def status(
    path: Path = typer.Argument(Path("."), help="Repository path"),
    no_untracked: bool = typer.Option(False, "--no-untracked", help="Hide untracked files"),
) -> None:
    """Show `git status` for a repository."""
    repo = _open(path)
    try:
        output = repo.status(exclude_untracked=no_untracked)
    except RepoKitError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1)

    console.print(output.rstrip(), markup=False, highlight=False)


@app.command()
def config(
    init: bool = typer.Option(False, "--init", help="Write a default config file"),
) -> None:
    """Show current configuration."""
    if init:
        config_file = repokit_config.CONFIG_FILE
        if repokit_config.create_default_config():
            console.print(f"[green]Created[/green] {config_file}")
        else:
            console.print(f"[yellow]Already exists:[/yellow] {config_file}")
        return

    settings = get_settings()
    git = settings.get_git_config()

    console.print(Panel("[bold]Current Configuration[/bold]", border_style="blue"))

    console.print("\n[bold]Git:[/bold]")
    console.print(f"  Binary:        {resolve_git_binary(git.binary)}")
    console.print(f"  Timeout:       {git.timeout if git.timeout else 'none'}")
    console.print(f"  Graceful fail: {git.graceful_fail}")
    if git.env:
        console.print(f"  Environment:   {', '.join(sorted(git.env))}")

    console.print("\n[bold]Logging:[/bold]")
    console.print(f"  Level: {settings.logging.level}")
    console.print(f"  File:  {settings.logging.resolved_file or '-'}")


if __name__ == "__main__":
    app()
