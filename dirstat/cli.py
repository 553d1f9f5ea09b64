from __future__ import annotations

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from dirstat.config import (
    DirStatConfig,
    config_path,
    default_log_level,
    load_config,
    normalize_log_level,
    save_config,
)
from dirstat.filters import build_path_filter, relative_status_path
from dirstat.hasher import sorted_status_paths
from dirstat.scanner import MetadataUnavailable
from dirstat.status_service import DirStatusResult, compute_dir_status, digest_matches


app = typer.Typer(help="Metadata fingerprints of directory trees")
console = Console()
err_console = Console(stderr=True)
logger = logging.getLogger("dirstat")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _scan(
    root: str,
    include: tuple[str, ...],
    exclude: tuple[str, ...],
    log_level: str | None,
) -> DirStatusResult | None:
    try:
        config = load_config()
        level = normalize_log_level(log_level) if log_level else config.log_level
    except (OSError, ValueError) as exc:
        err_console.print(f"[red]{escape(str(exc))}[/red]")
        return None

    _configure_logging(level)
    path_filter = build_path_filter(
        [*config.include, *include],
        [*config.exclude, *exclude],
    )
    try:
        return compute_dir_status(root, path_filter=path_filter, log=logger)
    except MetadataUnavailable as exc:
        err_console.print(f"[red]Scan aborted:[/red] {escape(str(exc))}")
        return None


def _render_unreadable(result: DirStatusResult) -> None:
    if not result.unreadable_dirs:
        return
    err_console.print(
        f"[yellow]Skipped {len(result.unreadable_dirs)} unreadable director"
        f"{'y' if len(result.unreadable_dirs) == 1 else 'ies'}:[/yellow]"
    )
    for path in result.unreadable_dirs:
        err_console.print(f"  {escape(path)}")


def _render_status_table(result: DirStatusResult, *, show_serialized: bool) -> None:
    if not result.status_map:
        console.print("[yellow]No files found.[/yellow]")
        return

    table = Table(title=f"Files under {escape(result.root)}")
    table.add_column("Path")
    table.add_column("Mode", justify="right")
    table.add_column("Links", justify="right")
    table.add_column("UID", justify="right")
    table.add_column("GID", justify="right")
    table.add_column("Size", justify="right")
    table.add_column("Time order")
    if show_serialized:
        table.add_column("Serialized")

    for path in sorted_status_paths(result.status_map):
        status = result.status_map[path]
        row = [
            escape(relative_status_path(path, result.root)),
            f"{status.mode:o}",
            str(status.nlink),
            str(status.uid),
            str(status.gid),
            str(status.size),
            status.time_order,
        ]
        if show_serialized:
            row.append(status.serialize())
        table.add_row(*row)

    console.print(table)


IncludeOption = typer.Option(
    None,
    "--include",
    help="Include glob pattern(s), relative to ROOT (repeatable).",
)
ExcludeOption = typer.Option(
    None,
    "--exclude",
    help="Exclude glob pattern(s), relative to ROOT (repeatable).",
)
LogLevelOption = typer.Option(
    None,
    "--log-level",
    help="Logging level (DEBUG, INFO, WARNING, ERROR). Overrides the config file.",
)
StrictOption = typer.Option(
    False,
    "--strict",
    help="Fail when any directory under ROOT could not be opened.",
)


@app.command()
def init(
    force: bool = typer.Option(False, "--force", help="Overwrite an existing config file."),
) -> None:
    """Write a default .dirstat.json in the current directory."""
    path = config_path()
    if path.exists() and not force:
        err_console.print(f"[red]Config file already exists: {path}[/red]")
        raise typer.Exit(code=1)
    try:
        saved = save_config(DirStatConfig(log_level=default_log_level()))
    except (OSError, ValueError) as exc:
        err_console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]Wrote config[/green] {saved}")


@app.command("hash")
def hash_command(
    root: str = typer.Argument(..., help="Directory to fingerprint."),
    include: list[str] | None = IncludeOption,
    exclude: list[str] | None = ExcludeOption,
    log_level: str | None = LogLevelOption,
    strict: bool = StrictOption,
) -> None:
    """Print the SHA-1 fingerprint of every file's metadata under ROOT."""
    result = _scan(root, tuple(include or ()), tuple(exclude or ()), log_level)
    if result is None:
        raise typer.Exit(code=1)

    _render_unreadable(result)
    console.print(result.hexdigest, highlight=False)
    if strict and not result.is_complete:
        raise typer.Exit(code=1)


@app.command()
def status(
    root: str = typer.Argument(..., help="Directory to inspect."),
    include: list[str] | None = IncludeOption,
    exclude: list[str] | None = ExcludeOption,
    log_level: str | None = LogLevelOption,
    show_serialized: bool = typer.Option(
        False,
        "--show-serialized",
        help="Add the exact per-file string that goes into the digest.",
    ),
) -> None:
    """Show the per-file status entries under ROOT and their fingerprint."""
    result = _scan(root, tuple(include or ()), tuple(exclude or ()), log_level)
    if result is None:
        raise typer.Exit(code=1)

    _render_status_table(result, show_serialized=show_serialized)
    _render_unreadable(result)
    console.print(f"Files: {result.file_count}")
    console.print(f"Digest: {result.hexdigest}", highlight=False)


@app.command()
def check(
    root: str = typer.Argument(..., help="Directory to fingerprint."),
    expected: str = typer.Argument(..., help="Previously recorded hex digest."),
    include: list[str] | None = IncludeOption,
    exclude: list[str] | None = ExcludeOption,
    log_level: str | None = LogLevelOption,
    strict: bool = StrictOption,
) -> None:
    """Exit 0 when ROOT still has the EXPECTED fingerprint, 1 otherwise."""
    result = _scan(root, tuple(include or ()), tuple(exclude or ()), log_level)
    if result is None:
        raise typer.Exit(code=1)

    _render_unreadable(result)
    if strict and not result.is_complete:
        err_console.print("[red]Fingerprint is incomplete (--strict).[/red]")
        raise typer.Exit(code=1)

    if digest_matches(result, expected):
        console.print("[green]Unchanged.[/green]")
        return
    console.print(f"[yellow]Changed:[/yellow] {result.hexdigest}", highlight=False)
    raise typer.Exit(code=1)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
