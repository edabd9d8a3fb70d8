"""b2upload CLI - upload files to Backblaze B2."""
import asyncio
import logging
import time
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from .. import __version__, setup_logging
from ..client import B2Uploader
from ..core.exceptions import AuthError, ConfigError
from .files import collect_files
from .profile import find_config_file, load_config_file, resolve_profile, search_paths

app = typer.Typer(
    name="b2upload",
    help="Upload files to a Backblaze B2 bucket used as an image host",
    add_completion=False
)
console = Console()
err_console = Console(stderr=True)


def run_async(coro):
    """Run async function."""
    return asyncio.run(coro)


def _version_callback(value: bool):
    if value:
        console.print(f"b2upload version: {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool):
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)]
    )
    setup_logging(level)


@app.command(no_args_is_help=True)
def upload(
    paths: List[str] = typer.Argument(..., help="Files, directories or glob patterns"),
    tag: Optional[str] = typer.Option(None, "--tag", "-t", help="Profile tag to use (overrides tag.default)"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to b2upload.toml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
):
    """Upload files, skipping those already in the bucket."""
    _configure_logging(verbose)
    start_time = time.time()
    
    config_file = config_path or find_config_file(search_paths())
    
    try:
        data = load_config_file(config_file, required=config_path is not None)
        profile = resolve_profile(data, tag)
        config = profile.to_config()
    except ConfigError as e:
        err_console.print(f"[red]Configuration error: {e}[/red]")
        raise typer.Exit(1)
    
    target = config.public_url or "B2 download URL"
    console.print(f"Using profile [bold][{profile.tag}][/bold] (user: {config.owner}, URL: {target})")
    
    files = collect_files(
        paths,
        on_error=lambda pattern, e: err_console.print(f"[yellow]Warning: cannot expand {pattern}: {e}[/yellow]")
    )
    
    async def do_upload():
        async with B2Uploader(config) as uploader:
            await uploader.authorize()
            if not files:
                return []
            console.print(f"Found {len(files)} files, uploading...")
            return await uploader.upload_files(files)
    
    try:
        results = run_async(do_upload())
    except AuthError as e:
        err_console.print(f"[red]B2 authorization failed: {e}[/red]")
        raise typer.Exit(1)
    
    if not files:
        console.print("No files found to upload.")
        return
    
    success_count = 0
    for result in results:
        name = result.local_path.name
        if result.error is not None:
            console.print(f"[red]Failed[/red] {name}: {result.error}")
        else:
            note = " [dim](already uploaded)[/dim]" if result.skipped else ""
            console.print(f"[green]Uploaded[/green] {name} -> {result.public_url}{note}")
            success_count += 1
    
    duration = time.time() - start_time
    if success_count == len(files):
        console.print(f"All {success_count} files uploaded in {duration:.2f}s")
    else:
        console.print(
            f"Done. {success_count} succeeded, {len(files) - success_count} failed in {duration:.2f}s"
        )


def main():
    app()


if __name__ == "__main__":
    main()
