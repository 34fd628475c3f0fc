"""
Defines the command-line interface for the application using Typer.
"""

import asyncio
import logging
import os
import shutil
import time
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from musicdl_cli import __version__
from musicdl_cli.core.download_manager import DownloadManager, load_batch_file
from musicdl_cli.core.pipeline import DownloadPipeline
from musicdl_cli.exceptions import MusicDlError
from musicdl_cli.media.fetcher import close_connection_pool, fetch_buffer, save_buffer
from musicdl_cli.models.config import PipelineConfig
from musicdl_cli.models.track import TrackDescriptor
from musicdl_cli.storage.config_manager import ConfigManager
from musicdl_cli.tools.locator import (
    is_tool_installed,
    locate_extractor,
    require_tool,
)
from musicdl_cli.utils.path import create_dir
from musicdl_cli.utils.structured_logger import PipelineLogger, StructuredLogger

from .formatters import (
    format_duration,
    format_error_with_suggestions,
    format_size,
    print_config,
    print_summary_panel,
)

console = Console()

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            show_level=False,
            markup=True,
        )
    ],
)
log = logging.getLogger("musicdl_cli")

app = typer.Typer(
    name="musicdl",
    help=(
        "Download audio with yt-dlp, re-encode it with FFmpeg and tag it. Use "
        "'musicdl <command> --help' for more info."
    ),
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)


def get_config_dir() -> Path:
    if os.name == "nt":
        base_dir = Path(os.getenv("APPDATA", "~\\AppData\\Roaming"))
    else:
        base_dir = Path(os.getenv("XDG_CONFIG_HOME", "~/.config"))
    return base_dir.expanduser() / "musicdl-cli"


CONFIG_DIR = get_config_dir()
CONFIG_FILE = CONFIG_DIR / "config.ini"

_log_dir: Optional[Path] = None


def _structured_logger() -> StructuredLogger:
    return StructuredLogger(
        "musicdl_cli", log_dir=_log_dir, enable_json=_log_dir is not None
    )


def _load_config(cli_options: dict) -> PipelineConfig:
    options = {k: v for k, v in cli_options.items() if v is not None}
    return ConfigManager(CONFIG_FILE).load_config(options)


def _fail(error: MusicDlError) -> None:
    console.print(format_error_with_suggestions(error))
    raise typer.Exit(code=1)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-vv for debug).",
    ),
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", is_eager=True
    ),
    show_config: bool = typer.Option(
        False, "--show-config", help="Display the current configuration."
    ),
    log_dir: Optional[Path] = typer.Option(
        None, "--log-dir", help="Also write JSON-lines event logs to this directory."
    ),
):
    """musicdl command-line interface"""
    global _log_dir

    if version:
        console.print(f"[bold]musicdl-cli[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()

    log_level = "INFO"
    if verbose >= 2:
        log_level = "DEBUG"
    logging.getLogger("musicdl_cli").setLevel(log_level)
    _log_dir = log_dir

    if show_config:
        try:
            config = ConfigManager(CONFIG_FILE).load_config()
        except MusicDlError as e:
            _fail(e)
        print_config(CONFIG_FILE, config.model_dump())
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@app.command()
def init(
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite an existing configuration file."
    ),
    extractor_path: Optional[str] = typer.Option(
        None, "--yt-dlp", help="Path to the yt-dlp executable."
    ),
    ffmpeg_path: Optional[str] = typer.Option(
        None, "--ffmpeg", help="Path to the ffmpeg executable."
    ),
):
    """Write a configuration file with default settings."""
    if (
        CONFIG_FILE.exists()
        and not force
        and not typer.confirm("Configuration file already exists. Overwrite it?")
    ):
        raise typer.Abort()

    settings = {
        "extractor_path": extractor_path or shutil.which("yt-dlp"),
        "ffmpeg_path": ffmpeg_path or shutil.which("ffmpeg") or "ffmpeg",
    }
    try:
        ConfigManager(CONFIG_FILE).save_new_config(
            {k: v for k, v in settings.items() if v}
        )
    except MusicDlError as e:
        _fail(e)
    console.print(f"\n[bold green]✓ Configuration saved to '{CONFIG_FILE}'[/bold green]")
    console.print(
        "Ready to download! Try: [cyan]musicdl download <URL> --title ... "
        "--artist ...[/cyan]"
    )


@app.command(name="download")
def download_command(
    url: str = typer.Argument(..., help="Page to extract the audio from."),
    title: str = typer.Option("", "--title", "-t", help="Track title."),
    artists: Optional[list[str]] = typer.Option(  # noqa: B008
        None, "--artist", "-a", help="Track artist. Repeat for several artists."
    ),
    album: str = typer.Option("", "--album", help="Album name."),
    output_dir: Path = typer.Option(  # noqa: B008
        Path("."), "-o", "--output-dir", help="Directory to save the file in."
    ),
    filename: Optional[str] = typer.Option(
        None, "--filename", help="File name. Defaults to '<artists> - <title>.mp3'."
    ),
    transcode: Optional[bool] = typer.Option(
        None,
        "--transcode/--no-transcode",
        help="Re-encode yt-dlp's output with FFmpeg at --bitrate.",
    ),
    bitrate: Optional[int] = typer.Option(
        None, "-b", "--bitrate", help="Target mp3 bitrate in kbps (default 320)."
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="Seconds before an external tool is killed."
    ),
    cover_url: Optional[str] = typer.Option(
        None, "--cover-url", help="Image to embed as cover art."
    ),
):
    """Download a single track."""
    try:
        config = _load_config(
            {
                "transcode": transcode,
                "bitrate_kbps": bitrate,
                "timeout_s": timeout,
                "embed_cover": True if cover_url else None,
            }
        )
    except MusicDlError as e:
        _fail(e)

    track = TrackDescriptor(
        name=title, artists=artists or [], album_name=album, cover_url=cover_url
    )
    create_dir(output_dir)

    logger = _structured_logger()

    async def _download_async() -> Path:
        pipeline = DownloadPipeline(config, events=PipelineLogger(logger))
        try:
            with console.status(f"[cyan]Downloading {escape(url)}...[/cyan]"):
                return await pipeline.run(track, url, output_dir, filename)
        finally:
            await close_connection_pool()
            logger.close()

    start_time = time.monotonic()
    try:
        final_path = asyncio.run(_download_async())
    except MusicDlError as e:
        _fail(e)

    console.print(
        f"[green]✓ Saved[/green] [dim]{escape(str(final_path))}[/dim] "
        f"({format_size(final_path.stat().st_size)}, "
        f"{format_duration(time.monotonic() - start_time)})"
    )


@app.command()
def batch(
    batch_file: Path = typer.Argument(  # noqa: B008
        ...,
        help="JSON array of {url, name, artists, album_name} objects.",
        exists=True,
        dir_okay=False,
    ),
    output_dir: Path = typer.Option(  # noqa: B008
        Path("."), "-o", "--output-dir", help="Directory to save the files in."
    ),
    workers: Optional[int] = typer.Option(
        None, "-w", "--workers", help="Number of simultaneous downloads."
    ),
    transcode: Optional[bool] = typer.Option(
        None, "--transcode/--no-transcode", help="Re-encode with FFmpeg."
    ),
):
    """Download every track listed in a JSON batch file."""
    try:
        config = _load_config({"max_workers": workers, "transcode": transcode})
        entries = load_batch_file(batch_file)
    except MusicDlError as e:
        _fail(e)

    create_dir(output_dir)
    logger = _structured_logger()
    manager = DownloadManager(config, output_dir, logger=logger)

    async def _batch_async():
        try:
            return await manager.execute_downloads(entries)
        finally:
            await close_connection_pool()
            logger.close()

    console.print(
        f"[bold cyan]🎵 Starting download session ({len(entries)} tracks)...[/bold cyan]"
    )
    start_time = time.monotonic()
    stats = asyncio.run(_batch_async())
    print_summary_panel(stats, time.monotonic() - start_time)
    if stats.tracks_failed:
        raise typer.Exit(code=1)


@app.command()
def fetch(
    url: str = typer.Argument(..., help="URL of the resource to fetch."),
    output: Path = typer.Argument(..., help="Where to write it."),  # noqa: B008
):
    """Fetch a remote file (for example cover art) to disk."""

    async def _fetch_async() -> int:
        try:
            buffer = await fetch_buffer(url)
            await save_buffer(buffer, output)
            return len(buffer)
        finally:
            await close_connection_pool()

    try:
        size = asyncio.run(_fetch_async())
    except MusicDlError as e:
        _fail(e)
    console.print(f"[green]✓ Saved {format_size(size)} to[/green] [dim]{output}[/dim]")


@app.command()
def diagnose():
    """Check that the configuration and the external tools are usable."""
    console.print("\n[bold cyan]Running diagnostics...[/bold cyan]\n")
    issues_found = False

    try:
        config = ConfigManager(CONFIG_FILE).load_config()
        console.print("[green]✓[/] Configuration is valid.")
    except MusicDlError as e:
        console.print(f"[red]✗ Configuration validation failed: {e}[/red]")
        raise typer.Exit(code=1) from e

    try:
        extractor = require_tool(locate_extractor(config.extractor_path))
        console.print(f"[green]✓[/] yt-dlp runs: [dim]{extractor}[/dim]")
    except MusicDlError as e:
        console.print(f"[red]✗ {e}[/red]")
        issues_found = True

    if is_tool_installed(config.ffmpeg_path, version_flag="-version"):
        console.print(f"[green]✓[/] FFmpeg runs: [dim]{config.ffmpeg_path}[/dim]")
    elif config.transcode:
        console.print(f"[red]✗ FFmpeg not found at '{config.ffmpeg_path}'.[/red]")
        issues_found = True
    else:
        console.print("[yellow]○ FFmpeg not found (transcoding is disabled).[/yellow]")

    try:
        temp_dir = config.resolved_temp_dir()
        console.print(f"[green]✓[/] Temp directory: [dim]{temp_dir}[/dim]")
    except OSError as e:
        console.print(f"[red]✗ Temp directory unusable: {e}[/red]")
        issues_found = True

    console.print()
    if not issues_found:
        console.print(
            "[bold green]✓ All checks passed! Your setup looks good.[/bold green]\n"
        )
    else:
        console.print(
            "[bold red]✗ Some issues were found. "
            "Please review the messages above.[/bold red]\n"
        )
        raise typer.Exit(code=1)
