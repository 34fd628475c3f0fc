"""
Functions for formatting and displaying data in the console using Rich.
"""

from pathlib import Path
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from musicdl_cli.exceptions import MusicDlError
from musicdl_cli.models.stats import DownloadStats

_SIZE_UNITS = ("B", "KB", "MB", "GB")

SUGGESTIONS = {
    "tool": [
        "• Install yt-dlp (https://github.com/yt-dlp/yt-dlp) and FFmpeg.",
        "• Or set 'extractor_path' / 'ffmpeg_path' in the configuration file.",
        "• Run `musicdl diagnose` to see which tool is missing.",
    ],
    "platform": [
        "• Set 'extractor_path' in the configuration file explicitly.",
    ],
    "extraction": [
        "• Check that the URL plays in a browser.",
        "• Update yt-dlp: `yt-dlp -U`.",
        "• Increase --timeout for long videos.",
    ],
    "transcode": [
        "• Check that FFmpeg was built with libmp3lame.",
        "• Retry with --no-transcode to keep yt-dlp's own mp3.",
    ],
    "move": [
        "• Check that the output directory exists and is writable.",
    ],
    "fetch": [
        "• A network connection issue occurred or the URL is wrong.",
        "• Please try again in a few minutes.",
    ],
    "config": [
        "• Fix the value named above or run `musicdl init --force`.",
    ],
    "write": [
        "• Check that the temp directory and the output path are writable.",
        "• Set 'temp_dir' in the configuration file to another directory.",
    ],
}


def format_size(size: float) -> str:
    """Formats a byte count as e.g. '7.4 MB'."""
    if size <= 0:
        return "0 B"
    for unit in _SIZE_UNITS[:-1]:
        if size < 1024:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} {_SIZE_UNITS[-1]}"


def format_duration(seconds: float) -> str:
    """Formats a duration as e.g. '1m 05s' or '12s'."""
    minutes, secs = divmod(int(seconds), 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}h {minutes:02d}m {secs:02d}s"
    if minutes:
        return f"{minutes}m {secs:02d}s"
    return f"{secs}s"


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    kind = error.kind if isinstance(error, MusicDlError) else None

    suggestions = SUGGESTIONS.get(
        kind, ["• Run the command with -vv for detailed logs."]
    )

    error_text = Text()
    error_text.append(f"{error_type}: ", style="bold red")
    error_text.append(str(error))

    content = Table.grid(padding=(1, 0))
    content.add_row(error_text)
    content.add_row()
    content.add_row(Text("Suggestions", style="bold yellow"))
    content.add_row(Text("\n".join(suggestions)))

    if context:
        content.add_row()
        content.add_row(Text(f"Context: {context}", style="dim"))

    return Panel(
        content,
        title="[bold red]An Error Occurred[/bold red]",
        border_style="red",
        expand=False,
    )


def print_config(config_path: Path, config_data: dict[str, Any]):
    """Displays the current configuration, hiding sensitive data."""
    console = Console()
    content = ""
    for key, value in sorted(config_data.items()):
        if key == "auth_password" and value:
            value = "[hidden]"
        content += f"{key} = {value}\n"

    console.print(
        Panel(
            content.strip(),
            title=f"Configuration ([dim]{config_path}[/dim])",
            border_style="cyan",
        )
    )


def print_summary_panel(stats: DownloadStats, duration_s: float):
    """Displays the final summary of a batch session."""
    console = Console()

    stats_table = Table(show_header=False, box=None, padding=(0, 2))
    stats_table.add_column(style="bold cyan", justify="right", width=20)
    stats_table.add_column(style="white", justify="left")

    stats_table.add_row(
        "✓ Downloaded:", f"[bold green]{stats.tracks_downloaded}[/bold green]"
    )
    if stats.untagged > 0:
        stats_table.add_row("⚠ Untagged:", f"[yellow]{stats.untagged}[/yellow]")
    if stats.tracks_failed > 0:
        stats_table.add_row("✗ Failed:", f"[bold red]{stats.tracks_failed}[/bold red]")

    stats_table.add_row("", "")
    stats_table.add_row("Total Size:", format_size(stats.total_size_downloaded))
    stats_table.add_row("Duration:", format_duration(duration_s))

    border = "green" if stats.tracks_failed == 0 else "yellow"
    console.print(
        Panel(
            stats_table,
            title="[bold]Session Summary[/bold]",
            border_style=border,
            expand=False,
        )
    )

    if stats.failures:
        failures = Table(title="Failures", show_lines=False)
        failures.add_column("URL", style="cyan", overflow="fold")
        failures.add_column("Reason", style="red", overflow="fold")
        for url, reason in stats.failures:
            failures.add_row(url, reason)
        console.print(failures)
