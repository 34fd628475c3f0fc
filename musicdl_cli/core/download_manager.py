"""
The session orchestrator for batch files: reads the track list and runs the
pipeline for each entry with bounded concurrency.
"""

import asyncio
import json
import logging
import time
from pathlib import Path
from typing import Optional

from pydantic import TypeAdapter, ValidationError
from rich.markup import escape

from musicdl_cli.exceptions import ConfigurationError, MusicDlError
from musicdl_cli.models.config import PipelineConfig
from musicdl_cli.models.stats import DownloadStats
from musicdl_cli.models.track import BatchEntry
from musicdl_cli.utils.structured_logger import (
    PipelineLogger,
    SessionLogger,
    StructuredLogger,
)

from .pipeline import DownloadPipeline

log = logging.getLogger(__name__)

_ENTRIES = TypeAdapter(list[BatchEntry])


def load_batch_file(path: Path) -> list[BatchEntry]:
    """
    Reads a JSON array of ``{"url", "name", "artists", "album_name"}`` objects.

    Raises:
        ConfigurationError: If the file is unreadable or malformed.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Could not read batch file '{path}': {e}") from e
    try:
        return _ENTRIES.validate_python(raw)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid batch file '{path}':\n{e}") from e


class DownloadManager:
    """Orchestrates a session of many downloads."""

    def __init__(
        self,
        config: PipelineConfig,
        destination_dir: Path,
        logger: Optional[StructuredLogger] = None,
    ):
        self.config = config
        self.destination_dir = destination_dir
        self.stats = DownloadStats()
        self.start_time = time.monotonic()
        logger = logger or StructuredLogger("musicdl_cli")
        self.session_events = SessionLogger(logger)
        self.pipeline = DownloadPipeline(config, events=PipelineLogger(logger))
        self.semaphore = asyncio.Semaphore(config.max_workers)

    async def execute_downloads(self, entries: list[BatchEntry]) -> DownloadStats:
        """Runs every entry and returns the session statistics."""
        unique = list({(e.url, e.filename): e for e in entries}.values())
        if len(unique) < len(entries):
            log.info(f"Removed {len(entries) - len(unique)} duplicate entries.")
        if not unique:
            log.warning("[yellow]Nothing to download.[/yellow]")
            return self.stats

        self.session_events.session_started(
            len(unique), self.config.max_workers, self.config.transcode
        )
        await asyncio.gather(*(self._process_entry(e) for e in unique))

        self.session_events.session_completed(
            time.monotonic() - self.start_time,
            self.stats.tracks_downloaded,
            self.stats.tracks_failed,
            self.stats.total_size_downloaded / (1024 * 1024),
        )
        return self.stats

    async def _process_entry(self, entry: BatchEntry) -> None:
        async with self.semaphore:
            label = escape(f"{entry.to_track().display_artists} - {entry.name}")
            try:
                job = await self.pipeline.execute(
                    entry.to_track(), entry.url, self.destination_dir, entry.filename
                )
            except MusicDlError as e:
                await self.stats.record_failure(entry.url, str(e))
                log.error(f"  [red]✗ Failed:[/] {label} ({escape(str(e))})")
                return

            size = job.destination_path.stat().st_size
            await self.stats.record_success(size, tagged=bool(job.tagged))
            log.info(
                f"  [green]✓ Saved:[/] [dim]{escape(job.destination_path.name)}[/dim]"
            )
