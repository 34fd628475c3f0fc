"""
Handles the processing of a single track, from extraction to placement.
"""

import asyncio
import logging
import os
import time
from pathlib import Path
from typing import Optional

from musicdl_cli.exceptions import ExtractionError, FetchError, MusicDlError
from musicdl_cli.media.extractor import extract
from musicdl_cli.media.fetcher import fetch_buffer
from musicdl_cli.media.tagger import Tagger, TagPayload
from musicdl_cli.media.transcoder import transcode
from musicdl_cli.models.config import PipelineConfig
from musicdl_cli.models.job import DownloadJob, PipelineState
from musicdl_cli.models.track import TrackDescriptor
from musicdl_cli.storage.placement import place
from musicdl_cli.utils.path import is_http_url, output_filename
from musicdl_cli.utils.structured_logger import PipelineLogger, StructuredLogger

log = logging.getLogger(__name__)


class DownloadPipeline:
    """
    Orchestrates extraction, optional transcoding, tagging and placement of
    a single track.

    Stages run strictly one after another. Each call to :meth:`execute`
    creates its own job, so one pipeline can serve concurrent callers.
    """

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        tagger: Optional[Tagger] = None,
        events: Optional[PipelineLogger] = None,
    ):
        self.config = config or PipelineConfig()
        self.tagger = tagger or Tagger()
        self.events = events or PipelineLogger(StructuredLogger("musicdl_cli"))

    async def run(
        self,
        track: TrackDescriptor,
        source_url: str,
        destination_dir: str | os.PathLike,
        filename: Optional[str] = None,
    ) -> Path:
        """Runs the pipeline and returns the path of the placed file."""
        job = await self.execute(track, source_url, destination_dir, filename)
        return job.destination_path

    async def execute(
        self,
        track: TrackDescriptor,
        source_url: str,
        destination_dir: str | os.PathLike,
        filename: Optional[str] = None,
    ) -> DownloadJob:
        """
        Manages the complete lifecycle of one download.

        Returns:
            The finished job, in state DONE.

        Raises:
            ExtractionError: If yt-dlp fails or the URL is unusable.
            TranscodeError: If FFmpeg fails.
            MoveError: If the file cannot be placed at its destination.
            MusicDlError: With kind "write" if the temp directory is unusable.
        """
        config = self.config
        try:
            temp_dir = config.resolved_temp_dir()
        except OSError as e:
            raise MusicDlError(f"Temp directory is unusable: {e}", kind="write") from e
        job = DownloadJob(
            source_url=source_url,
            destination_dir=Path(destination_dir),
            filename=output_filename(track, filename),
            temp_dir=temp_dir,
        )
        self.events.job_started(
            source_url, track.name, track.display_artists, config.transcode
        )
        started = time.monotonic()

        try:
            self._enter(job, PipelineState.EXTRACTING)
            if not is_http_url(source_url):
                raise ExtractionError(f"Not an http(s) URL: '{source_url}'")
            result = await extract(source_url, job.extracted_path, config)
            audio_path = result.unwrap()

            if config.transcode:
                self._enter(job, PipelineState.TRANSCODING)
                await transcode(
                    audio_path,
                    job.transcoded_path,
                    config.bitrate_kbps,
                    ffmpeg_path=config.ffmpeg_path,
                    timeout=config.timeout_s,
                )
                audio_path = job.transcoded_path

            self._enter(job, PipelineState.TAGGING)
            await self._tag(job, track, audio_path)

            self._enter(job, PipelineState.PLACING)
            await place(audio_path, job.destination_path, overwrite=config.overwrite)

            self._enter(job, PipelineState.DONE)
        except MusicDlError as e:
            self._fail(job, e)
            raise
        finally:
            self._cleanup(job)

        size = job.destination_path.stat().st_size
        self.events.job_completed(
            source_url, str(job.destination_path), size, time.monotonic() - started
        )
        return job

    def _enter(self, job: DownloadJob, state: PipelineState) -> None:
        job.advance(state)
        self.events.stage_entered(job.source_url, state.value)

    def _fail(self, job: DownloadJob, error: MusicDlError) -> None:
        stage = job.state.value
        if job.can_advance(PipelineState.FAILED):
            job.advance(PipelineState.FAILED)
        self.events.job_failed(job.source_url, stage, str(error), error.kind)

    async def _tag(
        self, job: DownloadJob, track: TrackDescriptor, audio_path: Path
    ) -> None:
        cover = await self._fetch_cover(track)
        job.tagged = await asyncio.to_thread(
            self.tagger.write_tags, audio_path, TagPayload.from_track(track), cover
        )
        if not job.tagged:
            self.events.tag_write_failed(job.source_url, str(audio_path))

    async def _fetch_cover(self, track: TrackDescriptor) -> Optional[bytes]:
        if not (self.config.embed_cover and track.cover_url):
            return None
        try:
            return await fetch_buffer(track.cover_url)
        except FetchError as e:
            log.warning(f"Skipping cover art: {e}")
            return None

    def _cleanup(self, job: DownloadJob) -> None:
        """Removes every scratch file belonging to ``job``, best effort."""
        try:
            leftovers = [
                p for p in job.temp_dir.iterdir() if p.name.startswith(job.temp_prefix)
            ]
        except OSError as e:
            log.debug(f"Could not list temp dir '{job.temp_dir}': {e}")
            return
        for path in leftovers:
            try:
                os.remove(path)
            except OSError as e:
                log.debug(f"Could not remove temp file '{path}': {e}")
