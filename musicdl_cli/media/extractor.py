"""
Invokes yt-dlp to extract the audio track of a remote video as mp3.

Failures are returned as values: ``extract`` hands back an ExtractionResult
that either holds the produced file or the error explaining why there is none.
"""

import asyncio
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from musicdl_cli.exceptions import (
    ExtractionError,
    ToolNotInstalledError,
    UnsupportedPlatformError,
)
from musicdl_cli.models.config import PipelineConfig
from musicdl_cli.tools.locator import locate_extractor
from musicdl_cli.tools.process import run_tool

log = logging.getLogger(__name__)

AUDIO_FORMAT = "mp3"


@dataclass(frozen=True)
class ExtractionResult:
    """Outcome of one yt-dlp run: exactly one of ``path`` and ``error`` is set."""

    path: Optional[Path] = None
    error: Optional[ExtractionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.path is not None

    def unwrap(self) -> Path:
        """Returns the produced file or raises the recorded error."""
        if self.error is not None:
            raise self.error
        if self.path is None:
            raise ExtractionError("yt-dlp produced no output file.")
        return self.path


def build_extractor_args(
    executable: str,
    source_url: str,
    output_path: Path,
    config: PipelineConfig,
) -> list[str]:
    """Builds the yt-dlp command line for an audio-only mp3 extraction."""
    # yt-dlp picks the final extension itself after post-processing. A literal
    # "%" in the name must be doubled to survive its template expansion.
    template = str(output_path.with_suffix("")).replace("%", "%%") + ".%(ext)s"
    args = [
        executable,
        source_url,
        "--extract-audio",
        "--audio-format",
        AUDIO_FORMAT,
        "--audio-quality",
        str(config.audio_quality),
        "--username",
        config.auth_username,
        "--password",
        config.auth_password,
        "--referer",
        source_url,
        "--output",
        template,
        "--no-playlist",
        "--no-progress",
    ]
    if config.ffmpeg_path and os.path.dirname(config.ffmpeg_path):
        args += ["--ffmpeg-location", config.ffmpeg_path]
    return args


async def extract(
    source_url: str,
    output_path: Path,
    config: PipelineConfig,
) -> ExtractionResult:
    """
    Runs yt-dlp against ``source_url``, writing an mp3 to ``output_path``.

    The returned result is a failure when the tool is missing, exits non-zero,
    times out, or exits cleanly without leaving the expected file behind.
    Cancellation of the calling task kills yt-dlp and propagates.
    """
    try:
        executable = locate_extractor(config.extractor_path)
        args = build_extractor_args(executable, source_url, output_path, config)
        result = await run_tool(args, timeout=config.timeout_s)
    except (ToolNotInstalledError, UnsupportedPlatformError) as e:
        return ExtractionResult(error=ExtractionError(str(e)))
    except asyncio.TimeoutError:
        return ExtractionResult(
            error=ExtractionError(
                f"yt-dlp timed out after {config.timeout_s}s for {source_url}"
            )
        )

    if not result.ok:
        return ExtractionResult(
            error=ExtractionError(
                f"yt-dlp failed for {source_url}: {result.error_summary()}"
            )
        )
    if not output_path.is_file():
        return ExtractionResult(
            error=ExtractionError(
                f"yt-dlp reported success but '{output_path.name}' was not created."
            )
        )

    log.debug(f"Extracted {source_url} to '{output_path}'")
    return ExtractionResult(path=output_path)
