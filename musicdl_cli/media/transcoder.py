"""
Re-encodes extracted audio to a fixed mp3 bitrate with FFmpeg.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import ffmpeg

from musicdl_cli.exceptions import ToolNotInstalledError, TranscodeError
from musicdl_cli.tools.process import run_tool

log = logging.getLogger(__name__)


def build_transcode_args(
    input_path: Path, output_path: Path, bitrate_kbps: int, ffmpeg_path: str
) -> list[str]:
    """Compiles the FFmpeg command line for a single-input mp3 encode."""
    stream = ffmpeg.input(str(input_path))
    stream = ffmpeg.output(
        stream,
        str(output_path),
        acodec="libmp3lame",
        audio_bitrate=f"{bitrate_kbps}k",
        vn=None,
    )
    stream = ffmpeg.overwrite_output(stream)
    return ffmpeg.compile(stream, cmd=ffmpeg_path)


async def transcode(
    input_path: Path,
    output_path: Path,
    bitrate_kbps: int,
    ffmpeg_path: str = "ffmpeg",
    timeout: Optional[float] = None,
) -> None:
    """
    Encodes ``input_path`` to ``output_path`` at ``bitrate_kbps``.

    Raises:
        TranscodeError: If FFmpeg is missing, fails, times out, or leaves no
        output file.
    """
    args = build_transcode_args(input_path, output_path, bitrate_kbps, ffmpeg_path)
    try:
        result = await run_tool(args, timeout=timeout)
    except ToolNotInstalledError as e:
        raise TranscodeError(str(e)) from e
    except asyncio.TimeoutError as e:
        raise TranscodeError(
            f"FFmpeg timed out after {timeout}s encoding '{input_path.name}'"
        ) from e

    if not result.ok:
        raise TranscodeError(
            f"FFmpeg failed encoding '{input_path.name}': {result.error_summary()}"
        )
    if not output_path.is_file():
        raise TranscodeError(f"FFmpeg did not create '{output_path.name}'")

    log.debug(f"Transcoded '{input_path.name}' at {bitrate_kbps} kbps")
