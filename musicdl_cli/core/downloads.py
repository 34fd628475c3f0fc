"""
Function-style entry points for embedding the downloader in other programs.
"""

import os
from typing import Optional

import aiofiles

from musicdl_cli.core.pipeline import DownloadPipeline
from musicdl_cli.media.fetcher import fetch_buffer
from musicdl_cli.models.config import PipelineConfig
from musicdl_cli.models.track import TrackDescriptor


async def download_yt(
    track: TrackDescriptor,
    url: str,
    destination_dir: str | os.PathLike,
    config: Optional[PipelineConfig] = None,
) -> bytes:
    """
    Downloads ``url`` as a tagged mp3 into ``destination_dir`` and returns
    the file's contents.

    The file is saved as ``"<artists> - <title>.mp3"``.
    """
    path = await DownloadPipeline(config).run(track, url, destination_dir)
    async with aiofiles.open(path, "rb") as f:
        return await f.read()


async def download_yt_and_save(
    track: TrackDescriptor,
    url: str,
    filename: Optional[str] = None,
    destination_dir: str | os.PathLike = ".",
    config: Optional[PipelineConfig] = None,
) -> str:
    """
    Downloads ``url`` as a tagged mp3 and returns the path it was saved to.

    Args:
        track: Title, artists and album used for tags and the default filename.
        url: The page yt-dlp extracts audio from.
        filename: Name of the saved file; derived from ``track`` when omitted.
        destination_dir: Existing directory the file is moved into.
        config: Pipeline settings; defaults apply when omitted.
    """
    path = await DownloadPipeline(config).run(track, url, destination_dir, filename)
    return str(path)


async def get_buffer_from_url(url: str) -> bytes:
    """Returns the raw body of ``url``. Raises FetchError on failure."""
    return await fetch_buffer(url)
