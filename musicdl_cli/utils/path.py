"""
Utilities for handling file paths and URL checks.
"""

import re
from pathlib import Path
from typing import Optional

from pathvalidate import sanitize_filename

from musicdl_cli.models.track import TrackDescriptor

AUDIO_EXTENSION = ".mp3"


def create_dir(directory_path: Path) -> None:
    """Creates a directory if it does not already exist."""
    directory_path.mkdir(parents=True, exist_ok=True)


def is_http_url(url: str) -> bool:
    """True for absolute http(s) URLs, the only kind yt-dlp is given."""
    return bool(re.match(r"^https?://[^\s/$.?#].\S*$", url, re.IGNORECASE))


def default_filename(track: TrackDescriptor) -> str:
    """
    Builds ``"<artists> - <title>.mp3"`` for a track, sanitized for the
    current platform.
    """
    artists = track.display_artists or "Unknown Artist"
    title = track.name or "Unknown Title"
    return sanitize_filename(f"{artists} - {title}{AUDIO_EXTENSION}", platform="auto")


def output_filename(track: TrackDescriptor, filename: Optional[str] = None) -> str:
    """
    Returns the caller's filename (sanitized, ``.mp3`` appended when missing)
    or the default one derived from the track.
    """
    if not filename:
        return default_filename(track)
    name = sanitize_filename(filename, platform="auto")
    if not name:
        return default_filename(track)
    if not name.lower().endswith(AUDIO_EXTENSION):
        name += AUDIO_EXTENSION
    return name
