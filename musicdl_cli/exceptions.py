"""
Defines custom exceptions for the application to allow for more specific error handling.
"""

from typing import Optional


class MusicDlError(Exception):
    """
    Base exception for all application-specific errors.

    Carries a human-readable message and an optional ``kind`` tag naming the
    stage that failed (``"fetch"``, ``"move"``, ...).
    """

    default_kind: Optional[str] = None

    def __init__(self, message: str, kind: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.kind = kind or self.default_kind


class UnsupportedPlatformError(MusicDlError):
    """Raised when no tool path is known for the current operating system."""

    default_kind = "platform"


class ToolNotInstalledError(MusicDlError):
    """Raised when an external tool (yt-dlp, ffmpeg) cannot be executed."""

    default_kind = "tool"


class FetchError(MusicDlError):
    """Raised when a remote resource cannot be retrieved."""

    default_kind = "fetch"


class ExtractionError(MusicDlError):
    """Raised when yt-dlp fails to produce an audio file."""

    default_kind = "extraction"


class TranscodeError(MusicDlError):
    """Raised when FFmpeg fails to re-encode the extracted audio."""

    default_kind = "transcode"


class TagWriteError(MusicDlError):
    """Raised when ID3 tags cannot be written. Never fails a download."""

    default_kind = "tag"


class MoveError(MusicDlError):
    """Raised when a finished file cannot be moved to its destination."""

    default_kind = "move"


class ConfigurationError(MusicDlError):
    """Raised for issues related to configuration loading or validation."""

    default_kind = "config"
