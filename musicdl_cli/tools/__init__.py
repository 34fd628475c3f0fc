"""
External Tools Layer.

This package locates the external binaries the pipeline depends on (yt-dlp,
FFmpeg) and runs them as awaitable child processes.
"""

from .locator import (
    is_tool_installed,
    locate_extractor,
    require_tool,
    resolve_tool_path,
)
from .process import ProcessResult, run_tool

__all__ = [
    "ProcessResult",
    "is_tool_installed",
    "locate_extractor",
    "require_tool",
    "resolve_tool_path",
    "run_tool",
]
