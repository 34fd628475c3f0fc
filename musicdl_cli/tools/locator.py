"""
Finds the yt-dlp executable. Nothing is resolved at import time; callers ask
for a path when they need one.
"""

import logging
import shutil
import subprocess
import sys
from typing import Optional

from musicdl_cli.exceptions import ToolNotInstalledError, UnsupportedPlatformError

log = logging.getLogger(__name__)

EXTRACTOR_NAME = "yt-dlp"

# Static per-platform install locations. Existence is not checked.
_PLATFORM_PATHS = {
    "windows": "../../yt-dlp.exe",
    "macos": "/usr/local/bin/yt-dlp",
    "linux": "/usr/local/bin/yt-dlp",
}

_PLATFORM_ALIASES = {
    "win32": "windows",
    "windows": "windows",
    "darwin": "macos",
    "macos": "macos",
    "linux": "linux",
}


def is_tool_installed(
    tool: str = EXTRACTOR_NAME, version_flag: str = "--version"
) -> bool:
    """
    Returns True if ``tool --version`` runs and exits cleanly. FFmpeg wants
    ``version_flag="-version"``.

    A missing binary, a permission problem or a non-zero exit all count as
    "not installed".
    """
    try:
        subprocess.run(
            [tool, version_flag],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=True,
            timeout=30,
        )
    except (OSError, subprocess.SubprocessError) as e:
        log.debug(f"'{tool} {version_flag}' failed: {e}")
        return False
    return True


def resolve_tool_path(platform: Optional[str] = None) -> str:
    """
    Looks up the hardcoded yt-dlp location for ``platform``.

    Args:
        platform: ``windows``, ``macos`` or ``linux`` (``sys.platform`` values
            ``win32`` and ``darwin`` are accepted too). Defaults to the
            running platform.

    Raises:
        UnsupportedPlatformError: For any other platform value.
    """
    platform = platform if platform is not None else sys.platform
    key = _PLATFORM_ALIASES.get(platform.lower())
    if key is None:
        raise UnsupportedPlatformError(f"Unsupported operating system: {platform}")
    return _PLATFORM_PATHS[key]


def locate_extractor(
    configured: Optional[str] = None, platform: Optional[str] = None
) -> str:
    """
    Picks the yt-dlp executable for a job.

    An explicitly configured path wins, then whatever is on PATH, then the
    static per-platform location.
    """
    if configured:
        return configured
    if found := shutil.which(EXTRACTOR_NAME):
        return found
    path = resolve_tool_path(platform)
    log.debug(f"yt-dlp not on PATH, falling back to {path}")
    return path


def require_tool(tool: str) -> str:
    """
    Returns ``tool`` unchanged if it runs.

    Raises:
        ToolNotInstalledError: If ``tool --version`` fails.
    """
    if not is_tool_installed(tool):
        raise ToolNotInstalledError(f"'{tool}' is not installed or not executable.")
    return tool
