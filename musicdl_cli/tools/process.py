"""
Runs external command-line tools as asyncio child processes with an optional
timeout. Cancelling the awaiting task kills the child.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from musicdl_cli.exceptions import ToolNotInstalledError

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessResult:
    """Exit status and decoded output of a finished child process."""

    args: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def error_summary(self, limit: int = 500) -> str:
        """The most useful part of the output for an error message."""
        text = self.stderr.strip() or self.stdout.strip()
        if not text:
            return f"exited with code {self.returncode}"
        return text[-limit:]


async def _terminate(proc: asyncio.subprocess.Process) -> None:
    if proc.returncode is None:
        try:
            proc.kill()
        except ProcessLookupError:
            return
        await proc.wait()


async def run_tool(
    args: Sequence[str], timeout: Optional[float] = None
) -> ProcessResult:
    """
    Runs ``args`` and waits for it to exit.

    Args:
        args: The program followed by its arguments.
        timeout: Seconds to wait before killing the process. ``None`` waits forever.

    Returns:
        A ProcessResult; a non-zero exit status is not an exception here.

    Raises:
        ToolNotInstalledError: If the program cannot be executed at all.
        asyncio.TimeoutError: If the process outlives ``timeout``.
    """
    log.debug(f"Running: {' '.join(args)}")
    try:
        proc = await asyncio.create_subprocess_exec(
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except (FileNotFoundError, PermissionError) as e:
        raise ToolNotInstalledError(f"Cannot execute '{args[0]}': {e}") from e

    try:
        stdout_b, stderr_b = await asyncio.wait_for(proc.communicate(), timeout)
    except (asyncio.TimeoutError, asyncio.CancelledError):
        await _terminate(proc)
        raise

    return ProcessResult(
        args=tuple(args),
        returncode=proc.returncode,
        stdout=(stdout_b or b"").decode("utf-8", errors="replace"),
        stderr=(stderr_b or b"").decode("utf-8", errors="replace"),
    )
