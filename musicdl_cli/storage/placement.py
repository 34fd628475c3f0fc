"""
Moves finished files from the scratch directory to their destination.
"""

import asyncio
import logging
import os
import shutil
from pathlib import Path

from musicdl_cli.exceptions import MoveError

log = logging.getLogger(__name__)


def _move(source: Path, destination: Path, overwrite: bool) -> None:
    if destination.exists():
        if not overwrite:
            raise FileExistsError(f"'{destination}' already exists")
        if destination.is_dir():
            raise IsADirectoryError(f"'{destination}' is a directory")
        os.remove(destination)
    shutil.move(os.fspath(source), os.fspath(destination))


async def place(
    source_path: str | os.PathLike,
    destination_path: str | os.PathLike,
    overwrite: bool = True,
) -> None:
    """
    Moves ``source_path`` to ``destination_path``.

    An existing file at the destination is replaced when ``overwrite`` is set.
    The destination directory must already exist.

    Raises:
        MoveError: Wrapping whatever OSError prevented the move.
    """
    source, destination = Path(source_path), Path(destination_path)
    try:
        await asyncio.to_thread(_move, source, destination, overwrite)
    except OSError as e:
        raise MoveError(f"Error moving file to: {destination} ({e})") from e
    log.debug(f"File moved to: {destination}")
