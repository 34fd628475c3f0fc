"""
Console-script entry point: ``musicdl`` or ``python -m musicdl_cli``.

Commands report their own failures; anything that escapes them is rendered
here as an error panel.
"""

import logging
import os
import sys

from rich.console import Console

from musicdl_cli.cli.app import app
from musicdl_cli.cli.formatters import format_error_with_suggestions
from musicdl_cli.exceptions import MusicDlError

log = logging.getLogger("musicdl_cli")


def main() -> None:
    if os.name == "nt":
        # Track names routinely contain characters outside the console code page.
        for stream in (sys.stdout, sys.stderr):
            try:
                stream.reconfigure(encoding="utf-8")
            except AttributeError:
                pass

    console = Console(stderr=True)
    try:
        app()
    except MusicDlError as e:
        console.print(format_error_with_suggestions(e))
        sys.exit(1)
    except Exception as e:
        console.print(format_error_with_suggestions(e, {"type": "Unexpected"}))
        log.debug("Full traceback:", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
