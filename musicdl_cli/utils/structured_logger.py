"""
JSON-lines event logging for download jobs and batch sessions.

Each pipeline event is logged once through the standard logging tree and,
when a log directory is given, appended as one JSON object per line.
"""

import json
import logging
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Any

from musicdl_cli import __version__


class StructuredLogger:
    """
    Logger that outputs both human-readable and machine-parseable logs.

    Usage:
        logger = StructuredLogger("musicdl_cli")
        logger.info("job_completed",
                    url="https://youtu.be/...",
                    size_mb=7.4,
                    duration_s=12.9)
    """

    def __init__(
        self,
        name: str,
        log_dir: Path | None = None,
        enable_json: bool = True,
        enable_console: bool = True,
    ):
        """
        Initialize structured logger.

        Args:
            name: Logger name
            log_dir: Directory for JSON log files (None = disabled)
            enable_json: Enable JSON file logging
            enable_console: Enable console output
        """
        self.name = name
        self.log_dir = log_dir
        self.enable_json = enable_json and log_dir is not None
        self.enable_console = enable_console

        self._logger = logging.getLogger(name)

        self._json_file = None
        if self.enable_json:
            log_dir.mkdir(parents=True, exist_ok=True)
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            json_log_path = log_dir / f"musicdl_{timestamp}.jsonl"
            self._json_file = open(json_log_path, "a", encoding="utf-8")  # noqa: SIM115

        # Session context (added to all log entries)
        self._session_context: dict[str, Any] = {
            "session_id": f"{int(time.time())}_{id(self)}",
            "app_version": __version__,
        }

    def _format_message(self, event: str, **context) -> str:
        """Format message for console output."""
        parts = [f"[{event}]"]
        for key, value in context.items():
            if key not in ("level", "timestamp"):
                parts.append(f"{key}={value}")
        return " ".join(parts)

    def _write_json(self, level: str, event: str, **context) -> None:
        """Write structured log entry to JSON file."""
        if not self._json_file or self._json_file.closed:
            return

        entry = {
            "timestamp": datetime.now().isoformat(),
            "level": level,
            "event": event,
            **self._session_context,
            **context,
        }

        try:
            self._json_file.write(json.dumps(entry, default=str) + "\n")
            self._json_file.flush()
        except (OSError, TypeError, ValueError) as e:
            print(f"JSON logging failed: {e}", file=sys.stderr)

    def _log(self, level: int, event: str, **context) -> None:
        if self.enable_console:
            # Events are plain text; keep RichHandler from parsing [event] as markup.
            self._logger.log(
                level,
                self._format_message(event, **context),
                extra={"markup": False},
            )
        if self.enable_json:
            self._write_json(logging.getLevelName(level), event, **context)

    def debug(self, event: str, **context) -> None:
        """Log debug event."""
        self._log(logging.DEBUG, event, **context)

    def info(self, event: str, **context) -> None:
        """Log info event."""
        self._log(logging.INFO, event, **context)

    def warning(self, event: str, **context) -> None:
        """Log warning event."""
        self._log(logging.WARNING, event, **context)

    def error(self, event: str, **context) -> None:
        """Log error event."""
        self._log(logging.ERROR, event, **context)

    def close(self) -> None:
        """Close JSON log file."""
        if self._json_file and not self._json_file.closed:
            self._json_file.close()


class PipelineLogger:
    """Specialized logger for download pipeline events."""

    def __init__(self, logger: StructuredLogger):
        self.logger = logger

    def job_started(self, url: str, title: str, artist: str, transcode: bool):
        """Log a job entering the pipeline."""
        self.logger.info(
            "job_started", url=url, title=title, artist=artist, transcode=transcode
        )

    def stage_entered(self, url: str, stage: str):
        """Log a pipeline state transition."""
        self.logger.debug("stage_entered", url=url, stage=stage)

    def tag_write_failed(self, url: str, path: str):
        """Log a best-effort tag write that did not succeed."""
        self.logger.warning("tag_write_failed", url=url, path=path)

    def job_completed(self, url: str, path: str, size_bytes: int, duration_s: float):
        """Log a job that reached DONE."""
        self.logger.info(
            "job_completed",
            url=url,
            path=path,
            size_bytes=size_bytes,
            size_mb=round(size_bytes / (1024 * 1024), 2),
            duration_s=round(duration_s, 2),
        )

    def job_failed(self, url: str, stage: str, error: str, kind: str | None):
        """Log a job that reached FAILED."""
        self.logger.error(
            "job_failed", url=url, stage=stage, error=error, kind=kind
        )


class SessionLogger:
    """Specialized logger for batch session events."""

    def __init__(self, logger: StructuredLogger):
        self.logger = logger

    def session_started(self, total_jobs: int, max_workers: int, transcode: bool):
        """Log session started."""
        self.logger.info(
            "session_started",
            total_jobs=total_jobs,
            max_workers=max_workers,
            transcode=transcode,
        )

    def session_completed(
        self,
        duration_s: float,
        tracks_downloaded: int,
        tracks_failed: int,
        total_size_mb: float,
    ):
        """Log session completed."""
        self.logger.info(
            "session_completed",
            duration_s=round(duration_s, 2),
            tracks_downloaded=tracks_downloaded,
            tracks_failed=tracks_failed,
            total_size_mb=round(total_size_mb, 2),
        )

