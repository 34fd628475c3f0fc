"""
The transient state of a single download, from extraction to placement.
"""

import secrets
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional


class PipelineState(Enum):
    """Stages a download job moves through."""

    IDLE = "idle"
    EXTRACTING = "extracting"
    TRANSCODING = "transcoding"
    TAGGING = "tagging"
    PLACING = "placing"
    DONE = "done"
    FAILED = "failed"


# Tagging never leads to FAILED: tag writes are best effort.
_TRANSITIONS: dict[PipelineState, frozenset[PipelineState]] = {
    PipelineState.IDLE: frozenset({PipelineState.EXTRACTING}),
    PipelineState.EXTRACTING: frozenset(
        {PipelineState.TRANSCODING, PipelineState.TAGGING, PipelineState.FAILED}
    ),
    PipelineState.TRANSCODING: frozenset(
        {PipelineState.TAGGING, PipelineState.FAILED}
    ),
    PipelineState.TAGGING: frozenset({PipelineState.PLACING}),
    PipelineState.PLACING: frozenset({PipelineState.DONE, PipelineState.FAILED}),
    PipelineState.DONE: frozenset(),
    PipelineState.FAILED: frozenset(),
}


def random_suffix(nbytes: int = 4) -> str:
    """Returns a short random hex string used to keep temp filenames apart."""
    return secrets.token_hex(nbytes)


@dataclass
class DownloadJob:
    """A single-use record of one pipeline run. Never persisted or retried."""

    source_url: str
    destination_dir: Path
    filename: str
    temp_dir: Path
    suffix: str = field(default_factory=random_suffix)
    state: PipelineState = PipelineState.IDLE
    tagged: Optional[bool] = None
    history: list[PipelineState] = field(default_factory=list)

    def __post_init__(self):
        self.history.append(self.state)

    @property
    def destination_path(self) -> Path:
        return self.destination_dir / self.filename

    @property
    def temp_prefix(self) -> str:
        """
        Shared name prefix of every scratch file this job creates. Built from
        the random suffix alone: scratch names never grow with the title.
        """
        return f"musicdl-{self.suffix}."

    @property
    def extracted_path(self) -> Path:
        """Where yt-dlp is told to write its mp3."""
        return self.temp_dir / f"{self.temp_prefix}mp3"

    @property
    def transcoded_path(self) -> Path:
        return self.temp_dir / f"{self.temp_prefix}enc.mp3"

    @property
    def temp_paths(self) -> tuple[Path, Path]:
        return self.extracted_path, self.transcoded_path

    @property
    def finished(self) -> bool:
        return self.state in (PipelineState.DONE, PipelineState.FAILED)

    def can_advance(self, new_state: PipelineState) -> bool:
        return new_state in _TRANSITIONS[self.state]

    def advance(self, new_state: PipelineState) -> None:
        """
        Moves the job to ``new_state``.

        Raises:
            RuntimeError: If the transition is not allowed from the current state.
        """
        if not self.can_advance(new_state):
            raise RuntimeError(
                f"Illegal pipeline transition {self.state.value} -> {new_state.value}"
            )
        self.state = new_state
        self.history.append(new_state)
