"""
Dataclass for tracking download session statistics.
"""

import asyncio
from dataclasses import dataclass, field


@dataclass
class DownloadStats:
    """Tracks the outcome of a batch download session."""

    tracks_downloaded: int = 0
    tracks_failed: int = 0
    untagged: int = 0
    total_size_downloaded: int = 0
    failures: list[tuple[str, str]] = field(default_factory=list)
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    async def record_success(self, size_bytes: int, tagged: bool = True) -> None:
        async with self._lock:
            self.tracks_downloaded += 1
            self.total_size_downloaded += size_bytes
            if not tagged:
                self.untagged += 1

    async def record_failure(self, url: str, reason: str) -> None:
        async with self._lock:
            self.tracks_failed += 1
            self.failures.append((url, reason))

    @property
    def total(self) -> int:
        return self.tracks_downloaded + self.tracks_failed
