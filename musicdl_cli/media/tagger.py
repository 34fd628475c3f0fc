"""
Builds the tag payload for a track and writes it as ID3 tags to mp3 files.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

import mutagen.id3 as id3
from mutagen import MutagenError
from mutagen.id3 import ID3NoHeaderError

from musicdl_cli.exceptions import TagWriteError
from musicdl_cli.models.track import TrackDescriptor

log = logging.getLogger(__name__)

# --- Constants ---
UNKNOWN_TITLE = "Unknown Title"
UNKNOWN_ARTIST = "Unknown Artist"
UNKNOWN_ALBUM = "Unknown Album"


@dataclass(frozen=True)
class TagPayload:
    """The title/artist/album triple written into a file's tag container."""

    title: str = UNKNOWN_TITLE
    artist: str = UNKNOWN_ARTIST
    album: str = UNKNOWN_ALBUM

    @classmethod
    def build(
        cls,
        title: Optional[str] = None,
        artist: Optional[str] = None,
        album: Optional[str] = None,
    ) -> "TagPayload":
        """Creates a payload, substituting the fallbacks for blank fields."""
        return cls(
            title=(title or "").strip() or UNKNOWN_TITLE,
            artist=(artist or "").strip() or UNKNOWN_ARTIST,
            album=(album or "").strip() or UNKNOWN_ALBUM,
        )

    @classmethod
    def from_track(cls, track: TrackDescriptor) -> "TagPayload":
        return cls.build(track.name, track.display_artists, track.album_name)


class Tagger:
    """Writes metadata tags to MP3 files. Failures are logged, never raised."""

    def write_tags(
        self,
        file_path: str | os.PathLike,
        payload: TagPayload,
        cover: Optional[bytes] = None,
    ) -> bool:
        """
        Replaces the title, artist and album frames of ``file_path``.

        Args:
            file_path: The mp3 to mutate in place.
            payload: Values to write. Blank fields fall back to "Unknown ...".
            cover: Optional JPEG/PNG bytes embedded as the front cover.

        Returns:
            True if the tags were saved, False otherwise.
        """
        payload = TagPayload.build(payload.title, payload.artist, payload.album)
        try:
            self._tag_mp3(os.fspath(file_path), payload, cover)
        except TagWriteError as e:
            log.error(
                str(e),
                exc_info=log.getEffectiveLevel() == logging.DEBUG,
            )
            return False
        return True

    def _tag_mp3(self, path: str, payload: TagPayload, cover: Optional[bytes]):
        try:
            try:
                audio = id3.ID3(path)
            except ID3NoHeaderError:
                audio = id3.ID3()

            audio.setall("TIT2", [id3.TIT2(encoding=3, text=payload.title)])
            audio.setall("TPE1", [id3.TPE1(encoding=3, text=payload.artist)])
            audio.setall("TALB", [id3.TALB(encoding=3, text=payload.album)])

            if cover:
                self._embed_cover(audio, cover)

            audio.save(path, v2_version=3)
        except (MutagenError, OSError) as e:
            raise TagWriteError(
                f"Failed to tag file '{os.path.basename(path)}': {e}"
            ) from e
        log.debug(f"ID3 tags written to '{os.path.basename(path)}'")

    def _embed_cover(self, audio: id3.ID3, cover: bytes):
        mime = "image/png" if cover.startswith(b"\x89PNG") else "image/jpeg"
        audio.delall("APIC")
        audio.add(id3.APIC(encoding=3, mime=mime, type=3, desc="Cover", data=cover))


def read_tags(file_path: str | os.PathLike) -> TagPayload:
    """
    Reads back the title/artist/album frames of ``file_path``.

    Missing frames come back as the "Unknown ..." fallbacks.
    """
    try:
        audio = id3.ID3(os.fspath(file_path))
    except ID3NoHeaderError:
        return TagPayload()

    def first(frame_id: str) -> Optional[str]:
        frame = audio.get(frame_id)
        return str(frame.text[0]) if frame and frame.text else None

    return TagPayload.build(first("TIT2"), first("TPE1"), first("TALB"))
