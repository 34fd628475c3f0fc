"""
Pydantic model describing the track a caller wants to download.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator


class TrackDescriptor(BaseModel):
    """Immutable description of the target audio: title, artists and album."""

    name: str = ""
    artists: list[str] = Field(default_factory=list)
    album_name: str = ""
    cover_url: Optional[str] = None

    class Config:
        """Pydantic model configuration."""

        frozen = True
        str_strip_whitespace = True

    @field_validator("artists")
    @classmethod
    def drop_blank_artists(cls, v: list[str]) -> list[str]:
        return [a.strip() for a in v if a and a.strip()]

    @property
    def display_artists(self) -> str:
        """Artists joined the way they appear in filenames and tags."""
        return ", ".join(self.artists)


class BatchEntry(TrackDescriptor):
    """One line of a batch file: a track plus where to download it from."""

    url: str
    filename: Optional[str] = None

    def to_track(self) -> TrackDescriptor:
        return TrackDescriptor(
            name=self.name,
            artists=self.artists,
            album_name=self.album_name,
            cover_url=self.cover_url,
        )
