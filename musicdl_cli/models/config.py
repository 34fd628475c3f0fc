"""
Pydantic model for application configuration.
Provides robust validation for all settings.
"""

import tempfile
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, field_validator, model_validator

SUPPORTED_BITRATES = (32, 64, 96, 128, 160, 192, 224, 256, 320)


class PipelineConfig(BaseModel):
    """A validated configuration model for the download pipeline."""

    # External tools
    extractor_path: Optional[str] = None
    ffmpeg_path: str = "ffmpeg"

    # Extraction settings
    audio_quality: int = 0
    auth_username: str = "oauth2"
    auth_password: str = ""

    # Transcoding
    transcode: bool = True
    bitrate_kbps: int = 320

    # Job behaviour
    timeout_s: Optional[float] = None
    temp_dir: Optional[str] = None
    overwrite: bool = True
    embed_cover: bool = False
    max_workers: int = 4

    class Config:
        """Pydantic model configuration."""

        validate_assignment = True
        str_strip_whitespace = True

    @field_validator("extractor_path", "temp_dir")
    @classmethod
    def empty_as_none(cls, v: Optional[str]) -> Optional[str]:
        """Treats blank INI values as unset."""
        return v or None

    @field_validator("audio_quality")
    @classmethod
    def validate_audio_quality(cls, v: int) -> int:
        """yt-dlp accepts VBR quality 0 (best) through 10 (worst)."""
        if v < 0 or v > 10:
            raise ValueError("Audio quality must be between 0 (best) and 10.")
        return v

    @field_validator("bitrate_kbps")
    @classmethod
    def validate_bitrate(cls, v: int) -> int:
        """Ensures the bitrate is one LAME can encode at."""
        if v not in SUPPORTED_BITRATES:
            raise ValueError(
                "Bitrate must be one of "
                + ", ".join(str(b) for b in SUPPORTED_BITRATES)
                + " kbps."
            )
        return v

    @field_validator("timeout_s")
    @classmethod
    def validate_timeout(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v <= 0:
            raise ValueError("Timeout must be a positive number of seconds.")
        return v

    @field_validator("max_workers")
    @classmethod
    def validate_workers(cls, v: int) -> int:
        """Ensures a reasonable number of workers."""
        if v < 1 or v > 16:
            raise ValueError("Max workers must be between 1 and 16.")
        return v

    @model_validator(mode="after")
    def validate_ffmpeg(self) -> "PipelineConfig":
        """Transcoding needs somewhere to find FFmpeg."""
        if self.transcode and not self.ffmpeg_path:
            raise ValueError("'ffmpeg_path' is required when transcoding is enabled.")
        return self

    def resolved_temp_dir(self) -> Path:
        """Returns the scratch directory for intermediate files, creating it."""
        base = (
            Path(self.temp_dir)
            if self.temp_dir
            else Path(tempfile.gettempdir()) / "musicdl"
        )
        base.mkdir(parents=True, exist_ok=True)
        return base

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that are expected in the INI file."""
        return set(cls.model_fields)
