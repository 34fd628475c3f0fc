"""
Media Processing Layer.

This package is responsible for all media operations: fetching remote
buffers, extracting audio with yt-dlp, transcoding with FFmpeg and writing
ID3 tags.
"""

from .extractor import ExtractionResult, extract
from .fetcher import close_connection_pool, fetch_buffer, save_buffer
from .tagger import Tagger, TagPayload, read_tags
from .transcoder import transcode

__all__ = [
    "ExtractionResult",
    "TagPayload",
    "Tagger",
    "close_connection_pool",
    "extract",
    "fetch_buffer",
    "read_tags",
    "save_buffer",
    "transcode",
]
