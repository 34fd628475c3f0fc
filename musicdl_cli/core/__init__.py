"""
Core application engine for orchestrating the download process.

This package contains the primary logic. The `DownloadPipeline` runs a single
track through extraction, transcoding, tagging and placement; the
`DownloadManager` coordinates many pipeline runs for a batch session.
"""

from .downloads import download_yt, download_yt_and_save, get_buffer_from_url
from .pipeline import DownloadPipeline

__all__ = [
    "DownloadPipeline",
    "download_yt",
    "download_yt_and_save",
    "get_buffer_from_url",
]
