"""
Data Models Layer.

This package contains the Pydantic models and dataclasses that define the core
data structures used throughout the application, such as configuration, track
descriptors and download jobs.
"""

from .config import PipelineConfig
from .job import DownloadJob, PipelineState
from .stats import DownloadStats
from .track import BatchEntry, TrackDescriptor

__all__ = [
    "BatchEntry",
    "DownloadJob",
    "DownloadStats",
    "PipelineConfig",
    "PipelineState",
    "TrackDescriptor",
]
