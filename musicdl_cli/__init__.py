"""
musicdl-cli: download audio with yt-dlp, transcode it with FFmpeg and tag it.
"""

__version__ = "0.3.0"
