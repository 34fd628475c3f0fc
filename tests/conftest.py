"""Test configuration and fixtures."""
import os
import sys
import textwrap
from pathlib import Path

import pytest

from musicdl_cli.media.fetcher import close_connection_pool
from musicdl_cli.models.config import PipelineConfig
from musicdl_cli.models.track import TrackDescriptor

if os.name == "nt":
    collect_ignore_glob = ["test_*.py"]


FAKE_YTDLP = """
import sys
import time

args = sys.argv[1:]
if args == ["--version"]:
    print("2024.01.01")
    sys.exit(0)

url = args[0]
template = args[args.index("--output") + 1]
time.sleep({delay})
if {exit_code}:
    sys.stderr.write("ERROR: [youtube] Video unavailable\\n")
    sys.exit({exit_code})
if {write_output}:
    with open(template.replace("%(ext)s", "mp3").replace("%%", "%"), "wb") as f:
        f.write(b"FAKEMP3:" + url.encode())
"""

FAKE_FFMPEG = """
import sys

args = sys.argv[1:]
if args == ["-version"] or args == ["--version"]:
    print("ffmpeg version 6.1")
    sys.exit(0)

src = args[args.index("-i") + 1]
dst = [a for a in args if a != "-y"][-1]
bitrate = args[args.index("-b:a") + 1]
if {exit_code}:
    sys.stderr.write("Error while decoding stream\\n")
    sys.exit({exit_code})
with open(src, "rb") as f:
    data = f.read()
with open(dst, "wb") as f:
    f.write(data + b"|ENC:" + bitrate.encode())
"""


def write_script(path: Path, source: str) -> Path:
    """Writes an executable Python script at ``path``."""
    path.write_text(f"#!{sys.executable}\n" + textwrap.dedent(source))
    path.chmod(0o755)
    return path


@pytest.fixture
def make_extractor(tmp_path):
    """Factory for fake yt-dlp executables."""

    def _make(exit_code=0, delay=0.0, write_output=True, name="yt-dlp"):
        source = FAKE_YTDLP.format(
            exit_code=exit_code, delay=delay, write_output=write_output
        )
        return write_script(tmp_path / "bin" / name, source)

    (tmp_path / "bin").mkdir(exist_ok=True)
    return _make


@pytest.fixture
def make_ffmpeg(tmp_path):
    """Factory for fake ffmpeg executables."""

    def _make(exit_code=0, name="ffmpeg"):
        return write_script(
            tmp_path / "bin" / name, FAKE_FFMPEG.format(exit_code=exit_code)
        )

    (tmp_path / "bin").mkdir(exist_ok=True)
    return _make


@pytest.fixture
def scratch_dir(tmp_path):
    path = tmp_path / "scratch"
    path.mkdir()
    return path


@pytest.fixture
def output_dir(tmp_path):
    path = tmp_path / "music"
    path.mkdir()
    return path


@pytest.fixture
def config(make_extractor, make_ffmpeg, scratch_dir):
    """Pipeline config wired to working fake tools."""
    return PipelineConfig(
        extractor_path=str(make_extractor()),
        ffmpeg_path=str(make_ffmpeg()),
        temp_dir=str(scratch_dir),
        bitrate_kbps=192,
    )


@pytest.fixture
def track():
    return TrackDescriptor(
        name="Blue Monday", artists=["New Order"], album_name="Power, Corruption & Lies"
    )


@pytest.fixture
async def fetch_pool():
    """Closes the shared aiohttp session after each test."""
    yield
    await close_connection_pool()
