"""Tests for the FFmpeg transcoding stage."""
import pytest

from musicdl_cli.exceptions import TranscodeError
from musicdl_cli.media.transcoder import build_transcode_args, transcode


@pytest.fixture
def source(tmp_path):
    path = tmp_path / "in.mp3"
    path.write_bytes(b"RAW")
    return path


def test_command_line(tmp_path):
    args = build_transcode_args(
        tmp_path / "in.mp3", tmp_path / "out.mp3", 256, "/usr/bin/ffmpeg"
    )
    assert args[0] == "/usr/bin/ffmpeg"
    assert args[args.index("-i") + 1] == str(tmp_path / "in.mp3")
    assert args[args.index("-b:a") + 1] == "256k"
    assert args[args.index("-acodec") + 1] == "libmp3lame"
    assert str(tmp_path / "out.mp3") in args
    assert "-y" in args


async def test_transcodes(make_ffmpeg, source, tmp_path):
    output = tmp_path / "out.mp3"
    await transcode(source, output, 128, ffmpeg_path=str(make_ffmpeg()))
    assert output.read_bytes() == b"RAW|ENC:128k"


async def test_failure_raises(make_ffmpeg, source, tmp_path):
    with pytest.raises(TranscodeError) as exc_info:
        await transcode(
            source, tmp_path / "out.mp3", 128, ffmpeg_path=str(make_ffmpeg(exit_code=1))
        )
    assert "Error while decoding" in str(exc_info.value)
    assert exc_info.value.kind == "transcode"


async def test_missing_ffmpeg(source, tmp_path):
    with pytest.raises(TranscodeError):
        await transcode(
            source, tmp_path / "out.mp3", 128, ffmpeg_path=str(tmp_path / "nope")
        )
