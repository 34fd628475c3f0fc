"""Tests for moving finished files to their destination."""
import pytest

from musicdl_cli.exceptions import MoveError
from musicdl_cli.storage.placement import place


@pytest.fixture
def source(tmp_path):
    path = tmp_path / "scratch.mp3"
    path.write_bytes(b"new content")
    return path


async def test_moves_file(source, tmp_path):
    destination = tmp_path / "out.mp3"
    await place(source, destination)

    assert destination.read_bytes() == b"new content"
    assert not source.exists()


async def test_overwrites_existing_file(source, tmp_path):
    destination = tmp_path / "out.mp3"
    destination.write_bytes(b"old content that is longer")

    await place(source, destination, overwrite=True)

    assert destination.read_bytes() == b"new content"
    assert not source.exists()


async def test_refuses_to_overwrite_when_disabled(source, tmp_path):
    destination = tmp_path / "out.mp3"
    destination.write_bytes(b"old")

    with pytest.raises(MoveError) as exc_info:
        await place(source, destination, overwrite=False)

    assert exc_info.value.kind == "move"
    assert isinstance(exc_info.value.__cause__, FileExistsError)
    assert destination.read_bytes() == b"old"
    assert source.exists()


async def test_missing_destination_directory(source, tmp_path):
    with pytest.raises(MoveError) as exc_info:
        await place(source, tmp_path / "nowhere" / "out.mp3")
    assert isinstance(exc_info.value.__cause__, OSError)


async def test_missing_source(tmp_path):
    with pytest.raises(MoveError):
        await place(tmp_path / "ghost.mp3", tmp_path / "out.mp3")
