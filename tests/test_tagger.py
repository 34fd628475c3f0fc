"""Tests for ID3 tag payloads and the best-effort tagger."""
import mutagen.id3 as id3
import pytest

from musicdl_cli.media.tagger import Tagger, TagPayload, read_tags
from musicdl_cli.models.track import TrackDescriptor


@pytest.fixture
def audio_file(tmp_path):
    path = tmp_path / "song.mp3"
    path.write_bytes(b"\xff\xfb\x90\x00" + b"\x00" * 256)
    return path


class TestTagPayload:
    """Fallback values for missing metadata."""

    def test_from_complete_track(self):
        track = TrackDescriptor(name="Hey", artists=["A", "B"], album_name="LP")
        assert TagPayload.from_track(track) == TagPayload("Hey", "A, B", "LP")

    def test_empty_track_uses_fallbacks(self):
        payload = TagPayload.from_track(TrackDescriptor())
        assert payload.title == "Unknown Title"
        assert payload.artist == "Unknown Artist"
        assert payload.album == "Unknown Album"

    @pytest.mark.parametrize("blank", [None, "", "   "])
    def test_blank_fields_fall_back(self, blank):
        payload = TagPayload.build(blank, blank, blank)
        assert payload == TagPayload()

    def test_blank_artist_names_are_dropped(self):
        track = TrackDescriptor(name="x", artists=["", "  "], album_name="y")
        assert TagPayload.from_track(track).artist == "Unknown Artist"


class TestTagger:
    def test_writes_and_reads_back(self, audio_file):
        assert Tagger().write_tags(audio_file, TagPayload("T", "A", "Al")) is True
        assert read_tags(audio_file) == TagPayload("T", "A", "Al")

    def test_audio_payload_is_preserved(self, audio_file):
        original = audio_file.read_bytes()
        Tagger().write_tags(audio_file, TagPayload("T", "A", "Al"))
        assert audio_file.read_bytes().endswith(original)

    def test_write_with_empty_fields_falls_back(self, audio_file):
        Tagger().write_tags(audio_file, TagPayload("", "", ""))
        assert read_tags(audio_file) == TagPayload()

    def test_replaces_existing_frames(self, audio_file):
        tagger = Tagger()
        tagger.write_tags(audio_file, TagPayload("Old", "Old", "Old"))
        tagger.write_tags(audio_file, TagPayload("New", "Artist", "Album"))

        tags = id3.ID3(audio_file)
        assert len(tags.getall("TIT2")) == 1
        assert read_tags(audio_file) == TagPayload("New", "Artist", "Album")

    def test_embeds_cover(self, audio_file):
        cover = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16
        Tagger().write_tags(audio_file, TagPayload("T", "A", "Al"), cover=cover)

        frames = id3.ID3(audio_file).getall("APIC")
        assert len(frames) == 1
        assert frames[0].mime == "image/png"
        assert frames[0].data == cover

    def test_failure_is_reported_not_raised(self, tmp_path):
        missing = tmp_path / "missing" / "song.mp3"
        assert Tagger().write_tags(missing, TagPayload("T", "A", "Al")) is False

    def test_read_untagged_file(self, audio_file):
        assert read_tags(audio_file) == TagPayload()
