"""Tests for locating and probing the external tools."""
import pytest

from musicdl_cli.exceptions import ToolNotInstalledError, UnsupportedPlatformError
from musicdl_cli.tools import locator
from musicdl_cli.tools.locator import (
    is_tool_installed,
    locate_extractor,
    require_tool,
    resolve_tool_path,
)


class TestResolveToolPath:
    """Static per-platform lookup."""

    @pytest.mark.parametrize(
        "platform, expected",
        [
            ("windows", "../../yt-dlp.exe"),
            ("win32", "../../yt-dlp.exe"),
            ("macos", "/usr/local/bin/yt-dlp"),
            ("darwin", "/usr/local/bin/yt-dlp"),
            ("linux", "/usr/local/bin/yt-dlp"),
        ],
    )
    def test_known_platforms(self, platform, expected):
        assert resolve_tool_path(platform) == expected

    @pytest.mark.parametrize("platform", ["freebsd", "aix", "", "sunos5"])
    def test_unknown_platform_raises(self, platform):
        with pytest.raises(UnsupportedPlatformError) as exc_info:
            resolve_tool_path(platform)
        assert exc_info.value.kind == "platform"

    def test_does_not_check_existence(self, tmp_path):
        """Resolution is a lookup only; the path may not exist."""
        assert resolve_tool_path("linux") == "/usr/local/bin/yt-dlp"


class TestIsToolInstalled:
    def test_missing_binary(self, tmp_path):
        assert is_tool_installed(str(tmp_path / "nope")) is False

    def test_working_binary(self, make_extractor):
        assert is_tool_installed(str(make_extractor())) is True

    def test_non_zero_exit(self, tmp_path):
        from conftest import write_script

        script = write_script(tmp_path / "broken", "import sys\nsys.exit(3)\n")
        assert is_tool_installed(str(script)) is False

    def test_require_tool_raises_when_missing(self, tmp_path):
        with pytest.raises(ToolNotInstalledError):
            require_tool(str(tmp_path / "nope"))

    def test_require_tool_returns_path(self, make_extractor):
        path = str(make_extractor())
        assert require_tool(path) == path


class TestLocateExtractor:
    def test_configured_path_wins(self, monkeypatch):
        monkeypatch.setattr(locator.shutil, "which", lambda name: "/opt/yt-dlp")
        assert locate_extractor("/custom/yt-dlp") == "/custom/yt-dlp"

    def test_path_lookup(self, monkeypatch):
        monkeypatch.setattr(locator.shutil, "which", lambda name: "/opt/bin/yt-dlp")
        assert locate_extractor() == "/opt/bin/yt-dlp"

    def test_falls_back_to_platform_path(self, monkeypatch):
        monkeypatch.setattr(locator.shutil, "which", lambda name: None)
        assert locate_extractor(platform="darwin") == "/usr/local/bin/yt-dlp"

    def test_unsupported_platform_only_fails_when_asked(self, monkeypatch):
        """Nothing is resolved at import time, so the error surfaces per call."""
        monkeypatch.setattr(locator.shutil, "which", lambda name: None)
        with pytest.raises(UnsupportedPlatformError):
            locate_extractor(platform="plan9")
