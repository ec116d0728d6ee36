"""Tests for terminal color utilities."""

from stylekit import terminal


class TestColorDetection:
    def test_no_color_disables(self, monkeypatch) -> None:
        monkeypatch.delenv("FORCE_COLOR", raising=False)
        monkeypatch.setenv("NO_COLOR", "1")
        assert terminal._should_use_colors() is False

    def test_force_color_overrides_no_color(self, monkeypatch) -> None:
        monkeypatch.setenv("NO_COLOR", "1")
        monkeypatch.setenv("FORCE_COLOR", "1")
        assert terminal._should_use_colors() is True

    def test_supports_color_reads_cached_decision(self, monkeypatch) -> None:
        monkeypatch.setattr(terminal, "_USE_COLORS", True)
        assert terminal.supports_color()


class TestColorize:
    def test_plain_when_disabled(self) -> None:
        assert terminal.colorize("Error", "red", "bold") == "Error"

    def test_codes_when_enabled(self, monkeypatch) -> None:
        monkeypatch.setattr(terminal, "_USE_COLORS", True)
        result = terminal.colorize("Error", "red", "bold")
        assert result == "\033[31m\033[1mError\033[0m"
        assert terminal.strip_colors(result) == "Error"

    def test_no_colors_requested(self, monkeypatch) -> None:
        monkeypatch.setattr(terminal, "_USE_COLORS", True)
        assert terminal.colorize("Error") == "Error"


class TestFormatting:
    def test_error_header(self) -> None:
        assert terminal.format_error_header("S-DEF-001", "Missing tag") == "S-DEF-001: Missing tag"
        assert terminal.format_error_header(None, "Missing tag") == "Missing tag"

    def test_error_header_colored(self, monkeypatch) -> None:
        monkeypatch.setattr(terminal, "_USE_COLORS", True)
        header = terminal.format_error_header("S-DEF-001", "Missing tag")
        assert "\033[91m" in header
        assert terminal.strip_colors(header) == "S-DEF-001: Missing tag"

    def test_source_line_marker(self) -> None:
        assert terminal.format_source_line(7, "tag: h1", is_error=True) == ">  7 | tag: h1"
        assert terminal.format_source_line(12, "style:") == "  12 | style:"
