"""Tests for the .adl-ignore pattern engine."""

from pathlib import Path

import pytest

from adl.generator.ignore import (
    IGNORE_FILENAME,
    IgnoreChecker,
    IgnoreFileError,
    default_patterns,
    ignore_file_content,
    write_ignore_file,
)


class TestPatternMatching:
    """Tests for IgnoreChecker.should_ignore."""

    @pytest.mark.parametrize(
        "path", ["tools/weather.go", "tools/x/y.go", "tools/get_weather.go"]
    )
    def test_directory_wildcard(self, path: str) -> None:
        """Test that dir/* matches direct children and anything deeper."""
        assert IgnoreChecker(["tools/*"]).should_ignore(path)

    def test_directory_wildcard_does_not_match_siblings(self) -> None:
        """Test that tools/* does not match main.go or tools.go."""
        checker = IgnoreChecker(["tools/*"])
        assert not checker.should_ignore("main.go")
        assert not checker.should_ignore("src/tools.go")

    def test_trailing_slash_prefix(self) -> None:
        """Test that build/ matches build/out.bin but not builder/out.bin."""
        checker = IgnoreChecker(["build/"])
        assert checker.should_ignore("build/out.bin")
        assert not checker.should_ignore("builder/out.bin")

    def test_glob_is_single_segment(self) -> None:
        """Test that * does not cross directory separators."""
        checker = IgnoreChecker(["*.go"])
        assert checker.should_ignore("main.go")
        assert not checker.should_ignore("tools/weather.go")

    def test_glob_question_mark(self) -> None:
        """Test that ? matches a single character inside a * pattern."""
        checker = IgnoreChecker(["v?/*.txt"])
        assert checker.should_ignore("v1/notes.txt")
        assert not checker.should_ignore("v10/notes.txt")

    def test_exact_match(self) -> None:
        """Test that a bare pattern matches the identical path."""
        assert IgnoreChecker(["main.go"]).should_ignore("main.go")

    def test_bare_pattern_matches_as_substring(self) -> None:
        """Test that go.sum also protects vendor/go.sum.

        Bare patterns match anywhere in the path. This over-matches on
        purpose and must stay that way.
        """
        checker = IgnoreChecker(["go.sum"])
        assert checker.should_ignore("go.sum")
        assert checker.should_ignore("vendor/go.sum")

    def test_short_bare_pattern_over_matches(self) -> None:
        """Test that a short bare word protects every path containing it."""
        checker = IgnoreChecker(["main"])
        assert checker.should_ignore("main.go")
        assert checker.should_ignore("cmd/domain/handler.go")

    def test_windows_separators_are_normalized(self) -> None:
        """Test that backslash paths are matched in forward-slash form."""
        assert IgnoreChecker(["tools/*"]).should_ignore("tools\\weather.go")

    def test_empty_checker_ignores_nothing(self) -> None:
        """Test that no patterns means nothing is protected."""
        assert not IgnoreChecker().should_ignore("tools/weather.go")


class TestParsing:
    """Tests for loading the ignore file."""

    def test_comments_and_blank_lines_skipped(self) -> None:
        """Test that comments and blank lines are not patterns."""
        checker = IgnoreChecker.parse("# header\n\n  tools/*  \n#x\nbuild/\ntools/*\n")
        assert checker.patterns == ("tools/*", "build/", "tools/*")

    def test_load_missing_file(self, tmp_path: Path) -> None:
        """Test that a missing ignore file yields an empty pattern set."""
        checker = IgnoreChecker.load(tmp_path)
        assert len(checker) == 0

    def test_load_existing_file(self, tmp_path: Path) -> None:
        """Test that patterns are read from <output>/.adl-ignore."""
        (tmp_path / IGNORE_FILENAME).write_text("src/tools/*\n")
        checker = IgnoreChecker.load(tmp_path)
        assert checker.should_ignore("src/tools/get_weather.rs")

    def test_load_invalid_utf8_raises(self, tmp_path: Path) -> None:
        """Test that an undecodable ignore file raises IgnoreFileError."""
        (tmp_path / IGNORE_FILENAME).write_bytes(b"tools/\xff\n")
        with pytest.raises(IgnoreFileError, match="failed to read"):
            IgnoreChecker.load(tmp_path)


class TestIgnoreFile:
    """Tests for creating the ignore file."""

    def test_default_patterns(self) -> None:
        """Test the per-language protected paths for the minimal template."""
        assert default_patterns("go", "minimal") == ("tools/*",)
        assert default_patterns("rust", "minimal") == ("src/tools/*",)
        assert default_patterns("typescript", "minimal") == ("src/tools/*",)
        assert default_patterns("go", "unknown") == ()

    def test_content_round_trips_through_parser(self) -> None:
        """Test that the generated file parses back to its patterns."""
        content = ignore_file_content(["tools/*"])
        assert content.startswith("# .adl-ignore")
        assert IgnoreChecker.parse(content).patterns == ("tools/*",)

    def test_write_creates_file(self, tmp_path: Path) -> None:
        """Test that the file is written when absent."""
        assert write_ignore_file(tmp_path, ["tools/*"]) is True
        assert "tools/*" in (tmp_path / IGNORE_FILENAME).read_text()

    def test_write_never_overwrites(self, tmp_path: Path) -> None:
        """Test that an existing ignore file is left untouched."""
        ignore_path = tmp_path / IGNORE_FILENAME
        ignore_path.write_text("my-pattern\n")

        assert write_ignore_file(tmp_path, ["tools/*"]) is False
        assert ignore_path.read_text() == "my-pattern\n"

    def test_write_skipped_without_patterns(self, tmp_path: Path) -> None:
        """Test that no file is created when there is nothing to protect."""
        assert write_ignore_file(tmp_path, []) is False
        assert not (tmp_path / IGNORE_FILENAME).exists()
