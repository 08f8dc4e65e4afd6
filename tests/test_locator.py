"""Tests for literal and regex line search."""
import re
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest
from line_loom.core.errors import LoomConfigError, LoomContractError, LoomIOError
from line_loom.lines.locator import (
    Match,
    compile_pattern,
    find_line,
    find_line_in_range,
    find_line_regex,
    find_line_regex_in_range,
    locate,
)


class TestLocate:
    """Test the search engine behind every find_* helper."""

    def setup_method(self) -> None:
        """Set up test environment."""
        self.temp_dir = tempfile.mkdtemp()
        self.test_file = Path(self.temp_dir) / "test.txt"
        self.test_file.write_bytes(
            b"def main():\r\n"
            b"    print('Hello')\r\n"
            b"    HELLO = hello()\r\n"
            b"    return main\r\n"
        )

    def teardown_method(self) -> None:
        """Clean up test environment."""
        import shutil

        shutil.rmtree(self.temp_dir)

    def test_literal_matches(self) -> None:
        matches = find_line(self.test_file, "main")

        assert matches == [
            Match(1, 4, 8, "def main():"),
            Match(4, 11, 15, "    return main"),
        ]

    def test_line_text_excludes_line_break(self) -> None:
        matches = find_line(self.test_file, "def")
        assert matches[0].line_text == "def main():"

    def test_case_sensitive_by_default(self) -> None:
        assert [m.line_number for m in find_line(self.test_file, "hello")] == [3]

    def test_case_insensitive(self) -> None:
        matches = find_line(self.test_file, "hello", case_sensitive=False)

        assert [(m.line_number, m.start_offset) for m in matches] == [(2, 11), (3, 4), (3, 12)]
        assert all(m.end_offset - m.start_offset == 5 for m in matches)

    def test_literal_metacharacters_are_escaped(self) -> None:
        """Literal search treats regex syntax as plain text."""
        matches = find_line(self.test_file, "hello()")

        assert len(matches) == 1
        assert matches[0].line_number == 3
        assert matches[0].start_offset == 12

    def test_non_overlapping_matches(self) -> None:
        self.test_file.write_text("aaaa\n")

        matches = find_line(self.test_file, "aa")

        assert [(m.start_offset, m.end_offset) for m in matches] == [(0, 2), (2, 4)]

    def test_regex(self) -> None:
        matches = find_line_regex(self.test_file, r"\b[a-z]+\(")

        assert [(m.line_number, m.start_offset) for m in matches] == [(1, 4), (2, 4), (3, 12)]

    def test_compiled_pattern(self) -> None:
        matches = find_line_regex(self.test_file, re.compile(r"^\s+return"))
        assert [m.line_number for m in matches] == [4]

    def test_compiled_pattern_case_insensitive(self) -> None:
        matches = find_line_regex(self.test_file, re.compile("HELLO"), case_sensitive=False)
        assert len(matches) == 3

    def test_range(self) -> None:
        matches = find_line_in_range(self.test_file, "main", 2, 4)
        assert [m.line_number for m in matches] == [4]

        matches = find_line_regex_in_range(self.test_file, "^def", 2, 4)
        assert matches == []

    def test_range_beyond_end_of_file(self) -> None:
        matches = find_line_in_range(self.test_file, "main", 1, 100)
        assert len(matches) == 2

    def test_single_line_range(self) -> None:
        matches = locate(self.test_file, "o", start_line=2, end_line=2)
        assert {m.line_number for m in matches} == {2}

    def test_scan_stops_after_end_line(self) -> None:
        """Lines after the range are never read."""
        seen = []

        def fake_lines(path, encoding):
            from line_loom.core.stream import Line

            for number in range(1, 1000):
                seen.append(number)
                yield Line(number, "needle", "\n")

        with patch("line_loom.lines.locator.read_lines", side_effect=fake_lines):
            matches = locate(self.test_file, "needle", start_line=3, end_line=5)

        assert [m.line_number for m in matches] == [3, 4, 5]
        assert max(seen) == 6

    def test_no_matches(self) -> None:
        assert find_line(self.test_file, "absent") == []

    def test_search_is_restartable(self) -> None:
        assert find_line(self.test_file, "main") == find_line(self.test_file, "main")

    def test_match_str(self) -> None:
        text = str(Match(3, 4, 9, "    HELLO"))
        assert text.startswith("3, start=4, end=9")

    def test_charset(self) -> None:
        self.test_file.write_bytes("größe\nnaïve\n".encode("latin-1"))

        matches = find_line(self.test_file, "naïve", charset="latin-1")

        assert matches == [Match(2, 0, 5, "naïve")]


class TestLocateErrors:
    """Test contract and I/O failures of search."""

    def setup_method(self) -> None:
        """Set up test environment."""
        self.temp_dir = tempfile.mkdtemp()
        self.test_file = Path(self.temp_dir) / "test.txt"
        self.test_file.write_text("one\ntwo\n")

    def teardown_method(self) -> None:
        """Clean up test environment."""
        import shutil

        shutil.rmtree(self.temp_dir)

    @pytest.mark.parametrize("start, end", [(0, 2), (3, 2), (-1, None)])
    def test_invalid_range(self, start: int, end: int) -> None:
        with patch("line_loom.lines.locator.read_lines") as reader:
            with pytest.raises(LoomContractError):
                locate(self.test_file, "one", start_line=start, end_line=end)
        reader.assert_not_called()

    def test_invalid_regex(self) -> None:
        with pytest.raises(LoomContractError, match="Invalid regular expression"):
            find_line_regex(self.test_file, "([unclosed")

    def test_empty_pattern(self) -> None:
        with pytest.raises(LoomContractError):
            find_line(self.test_file, "")

    def test_missing_file(self) -> None:
        with pytest.raises(LoomContractError, match="File not found"):
            find_line(Path(self.temp_dir) / "missing.txt", "one")

    def test_unknown_charset(self) -> None:
        with pytest.raises(LoomConfigError):
            find_line(self.test_file, "one", charset="no-such-charset")

    def test_decode_failure(self) -> None:
        self.test_file.write_bytes(b"ok\n\xff\xfe\n")

        with pytest.raises(LoomIOError) as exc_info:
            find_line(self.test_file, "ok")

        assert exc_info.value.operation == "locate"

    def test_compile_pattern(self) -> None:
        assert compile_pattern("a.b").pattern == re.escape("a.b")
        assert compile_pattern("a.b", regex=True).pattern == "a.b"
        assert compile_pattern("x", case_sensitive=False).flags & re.IGNORECASE
