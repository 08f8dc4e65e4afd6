"""Tests for pre-flight validation, configuration and error classification."""
import os
import re
import tempfile
from pathlib import Path

import pytest
from line_loom.core.config import LoomConfig, resolve_charset
from line_loom.core.errors import (
    CommitError,
    LineNotFoundError,
    LoomConfigError,
    LoomContractError,
    LoomError,
    LoomIOError,
    LoomMemoryError,
    ModifierResultError,
    TargetNotFoundError,
    TextNotFoundError,
)
from line_loom.core.validation import (
    validate_content,
    validate_file,
    validate_line_number,
    validate_line_numbers,
    validate_modifier,
    validate_modifiers,
    validate_pattern,
    validate_range,
    validate_replacements,
    validate_text_target,
)


class TestValidateFile:
    """Test file existence checks."""

    def setup_method(self) -> None:
        """Set up test environment."""
        self.temp_dir = tempfile.mkdtemp()
        self.test_file = Path(self.temp_dir) / "test.txt"
        self.test_file.write_text("content\n")

    def teardown_method(self) -> None:
        """Clean up test environment."""
        import shutil

        shutil.rmtree(self.temp_dir)

    def test_existing_file(self) -> None:
        assert validate_file(str(self.test_file)) == self.test_file

    def test_none(self) -> None:
        with pytest.raises(LoomContractError, match="cannot be None"):
            validate_file(None)

    def test_missing(self) -> None:
        with pytest.raises(LoomContractError, match="File not found"):
            validate_file(Path(self.temp_dir) / "missing.txt")

    def test_directory(self) -> None:
        with pytest.raises(LoomContractError, match="not a regular file"):
            validate_file(self.temp_dir)

    def test_wrong_type(self) -> None:
        with pytest.raises(LoomContractError):
            validate_file(42)

    @pytest.mark.skipif(
        os.name == "nt" or (hasattr(os, "geteuid") and os.geteuid() == 0),
        reason="root can read anything",
    )
    def test_unreadable(self) -> None:
        os.chmod(self.test_file, 0)
        try:
            with pytest.raises(LoomContractError, match="Cannot read"):
                validate_file(self.test_file)
        finally:
            os.chmod(self.test_file, 0o644)


class TestValidateArguments:
    """Test line number and payload checks."""

    @pytest.mark.parametrize("value", [0, -1, -100])
    def test_non_positive_line_numbers(self, value: int) -> None:
        with pytest.raises(LoomContractError, match="greater than 0"):
            validate_line_number(value)

    @pytest.mark.parametrize("value", [True, 1.0, "1", None])
    def test_non_int_line_numbers(self, value: object) -> None:
        with pytest.raises(LoomContractError, match="must be an int"):
            validate_line_number(value)

    def test_positive_line_number(self) -> None:
        assert validate_line_number(7) == 7

    def test_line_numbers_collection(self) -> None:
        assert validate_line_numbers([3, 1, 3]) == frozenset({1, 3})

    @pytest.mark.parametrize("value", [None, [], set(), "123"])
    def test_empty_or_invalid_collections(self, value: object) -> None:
        with pytest.raises(LoomContractError):
            validate_line_numbers(value)

    def test_collection_with_zero(self) -> None:
        with pytest.raises(LoomContractError):
            validate_line_numbers([1, 0])

    def test_content(self) -> None:
        assert validate_content("") == ""
        with pytest.raises(LoomContractError, match="cannot be None"):
            validate_content(None)
        with pytest.raises(LoomContractError, match="must be a str"):
            validate_content(b"bytes")

    def test_replacements(self) -> None:
        assert validate_replacements({1: "a", 3: "b"}) == {1: "a", 3: "b"}

        for bad in (None, {}, [(1, "a")], {0: "a"}, {1: None}):
            with pytest.raises(LoomContractError):
                validate_replacements(bad)

    def test_modifiers(self) -> None:
        assert validate_modifier(str.upper) is str.upper
        with pytest.raises(LoomContractError):
            validate_modifier(None)
        with pytest.raises(LoomContractError):
            validate_modifier("not callable")
        with pytest.raises(LoomContractError):
            validate_modifiers({})
        with pytest.raises(LoomContractError):
            validate_modifiers({-1: str.upper})
        with pytest.raises(LoomContractError):
            validate_modifiers({1: None})

    def test_text_target(self) -> None:
        assert validate_text_target("foo", "") == ("foo", "")

        with pytest.raises(LoomContractError, match="empty"):
            validate_text_target("", "bar")
        with pytest.raises(LoomContractError, match="line break"):
            validate_text_target("foo\nbar", "baz")
        with pytest.raises(LoomContractError):
            validate_text_target(None, "bar")
        with pytest.raises(LoomContractError):
            validate_text_target("foo", None)

    def test_pattern(self) -> None:
        compiled = re.compile("x")
        assert validate_pattern(compiled) is compiled
        assert validate_pattern("x") == "x"
        for bad in (None, "", 5):
            with pytest.raises(LoomContractError):
                validate_pattern(bad)

    def test_range(self) -> None:
        validate_range(1, None)
        validate_range(2, 2)
        for start, end in ((0, 5), (5, 4), (True, 3), (1, "9")):
            with pytest.raises(LoomContractError):
                validate_range(start, end)


class TestConfig:
    """Test charset resolution and config defaults."""

    @pytest.mark.parametrize(
        "name, canonical",
        [("utf-8", "utf-8"), ("UTF8", "utf-8"), (" latin-1 ", "iso8859-1"), ("ascii", "ascii")],
    )
    def test_resolve_charset(self, name: str, canonical: str) -> None:
        assert resolve_charset(name) == canonical

    @pytest.mark.parametrize("name", [None, "", "   ", "utf 8", "no-such-charset", 8])
    def test_invalid_charsets(self, name: object) -> None:
        with pytest.raises(LoomConfigError):
            resolve_charset(name)

    def test_non_text_codec_rejected(self) -> None:
        with pytest.raises(LoomConfigError, match="not a text encoding"):
            resolve_charset("base64")

    def test_config_error_is_contract_error(self) -> None:
        assert issubclass(LoomConfigError, LoomContractError)
        assert issubclass(LoomConfigError, ValueError)

    def test_defaults(self) -> None:
        config = LoomConfig()

        assert config.encoding == "utf-8"
        assert config.default_newline == "\n"
        assert config.max_buffer_bytes is None
        assert config.fsync is False
        assert config.preserve_mode is True

    def test_set_charset(self) -> None:
        config = LoomConfig()
        config.set_charset("latin-1")
        assert config.encoding == "iso8859-1"

        with pytest.raises(LoomConfigError):
            config.set_charset("bogus-charset")
        assert config.encoding == "iso8859-1"

    def test_invalid_config_values(self) -> None:
        with pytest.raises(LoomConfigError):
            LoomConfig(charset="bogus-charset")
        with pytest.raises(LoomConfigError):
            LoomConfig(default_newline="\t")
        with pytest.raises(LoomConfigError):
            LoomConfig(max_buffer_bytes=0)


class TestErrorClassification:
    """Test the exception hierarchy and messages."""

    def test_hierarchy(self) -> None:
        assert issubclass(LineNotFoundError, TargetNotFoundError)
        assert issubclass(TextNotFoundError, TargetNotFoundError)
        assert issubclass(TargetNotFoundError, LookupError)
        assert issubclass(ModifierResultError, ValueError)
        assert not issubclass(ModifierResultError, LoomContractError)
        assert issubclass(CommitError, LoomIOError)
        assert issubclass(LoomMemoryError, MemoryError)
        for cls in (LoomContractError, TargetNotFoundError, LoomIOError, LoomMemoryError):
            assert issubclass(cls, LoomError)

    def test_line_not_found_message(self) -> None:
        error = LineNotFoundError({9, 7}, 5, "notes.txt")

        assert error.missing == (7, 9)
        assert error.line_count == 5
        assert "[7, 9]" in str(error)
        assert "total lines: 5" in str(error)

    def test_single_line_not_found_message(self) -> None:
        assert "Line 4 does not exist" in str(LineNotFoundError([4], 3))

    def test_text_not_found_message(self) -> None:
        assert "line 2" in str(TextNotFoundError("foo", "f.txt", 2))
        assert "file" in str(TextNotFoundError("foo"))

    @pytest.mark.parametrize(
        "cause, fragment",
        [
            (FileNotFoundError("x"), "not found"),
            (PermissionError("x"), "Access denied"),
            (IsADirectoryError("x"), "is a directory"),
            (UnicodeDecodeError("utf-8", b"\xff", 0, 1, "bad"), "decode"),
            (OSError("disk full"), "disk full"),
        ],
    )
    def test_io_error_classification(self, cause: BaseException, fragment: str) -> None:
        error = LoomIOError("replace_line", "/tmp/notes.txt", cause)

        assert fragment in str(error)
        assert "[replace_line]" in str(error)
        assert error.cause is cause

    def test_memory_error_suggests_safe_variant(self) -> None:
        error = LoomMemoryError("delete_line", "big.txt")
        assert "delete_line_safe()" in str(error)
