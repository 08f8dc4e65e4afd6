"""Read-only search for literal or regex occurrences within numbered lines."""
import logging
import os
import re
from contextlib import closing
from re import Pattern
from typing import NamedTuple, Optional, Union

from ..core.config import DEFAULT_CHARSET, resolve_charset
from ..core.errors import LoomContractError, LoomIOError
from ..core.safety import performance_monitor
from ..core.stream import read_lines
from ..core.validation import validate_file, validate_pattern, validate_range

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


class Match(NamedTuple):
    """A located occurrence.

    Offsets index into ``line_text``; ``end_offset`` is exclusive.
    """

    line_number: int
    start_offset: int
    end_offset: int
    line_text: str

    def __str__(self) -> str:
        return f"{self.line_number}, start={self.start_offset}, end={self.end_offset}, text={self.line_text!r}"


def compile_pattern(
    pattern: Union[str, Pattern], case_sensitive: bool = True, regex: bool = False
) -> Pattern:
    """Build the matcher used by :func:`locate`.

    Literal patterns are escaped, so case-insensitive matching goes through
    the regex flag and offsets always refer to the original line text.
    """
    if isinstance(pattern, Pattern):
        if not case_sensitive and not pattern.flags & re.IGNORECASE:
            return re.compile(pattern.pattern, pattern.flags | re.IGNORECASE)
        return pattern

    flags = 0 if case_sensitive else re.IGNORECASE
    source = pattern if regex else re.escape(pattern)
    try:
        return re.compile(source, flags)
    except re.error as e:
        raise LoomContractError(f"Invalid regular expression {pattern!r}: {e}") from e


def locate(
    file_path: PathLike,
    pattern: Union[str, Pattern],
    charset: str = DEFAULT_CHARSET,
    case_sensitive: bool = True,
    start_line: int = 1,
    end_line: Optional[int] = None,
    regex: bool = False,
) -> list[Match]:
    """Find every occurrence of a pattern within an optional line range.

    Args:
        file_path: File to search
        pattern: Literal text, regex source (with ``regex=True``) or compiled pattern
        charset: File encoding
        case_sensitive: Whether matching is case sensitive
        start_line: First line to search (1-based, inclusive)
        end_line: Last line to search (inclusive, None for end of file)
        regex: Treat a str pattern as a regular expression

    Returns:
        Matches in file order, left to right within a line

    Raises:
        LoomContractError: For an invalid file, pattern or range
        LoomIOError: If the file cannot be read
    """
    path = validate_file(file_path)
    validate_pattern(pattern)
    validate_range(start_line, end_line)
    encoding = resolve_charset(charset)
    matcher = compile_pattern(pattern, case_sensitive, regex)

    matches = []
    with performance_monitor.measure_operation("locate"):
        try:
            with closing(read_lines(path, encoding)) as lines:
                for line in lines:
                    if end_line is not None and line.number > end_line:
                        break
                    if line.number < start_line:
                        continue
                    for found in matcher.finditer(line.content):
                        matches.append(
                            Match(line.number, found.start(), found.end(), line.content)
                        )
        except (OSError, UnicodeError) as e:
            logger.error(f"Failed to search {path}: {e}")
            raise LoomIOError("locate", path, e) from e

    logger.debug(f"Found {len(matches)} matches for {matcher.pattern!r} in {path}")
    return matches


def find_line(
    file_path: PathLike,
    keyword: str,
    charset: str = DEFAULT_CHARSET,
    case_sensitive: bool = True,
) -> list[Match]:
    """Find literal occurrences of ``keyword`` in the whole file."""
    return locate(file_path, keyword, charset, case_sensitive)


def find_line_in_range(
    file_path: PathLike,
    keyword: str,
    start_line: int,
    end_line: int,
    charset: str = DEFAULT_CHARSET,
    case_sensitive: bool = True,
) -> list[Match]:
    """Find literal occurrences of ``keyword`` between two lines (inclusive)."""
    return locate(file_path, keyword, charset, case_sensitive, start_line, end_line)


def find_line_regex(
    file_path: PathLike,
    pattern: Union[str, Pattern],
    charset: str = DEFAULT_CHARSET,
    case_sensitive: bool = True,
) -> list[Match]:
    """Find regex matches in the whole file."""
    return locate(file_path, pattern, charset, case_sensitive, regex=True)


def find_line_regex_in_range(
    file_path: PathLike,
    pattern: Union[str, Pattern],
    start_line: int,
    end_line: int,
    charset: str = DEFAULT_CHARSET,
    case_sensitive: bool = True,
) -> list[Match]:
    """Find regex matches between two lines (inclusive)."""
    return locate(file_path, pattern, charset, case_sensitive, start_line, end_line, regex=True)

