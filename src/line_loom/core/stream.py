"""Line-oriented read cursor and write sink."""
import io
import logging
from collections.abc import Iterator
from pathlib import Path
from typing import NamedTuple, TextIO, Union

logger = logging.getLogger(__name__)


class Line(NamedTuple):
    """A single line seen during a scan."""

    number: int
    content: str
    terminator: str

    @property
    def raw(self) -> str:
        return self.content + self.terminator


def split_terminator(raw: str) -> tuple[str, str]:
    """Split a raw line into (content, terminator).

    Args:
        raw: Line as read with ``newline=""``

    Returns:
        Content without its line break and the line break itself ('' if none)
    """
    if raw.endswith("\r\n"):
        return raw[:-2], "\r\n"
    if raw.endswith("\n") or raw.endswith("\r"):
        return raw[:-1], raw[-1]
    return raw, ""


def read_lines(file_path: Union[str, Path], encoding: str) -> Iterator[Line]:
    """Stream numbered lines from a file.

    Line breaks are kept exactly as stored so unchanged lines can be written
    back byte for byte. The file is closed when the generator is exhausted
    or closed.

    Args:
        file_path: File to read
        encoding: Codec name

    Yields:
        Line records numbered from 1
    """
    with open(file_path, encoding=encoding, newline="") as f:
        for number, raw in enumerate(f, 1):
            content, terminator = split_terminator(raw)
            yield Line(number, content, terminator)


def open_sink(file_path: Union[str, Path], encoding: str, append: bool = False) -> TextIO:
    """Open a text sink that writes line breaks untranslated."""
    return open(file_path, "a" if append else "w", encoding=encoding, newline="")


def memory_sink() -> io.StringIO:
    """In-memory accumulator used by the direct variants."""
    return io.StringIO(newline="")


def count_lines(file_path: Union[str, Path], encoding: str) -> int:
    """Count lines in file efficiently."""
    count = 0
    for _ in read_lines(file_path, encoding):
        count += 1
    return count
