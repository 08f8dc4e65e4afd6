"""Charset-bound facade over the locator and the mutation engine."""
import dataclasses
import logging
import os
from collections.abc import Callable, Collection
from re import Pattern
from typing import Optional, Union

from .core.config import LoomConfig
from .core.errors import LoomIOError
from .core.stream import count_lines
from .core.validation import validate_file
from .lines import engine, locator
from .lines.locator import Match

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


class LineLoom:
    """Line-addressable editing of text files with one shared configuration.

    Every mutation has a direct form that rewrites the file in place and a
    ``_safe`` form that stages the result in a temp file and renames it over
    the original. Each call is an independent transaction; nothing is cached
    between calls.

    Example:
        >>> loom = LineLoom(charset="utf-8")
        >>> loom.replace_line_safe("notes.txt", 2, "BETA")
    """

    def __init__(self, config: Optional[LoomConfig] = None, charset: Optional[str] = None):
        """Initialize the facade.

        Args:
            config: Settings to use; a default LoomConfig if None
            charset: Shortcut for ``LoomConfig(charset=...)``; with a config,
                applied to a copy so the caller's config is left as is
        """
        if config is None:
            config = LoomConfig() if charset is None else LoomConfig(charset=charset)
        elif charset is not None:
            config = dataclasses.replace(config, charset=charset)
        self.config = config

    @property
    def charset(self) -> str:
        return self.config.encoding

    def set_charset(self, charset: str):
        self.config.set_charset(charset)

    def line_count(self, file_path: PathLike) -> int:
        """Number of lines in a file."""
        path = validate_file(file_path)
        try:
            return count_lines(path, self.charset)
        except (OSError, UnicodeError) as e:
            raise LoomIOError("line_count", path, e) from e

    # Search

    def locate(
        self,
        file_path: PathLike,
        pattern: Union[str, Pattern],
        case_sensitive: bool = True,
        start_line: int = 1,
        end_line: Optional[int] = None,
        regex: bool = False,
    ) -> list[Match]:
        return locator.locate(
            file_path, pattern, self.charset, case_sensitive, start_line, end_line, regex
        )

    def find_line(self, file_path: PathLike, keyword: str, case_sensitive: bool = True) -> list[Match]:
        return locator.find_line(file_path, keyword, self.charset, case_sensitive)

    def find_line_in_range(
        self,
        file_path: PathLike,
        keyword: str,
        start_line: int,
        end_line: int,
        case_sensitive: bool = True,
    ) -> list[Match]:
        return locator.find_line_in_range(
            file_path, keyword, start_line, end_line, self.charset, case_sensitive
        )

    def find_line_regex(
        self, file_path: PathLike, pattern: Union[str, Pattern], case_sensitive: bool = True
    ) -> list[Match]:
        return locator.find_line_regex(file_path, pattern, self.charset, case_sensitive)

    def find_line_regex_in_range(
        self,
        file_path: PathLike,
        pattern: Union[str, Pattern],
        start_line: int,
        end_line: int,
        case_sensitive: bool = True,
    ) -> list[Match]:
        return locator.find_line_regex_in_range(
            file_path, pattern, start_line, end_line, self.charset, case_sensitive
        )

    # Replace

    def replace_line(self, file_path: PathLike, line_number: int, content: str):
        engine.replace_line(file_path, line_number, content, config=self.config)

    def replace_line_safe(self, file_path: PathLike, line_number: int, content: str):
        engine.replace_line_safe(file_path, line_number, content, config=self.config)

    def replace_lines(self, file_path: PathLike, replacements: dict[int, str]):
        engine.replace_lines(file_path, replacements, config=self.config)

    def replace_lines_safe(self, file_path: PathLike, replacements: dict[int, str]):
        engine.replace_lines_safe(file_path, replacements, config=self.config)

    # Insert

    def insert_line(self, file_path: PathLike, line_number: int, content: str):
        engine.insert_line(file_path, line_number, content, config=self.config)

    def insert_line_safe(self, file_path: PathLike, line_number: int, content: str):
        engine.insert_line_safe(file_path, line_number, content, config=self.config)

    def insert_lines(self, file_path: PathLike, inserts: dict[int, str]):
        engine.insert_lines(file_path, inserts, config=self.config)

    def insert_lines_safe(self, file_path: PathLike, inserts: dict[int, str]):
        engine.insert_lines_safe(file_path, inserts, config=self.config)

    # Modify

    def modify_line(self, file_path: PathLike, line_number: int, modifier: Callable[[str], str]):
        engine.modify_line(file_path, line_number, modifier, config=self.config)

    def modify_line_safe(self, file_path: PathLike, line_number: int, modifier: Callable[[str], str]):
        engine.modify_line_safe(file_path, line_number, modifier, config=self.config)

    def modify_lines(self, file_path: PathLike, modifiers: dict[int, Callable[[str], str]]):
        engine.modify_lines(file_path, modifiers, config=self.config)

    def modify_lines_safe(self, file_path: PathLike, modifiers: dict[int, Callable[[str], str]]):
        engine.modify_lines_safe(file_path, modifiers, config=self.config)

    # Delete

    def delete_line(self, file_path: PathLike, line_number: int):
        engine.delete_line(file_path, line_number, config=self.config)

    def delete_line_safe(self, file_path: PathLike, line_number: int):
        engine.delete_line_safe(file_path, line_number, config=self.config)

    def delete_lines(self, file_path: PathLike, line_numbers: Collection[int]):
        engine.delete_lines(file_path, line_numbers, config=self.config)

    def delete_lines_safe(self, file_path: PathLike, line_numbers: Collection[int]):
        engine.delete_lines_safe(file_path, line_numbers, config=self.config)

    # Replace text

    def replace_text(self, file_path: PathLike, line_number: int, target: str, replacement: str) -> int:
        return engine.replace_text(file_path, line_number, target, replacement, config=self.config)

    def replace_text_safe(
        self, file_path: PathLike, line_number: int, target: str, replacement: str
    ) -> int:
        return engine.replace_text_safe(file_path, line_number, target, replacement, config=self.config)

    def replace_text_all(self, file_path: PathLike, target: str, replacement: str) -> int:
        return engine.replace_text_all(file_path, target, replacement, config=self.config)

    def replace_text_all_safe(self, file_path: PathLike, target: str, replacement: str) -> int:
        return engine.replace_text_all_safe(file_path, target, replacement, config=self.config)

    def __repr__(self) -> str:
        return f"LineLoom(charset={self.charset!r})"
