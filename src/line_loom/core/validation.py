"""Pre-flight checks run before any file is opened for writing.

Every check raises :class:`LoomContractError` for the first violation it
finds and has no side effects. Modifier *results* are not checked here; they
are only known once the target line has been read.
"""
import os
import re
from collections.abc import Callable, Collection, Mapping
from pathlib import Path
from typing import Any, Union

from .errors import LoomContractError


def validate_file(file_path: Union[str, os.PathLike, None]) -> Path:
    """Check that a path names an existing, readable regular file.

    Args:
        file_path: Path to check

    Returns:
        The path as a ``Path``

    Raises:
        LoomContractError: If the path is None, missing, not a file or unreadable
    """
    if file_path is None:
        raise LoomContractError("File cannot be None")
    if not isinstance(file_path, (str, os.PathLike)):
        raise LoomContractError(f"File must be a path, got {type(file_path).__name__}")

    path = Path(file_path)
    if not path.exists():
        raise LoomContractError(f"File not found: {path.absolute()}")
    if not path.is_file():
        raise LoomContractError(f"Path is not a regular file: {path.absolute()}")
    if not os.access(path, os.R_OK):
        raise LoomContractError(f"Cannot read file: {path.absolute()}")
    return path


def validate_line_number(line_number: Any) -> int:
    """Check that a line number is a positive int (bools are rejected)."""
    if isinstance(line_number, bool) or not isinstance(line_number, int):
        raise LoomContractError(
            f"Line number must be an int, got {type(line_number).__name__}: {line_number!r}"
        )
    if line_number < 1:
        raise LoomContractError(f"Line number must be greater than 0. Got: {line_number}")
    return line_number


def validate_line_numbers(line_numbers: Any) -> frozenset:
    """Check a non-empty collection of line numbers and return it as a set."""
    if line_numbers is None or isinstance(line_numbers, (str, bytes)):
        raise LoomContractError("Line numbers must be a collection of ints")
    if not isinstance(line_numbers, Collection) or not line_numbers:
        raise LoomContractError("No line numbers provided")
    return frozenset(validate_line_number(n) for n in line_numbers)


def validate_content(value: Any, name: str = "content") -> str:
    if value is None:
        raise LoomContractError(f"{name.capitalize()} cannot be None")
    if not isinstance(value, str):
        raise LoomContractError(f"{name.capitalize()} must be a str, got {type(value).__name__}")
    return value


def _validate_mapping(mapping: Any, what: str) -> Mapping:
    if mapping is None:
        raise LoomContractError(f"{what} cannot be None")
    if not isinstance(mapping, Mapping):
        raise LoomContractError(f"{what} must be a mapping of line number to value")
    if not mapping:
        raise LoomContractError(f"{what} cannot be empty")
    for line_number in mapping:
        validate_line_number(line_number)
    return mapping


def validate_replacements(mapping: Any, what: str = "Replacements") -> dict[int, str]:
    """Check a non-empty mapping of line number -> literal payload."""
    _validate_mapping(mapping, what)
    for line_number, value in mapping.items():
        validate_content(value, f"{what} value for line {line_number}")
    return dict(mapping)


def validate_modifier(modifier: Any) -> Callable[[str], str]:
    if modifier is None:
        raise LoomContractError("Modifier cannot be None")
    if not callable(modifier):
        raise LoomContractError(f"Modifier must be callable, got {type(modifier).__name__}")
    return modifier


def validate_modifiers(mapping: Any) -> dict[int, Callable[[str], str]]:
    """Check a non-empty mapping of line number -> modifier."""
    _validate_mapping(mapping, "Modifiers")
    for modifier in mapping.values():
        validate_modifier(modifier)
    return dict(mapping)


def validate_text_target(target: Any, replacement: Any) -> tuple[str, str]:
    """Check the substring and replacement of a text replace.

    The target must be non-empty and fit on one line, since lines are
    matched one at a time.
    """
    validate_content(target, "target")
    validate_content(replacement, "replacement")
    if not target:
        raise LoomContractError("Target text cannot be empty")
    if "\n" in target or "\r" in target:
        raise LoomContractError("Target text cannot contain a line break")
    return target, replacement


def validate_pattern(pattern: Any) -> Union[str, re.Pattern]:
    if pattern is None:
        raise LoomContractError("Search pattern cannot be None")
    if isinstance(pattern, re.Pattern):
        return pattern
    if not isinstance(pattern, str):
        raise LoomContractError(f"Search pattern must be a str, got {type(pattern).__name__}")
    if not pattern:
        raise LoomContractError("Search pattern cannot be empty")
    return pattern


def validate_range(start_line: Any, end_line: Any) -> None:
    """Check a 1-based inclusive line range; ``end_line=None`` means end of file."""
    if isinstance(start_line, bool) or not isinstance(start_line, int):
        raise LoomContractError(f"Start line must be an int, got {start_line!r}")
    if end_line is not None and (isinstance(end_line, bool) or not isinstance(end_line, int)):
        raise LoomContractError(f"End line must be an int or None, got {end_line!r}")
    if start_line < 1 or (end_line is not None and end_line < start_line):
        raise LoomContractError(f"Invalid line range: {start_line} - {end_line}")
