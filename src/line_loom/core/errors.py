"""Exception hierarchy for line-addressable file operations."""
from pathlib import Path
from typing import Iterable, Optional, Union


class LoomError(Exception):
    """Base class for every error raised by line_loom."""


class LoomContractError(LoomError, ValueError):
    """Malformed request detected before any file is touched."""


class LoomConfigError(LoomContractError):
    """Invalid or unsupported configuration value (e.g. an unknown charset)."""


class ModifierResultError(LoomError, ValueError):
    """A modifier returned ``None`` or a non-string value during the scan."""

    def __init__(self, line_number: int, result: object = None):
        self.line_number = line_number
        self.result = result
        super().__init__(
            f"Modifier returned {type(result).__name__} instead of str "
            f"at line {line_number}. No changes were written."
        )


class ModifierError(LoomError):
    """A modifier raised while transforming a line."""

    def __init__(self, line_number: int):
        self.line_number = line_number
        super().__init__(f"Modifier failed at line {line_number}. No changes were written.")


class TargetNotFoundError(LoomError, LookupError):
    """Requested locus was not present in the file at scan time."""


class LineNotFoundError(TargetNotFoundError):
    """One or more requested line numbers do not exist in the file."""

    def __init__(self, missing: Iterable[int], line_count: int, path: Union[str, Path, None] = None):
        self.missing = tuple(sorted(missing))
        self.line_count = line_count
        self.path = path
        if len(self.missing) == 1:
            what = f"Line {self.missing[0]} does not exist"
        else:
            what = f"Lines {list(self.missing)} do not exist"
        where = f" in {path}" if path is not None else ""
        super().__init__(
            f"{what}{where} (total lines: {line_count}). No changes were written."
        )


class TextNotFoundError(TargetNotFoundError):
    """The substring to replace does not occur in the scanned scope."""

    def __init__(
        self,
        target: str,
        path: Union[str, Path, None] = None,
        line_number: Optional[int] = None,
    ):
        self.target = target
        self.path = path
        self.line_number = line_number
        scope = f"line {line_number}" if line_number is not None else "file"
        where = f" of {path}" if path is not None else ""
        super().__init__(
            f"No occurrence of {target!r} found in {scope}{where}. No changes were written."
        )


class LoomIOError(LoomError):
    """Underlying read, write or rename failure."""

    note = ""

    def __init__(self, operation: str, path: Union[str, Path], cause: BaseException):
        self.operation = operation
        self.path = Path(path)
        self.cause = cause
        message = describe_io_failure(operation, self.path, cause)
        if self.note:
            message = f"{message} {self.note}"
        super().__init__(message)


class CommitError(LoomIOError):
    """The finished temp file could not be moved over the target."""

    note = "Target file was not modified."


class LoomMemoryError(LoomError, MemoryError):
    """The in-memory (direct) variant cannot hold the file."""

    def __init__(self, operation: str, path: Union[str, Path], detail: str = ""):
        self.operation = operation
        self.path = Path(path)
        reason = detail or "The file is too large to edit in memory"
        super().__init__(
            f"[{operation}] {reason}: '{self.path.name}'. "
            f"Use {operation}_safe() to stream the edit through a temporary file instead."
        )


def describe_io_failure(operation: str, path: Path, cause: BaseException) -> str:
    """Build a classified message for an I/O failure."""
    name = path.name or str(path)
    if isinstance(cause, FileNotFoundError):
        return f"[{operation}] File '{name}' not found. Cannot proceed."
    if isinstance(cause, PermissionError):
        return f"[{operation}] Access denied for '{name}'. Check file permissions."
    if isinstance(cause, IsADirectoryError):
        return f"[{operation}] '{name}' is a directory, not a file."
    if isinstance(cause, UnicodeError):
        return f"[{operation}] Cannot decode or encode '{name}' with the configured charset: {cause}"
    return f"[{operation}] Failed on '{name}'. Reason: {cause}"
